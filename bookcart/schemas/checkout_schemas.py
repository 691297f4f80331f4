# bookcart/schemas/checkout_schemas.py
from pydantic import BaseModel, Field
from decimal import Decimal
from typing import Literal, Optional
from bookcart.utils.currency import format_price


class Money(BaseModel):
    amount: Decimal
    currency: str

    def format(self) -> str:
        return format_price(self.amount, self.currency)


class PricedAmount(BaseModel):
    base: Money       # catalog accounting currency
    display: Money    # session display currency, or base on fallback


class Discount(BaseModel):
    discount_type: Literal["percentage", "fixed"]
    value: Decimal = Field(ge=0)                        # percent, or base-currency amount
    maximum_discount_amount: Optional[Decimal] = Field(default=None, ge=0)  # cap for percentage


class CheckoutTotals(BaseModel):
    subtotal: PricedAmount       # sum of price * quantity
    shipping_cost: PricedAmount
    tax: PricedAmount            # subtotal * flat tax rate
    discount: PricedAmount       # coupon amount, zero without one
    grand_total: PricedAmount    # subtotal + shipping + tax - discount, not below zero

    display_currency: str
    shipping_is_free: bool
    shipping_is_default: bool
    min_delivery_days: int
    max_delivery_days: int

    @property
    def fully_converted(self) -> bool:
        return all(
            amount.display.currency == self.display_currency
            for amount in (self.subtotal, self.shipping_cost, self.tax, self.discount, self.grand_total)
        )

    @property
    def shipping_label(self) -> str:
        if self.shipping_is_free:
            return "Free"
        return self.shipping_cost.display.format()

    @property
    def delivery_time(self) -> str:
        if self.min_delivery_days == self.max_delivery_days:
            return f"{self.min_delivery_days} days"
        return f"{self.min_delivery_days}-{self.max_delivery_days} days"
