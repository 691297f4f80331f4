import logging
from decimal import Decimal
from typing import Iterable, Optional

from bookcart.config import settings
from bookcart.exceptions import ConversionUnavailable
from bookcart.schemas.cart_schemas import CartLine
from bookcart.schemas.checkout_schemas import CheckoutTotals, Discount, Money, PricedAmount
from bookcart.services.exchange_rate_service import ExchangeRateService
from bookcart.services.shipping_service import ShippingService
from bookcart.utils.currency import quantize

logger = logging.getLogger(__name__)


class PricingEngine:
    """Checkout totals for a set of cart lines.

    Everything is computed in the catalog's base currency; conversion to
    the display currency happens last and per amount. An amount that can't
    be converted is shown in base currency instead.
    """

    def __init__(
        self,
        shipping: ShippingService,
        rates: ExchangeRateService,
        base_currency: Optional[str] = None,
        tax_rate: Optional[Decimal] = None,
    ):
        self.shipping = shipping
        self.rates = rates
        self.base_currency = base_currency or settings.base_currency
        self.tax_rate = settings.tax_rate if tax_rate is None else tax_rate

    def subtotal(self, lines: Iterable[CartLine]) -> Decimal:
        return quantize(sum((line.line_total for line in lines), Decimal("0")))

    def discount_amount(self, subtotal: Decimal, discount: Optional[Discount]) -> Decimal:
        if discount is None:
            return Decimal("0.00")

        if discount.discount_type == "percentage":
            amount = subtotal * discount.value / 100
            if discount.maximum_discount_amount is not None:
                amount = min(amount, discount.maximum_discount_amount)
        else:
            amount = discount.value

        # never more than the goods themselves
        return quantize(min(amount, subtotal))

    async def _price(self, amount: Decimal, display_currency: str) -> PricedAmount:
        base = Money(amount=amount, currency=self.base_currency)
        if display_currency == self.base_currency:
            return PricedAmount(base=base, display=base)

        try:
            converted = await self.rates.convert(amount, self.base_currency, display_currency)
        except ConversionUnavailable as e:
            logger.warning(f"Showing {amount} {self.base_currency} unconverted: {e}")
            return PricedAmount(base=base, display=base)

        return PricedAmount(
            base=base,
            display=Money(amount=quantize(converted), currency=display_currency),
        )

    async def totals(
        self,
        lines: Iterable[CartLine],
        country_code: Optional[str],
        display_currency: Optional[str] = None,
        discount: Optional[Discount] = None,
    ) -> CheckoutTotals:
        display_currency = (display_currency or self.base_currency).upper()

        subtotal = self.subtotal(lines)
        quote = await self.shipping.quote(country_code)
        shipping_cost = quantize(quote.shipping_cost)
        tax = quantize(subtotal * self.tax_rate)
        discount_amount = self.discount_amount(subtotal, discount)
        grand_total = max(subtotal + shipping_cost + tax - discount_amount, Decimal("0.00"))

        return CheckoutTotals(
            subtotal=await self._price(subtotal, display_currency),
            shipping_cost=await self._price(shipping_cost, display_currency),
            tax=await self._price(tax, display_currency),
            discount=await self._price(discount_amount, display_currency),
            grand_total=await self._price(grand_total, display_currency),
            display_currency=display_currency,
            shipping_is_free=shipping_cost == 0,
            shipping_is_default=quote.is_default,
            min_delivery_days=quote.min_delivery_days,
            max_delivery_days=quote.max_delivery_days,
        )
