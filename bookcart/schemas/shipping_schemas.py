from pydantic import BaseModel
from typing import Optional
from decimal import Decimal


class ShippingQuote(BaseModel):
    country_code: Optional[str] = None
    country_name: Optional[str] = None
    shipping_cost: Decimal
    min_delivery_days: int
    max_delivery_days: int
    is_default: bool = False
