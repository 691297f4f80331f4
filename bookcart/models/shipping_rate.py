from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal

REST_OF_WORLD = "REST_OF_WORLD"


class ShippingRate(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    # ISO 3166-1 alpha-2 code or REST_OF_WORLD
    country_code: str = Field(index=True, max_length=20)
    country_name: str
    shipping_cost: Decimal = Field(max_digits=10, decimal_places=2)
    min_delivery_days: int
    max_delivery_days: int
    is_default: bool = False
    is_active: bool = True

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
