from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal


class Book(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    author: str
    image_url: Optional[str] = None

    #Shop Details
    price: Decimal = Field(max_digits=10, decimal_places=2)
    stock: int = 0
    condition: str = "new"
    featured: bool = False
    bestseller: bool = False

    #timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def in_stock(self) -> bool:
        return self.stock is not None and self.stock > 0
