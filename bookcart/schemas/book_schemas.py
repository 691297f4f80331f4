from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from decimal import Decimal


class BookRead(BaseModel):
    """Catalog fields a cart line keeps as its snapshot."""
    id: int
    title: str
    author: str
    image_url: Optional[str] = None
    price: Decimal
    stock: int = 0
    condition: str = "new"
    featured: bool = False
    bestseller: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
