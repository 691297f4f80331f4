from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from bookcart.schemas.book_schemas import BookRead


class CartAddRequest(BaseModel):
    book_id: int
    quantity: int = 1

class CartUpdateRequest(BaseModel):
    quantity: int


class CartLine(BaseModel):
    id: int
    book_id: int
    book: BookRead
    quantity: int = Field(ge=1)
    owner_id: Optional[str] = None   # None for anonymous lines
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def line_total(self):
        return self.book.price * self.quantity
