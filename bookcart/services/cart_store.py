from typing import List, Protocol

from bookcart.schemas.cart_schemas import CartLine


class CartStore(Protocol):
    """What the storefront needs from a cart, wherever its lines live."""

    async def list(self) -> List[CartLine]:
        ...

    async def count(self) -> int:
        ...

    async def add(self, book_id: int, quantity: int = 1) -> CartLine:
        ...

    async def update(self, line_id: int, quantity: int) -> CartLine:
        ...

    async def remove(self, line_id: int) -> None:
        ...

    async def clear(self) -> None:
        ...
