from typing import Optional
from bookcart.exceptions import InvalidQuantity, OutOfStock, StockExceeded


def ensure_positive_quantity(quantity: int) -> None:
    if quantity is None or quantity < 1:
        raise InvalidQuantity(quantity)


def check_add(
    book_id: int,
    stock: Optional[int],
    in_cart: int,
    quantity: int,
    title: Optional[str] = None,
) -> int:
    """Validate adding ``quantity`` on top of ``in_cart`` and return the new line quantity."""
    ensure_positive_quantity(quantity)

    stock = stock or 0
    if stock <= 0:
        raise OutOfStock(book_id, title)

    new_quantity = in_cart + quantity
    if new_quantity > stock:
        raise StockExceeded(book_id, available=stock, in_cart=in_cart)

    return new_quantity


def check_update(book_id: int, stock: Optional[int], quantity: int) -> int:
    ensure_positive_quantity(quantity)

    stock = stock or 0
    if quantity > stock:
        raise StockExceeded(book_id, available=stock)

    return quantity
