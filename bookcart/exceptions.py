from typing import Any, Dict, Optional


class CartError(Exception):
    """Base class for cart and checkout failures shown to the shopper."""

    code = "cart_error"

    def to_detail(self) -> Dict[str, Any]:
        return {"code": self.code, "message": str(self)}


class OutOfStock(CartError):
    code = "out_of_stock"

    def __init__(self, book_id: int, title: Optional[str] = None):
        self.book_id = book_id
        self.title = title
        name = f"'{title}'" if title else f"Book {book_id}"
        super().__init__(f"{name} is out of stock")

    def to_detail(self):
        return {**super().to_detail(), "book_id": self.book_id, "title": self.title, "available": 0}


class StockExceeded(CartError):
    code = "stock_exceeded"

    def __init__(self, book_id: int, available: int, in_cart: int = 0):
        self.book_id = book_id
        self.available = available
        self.in_cart = in_cart
        message = f"Only {available} items available in stock."
        if in_cart:
            message += f" You already have {in_cart} in your cart."
        super().__init__(message)

    def to_detail(self):
        return {
            **super().to_detail(),
            "book_id": self.book_id,
            "available": self.available,
            "in_cart": self.in_cart,
        }


class InvalidQuantity(CartError):
    code = "invalid_quantity"

    def __init__(self, quantity: int):
        self.quantity = quantity
        super().__init__(f"Quantity must be at least 1 (got {quantity})")

    def to_detail(self):
        return {**super().to_detail(), "quantity": self.quantity}


class LineNotFound(CartError):
    code = "line_not_found"

    def __init__(self, line_id):
        self.line_id = line_id
        super().__init__("Item not found in cart")

    def to_detail(self):
        return {**super().to_detail(), "line_id": self.line_id}


class BookNotFound(CartError):
    code = "book_not_found"

    def __init__(self, book_id):
        self.book_id = book_id
        super().__init__("Book not found")

    def to_detail(self):
        return {**super().to_detail(), "book_id": self.book_id}


class CartServiceError(CartError):
    """The storefront API answered with something the client can't map."""

    code = "service_error"

    def __init__(self, status_code: Optional[int], detail: Any = None):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Cart service failed ({status_code}): {detail}")


class ConversionUnavailable(CartError):
    code = "conversion_unavailable"

    def __init__(self, base: str, target: str, reason: str = ""):
        self.base = base
        self.target = target
        message = f"No exchange rate for {base} -> {target}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


def error_from_detail(status_code: int, detail: Any) -> CartError:
    """Rebuild the domain error a cart route raised from its JSON ``detail``."""
    if not isinstance(detail, dict):
        return CartServiceError(status_code, detail)

    code = detail.get("code")
    if code == OutOfStock.code:
        return OutOfStock(detail.get("book_id"), detail.get("title"))
    if code == StockExceeded.code:
        return StockExceeded(
            detail.get("book_id"),
            available=detail.get("available", 0),
            in_cart=detail.get("in_cart", 0),
        )
    if code == InvalidQuantity.code:
        return InvalidQuantity(detail.get("quantity", 0))
    if code == LineNotFound.code:
        return LineNotFound(detail.get("line_id"))
    if code == BookNotFound.code:
        return BookNotFound(detail.get("book_id"))
    return CartServiceError(status_code, detail)
