from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select
from bookcart.database import get_session
from bookcart.exceptions import (
    BookNotFound,
    CartError,
    InvalidQuantity,
    LineNotFound,
    OutOfStock,
    StockExceeded,
)
from bookcart.models.book import Book
from bookcart.models.cart import CartItem
from bookcart.schemas.book_schemas import BookRead
from bookcart.schemas.cart_schemas import CartAddRequest, CartLine, CartUpdateRequest
from bookcart.services.stock_service import check_add, check_update
from bookcart.utils.token import get_current_owner
from datetime import datetime


router = APIRouter()

ERROR_STATUS = {
    InvalidQuantity: 400,
    BookNotFound: 404,
    LineNotFound: 404,
    OutOfStock: 409,
    StockExceeded: 409,
}


def http_error(error: CartError) -> HTTPException:
    return HTTPException(
        status_code=ERROR_STATUS.get(type(error), 400),
        detail=error.to_detail(),
    )


def build_line(item: CartItem, book: Book) -> CartLine:
    return CartLine(
        id=item.id,
        book_id=item.book_id,
        book=BookRead.model_validate(book, from_attributes=True),
        quantity=item.quantity,
        owner_id=item.owner_id,
        created_at=item.created_at,
    )


def get_owned_item(session: Session, item_id: int, owner_id: str):
    item = session.get(CartItem, item_id)
    if not item or item.owner_id != owner_id:
        return None
    return item


# View Cart

@router.get("")
def get_cart(
    session: Session = Depends(get_session),
    owner_id: str = Depends(get_current_owner)
):
    rows = session.exec(
        select(CartItem, Book)
        .join(Book, CartItem.book_id == Book.id)
        .where(CartItem.owner_id == owner_id)
        .order_by(CartItem.id)
    ).all()

    return [build_line(item, book) for item, book in rows]


# Add to Cart

@router.post("/add")
def add_to_cart(
    data: CartAddRequest,
    session: Session = Depends(get_session),
    owner_id: str = Depends(get_current_owner)
):
    book = session.get(Book, data.book_id)
    if not book:
        raise http_error(BookNotFound(data.book_id))

    existing_item = session.exec(
        select(CartItem).where(
            CartItem.owner_id == owner_id,
            CartItem.book_id == data.book_id
        )
    ).first()

    in_cart = existing_item.quantity if existing_item else 0
    try:
        new_quantity = check_add(book.id, book.stock, in_cart, data.quantity, book.title)
    except CartError as e:
        raise http_error(e)

    if existing_item:
        existing_item.quantity = new_quantity
        item = existing_item
        message = "Cart updated"
    else:
        item = CartItem(
            owner_id=owner_id,
            book_id=book.id,
            quantity=new_quantity,
            created_at=datetime.utcnow()
        )
        message = "Added to cart"

    session.add(item)
    session.commit()
    session.refresh(item)

    return {"message": message, "item": build_line(item, book)}


# Update Cart

@router.put("/{item_id}")
def update_cart_item(
    item_id: int,
    data: CartUpdateRequest,
    session: Session = Depends(get_session),
    owner_id: str = Depends(get_current_owner)
):
    item = get_owned_item(session, item_id, owner_id)
    if not item:
        raise http_error(LineNotFound(item_id))

    book = session.get(Book, item.book_id)
    try:
        item.quantity = check_update(item.book_id, book.stock if book else 0, data.quantity)
    except CartError as e:
        raise http_error(e)

    session.add(item)
    session.commit()
    session.refresh(item)

    return {"message": "Quantity updated", "item": build_line(item, book)}


# Remove Cart

@router.delete("/{item_id}")
def remove_item(
    item_id: int,
    session: Session = Depends(get_session),
    owner_id: str = Depends(get_current_owner)
):
    item = get_owned_item(session, item_id, owner_id)

    if item:
        session.delete(item)
        session.commit()

    return {"message": "Item removed from cart"}


# Clear Cart
def clear_cart(session: Session, owner_id: str):
    items = session.exec(
        select(CartItem).where(CartItem.owner_id == owner_id)
    ).all()

    for item in items:
        session.delete(item)

    session.commit()


@router.delete("")
def clear_cart_endpoint(
    session: Session = Depends(get_session),
    owner_id: str = Depends(get_current_owner)
):
    clear_cart(session, owner_id)
    return {"message": "Cart cleared"}
