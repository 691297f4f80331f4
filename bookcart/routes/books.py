from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session
from bookcart.database import get_session
from bookcart.exceptions import BookNotFound
from bookcart.models.book import Book
from bookcart.schemas.book_schemas import BookRead

router = APIRouter()


@router.get("/{book_id}", response_model=BookRead)
def get_book(book_id: int, session: Session = Depends(get_session)):
    book = session.get(Book, book_id)
    if not book:
        raise HTTPException(404, BookNotFound(book_id).to_detail())

    return BookRead.model_validate(book, from_attributes=True)
