from decimal import Decimal

import httpx
import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from bookcart.database import create_db_and_tables, get_session
from bookcart.exceptions import BookNotFound, CartServiceError
from bookcart.main import app
from bookcart.models.book import Book
from bookcart.models.shipping_rate import ShippingRate
from bookcart.schemas.book_schemas import BookRead
from bookcart.utils.http import create_client
from bookcart.utils.token import create_access_token


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def api(engine):
    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def add_book(engine):
    def _add(**fields) -> Book:
        data = {
            "title": "Dune",
            "author": "Frank Herbert",
            "price": Decimal("10.00"),
            "stock": 5,
        }
        data.update(fields)
        with Session(engine) as session:
            book = Book(**data)
            session.add(book)
            session.commit()
            session.refresh(book)
            return book

    return _add


@pytest.fixture
def set_stock(engine):
    def _set(book_id: int, stock: int) -> None:
        with Session(engine) as session:
            book = session.get(Book, book_id)
            book.stock = stock
            session.add(book)
            session.commit()

    return _set


@pytest.fixture
def add_shipping_rate(engine):
    def _add(country_code: str, cost: str, **fields) -> ShippingRate:
        data = {
            "country_code": country_code,
            "country_name": country_code,
            "shipping_cost": Decimal(cost),
            "min_delivery_days": 3,
            "max_delivery_days": 5,
        }
        data.update(fields)
        with Session(engine) as session:
            rate = ShippingRate(**data)
            session.add(rate)
            session.commit()
            session.refresh(rate)
            return rate

    return _add


@pytest.fixture
def token():
    return create_access_token({"sub": "user-1"})


@pytest.fixture
def client_factory(api):
    def factory(token=None) -> httpx.AsyncClient:
        return create_client(
            token,
            base_url="http://testserver",
            transport=httpx.ASGITransport(app=api),
        )

    return factory


class FakeInventory:
    """In-process stand-in for the catalog lookup."""

    def __init__(self):
        self.books = {}
        self.failing = set()
        self.calls = []

    def put(self, book_id: int, stock: int = 5, price: str = "10.00", **fields) -> BookRead:
        book = BookRead(
            id=book_id,
            title=fields.pop("title", f"Book {book_id}"),
            author=fields.pop("author", "Anon"),
            price=Decimal(price),
            stock=stock,
            **fields,
        )
        self.books[book_id] = book
        return book

    async def get_book(self, book_id: int) -> BookRead:
        self.calls.append(book_id)
        if book_id in self.failing:
            raise CartServiceError(503, "catalog down")
        if book_id not in self.books:
            raise BookNotFound(book_id)
        return self.books[book_id]


@pytest.fixture
def inventory():
    return FakeInventory()
