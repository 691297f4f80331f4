import logging

import httpx

from bookcart.exceptions import BookNotFound, CartServiceError
from bookcart.schemas.book_schemas import BookRead
from bookcart.utils.http import response_detail

logger = logging.getLogger(__name__)


class InventoryService:
    """Reads a single book's current price and stock from the catalog API."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def get_book(self, book_id: int) -> BookRead:
        try:
            response = await self.client.get(f"/books/{book_id}")
        except httpx.HTTPError as e:
            logger.error(f"Catalog lookup for book {book_id} failed: {e}")
            raise CartServiceError(None, str(e)) from e

        if response.status_code == 404:
            raise BookNotFound(book_id)
        if response.is_error:
            raise CartServiceError(response.status_code, response_detail(response))

        return BookRead.model_validate(response.json())
