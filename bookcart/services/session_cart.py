import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from bookcart.exceptions import CartServiceError
from bookcart.schemas.cart_schemas import CartLine
from bookcart.utils.http import cart_error_for

logger = logging.getLogger(__name__)


class SessionCartStore:
    """Server-resident cart of a signed-in shopper.

    The server validates stock; its rejections come back as the same
    ``CartError`` subclasses the guest cart raises. Reads are served from a
    cached view that every mutation invalidates.
    """

    def __init__(self, client: httpx.AsyncClient):
        self.client = client
        self._cached: Optional[List[CartLine]] = None

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise CartServiceError(None, str(e)) from e

        if response.is_error:
            raise cart_error_for(response)
        return response

    @staticmethod
    def _body(response: httpx.Response, key: Optional[str] = None):
        try:
            body = response.json()
            return body[key] if key else body
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Unexpected cart response from {response.request.url}: {e}")
            raise CartServiceError(response.status_code, response.text[:200]) from e

    @staticmethod
    def _line(item) -> CartLine:
        try:
            return CartLine.model_validate(item)
        except ValidationError as e:
            raise CartServiceError(None, str(e)) from e

    def invalidate(self) -> None:
        self._cached = None

    async def list(self) -> List[CartLine]:
        if self._cached is None:
            response = await self._request("GET", "/cart")
            body = self._body(response)
            if not isinstance(body, list):
                raise CartServiceError(response.status_code, "cart is not a list")
            self._cached = [self._line(item) for item in body]
        return list(self._cached)

    async def count(self) -> int:
        return sum(line.quantity for line in await self.list())

    async def add(self, book_id: int, quantity: int = 1) -> CartLine:
        try:
            response = await self._request(
                "POST", "/cart/add", json={"book_id": book_id, "quantity": quantity}
            )
        finally:
            self.invalidate()
        return self._line(self._body(response, "item"))

    async def update(self, line_id: int, quantity: int) -> CartLine:
        try:
            response = await self._request("PUT", f"/cart/{line_id}", json={"quantity": quantity})
        finally:
            self.invalidate()
        return self._line(self._body(response, "item"))

    async def remove(self, line_id: int) -> None:
        try:
            await self._request("DELETE", f"/cart/{line_id}")
        finally:
            self.invalidate()

    async def clear(self) -> None:
        try:
            await self._request("DELETE", "/cart")
        finally:
            self.invalidate()
