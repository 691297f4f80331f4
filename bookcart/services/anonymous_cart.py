import asyncio
import json
import logging
import time
from datetime import datetime
from typing import Callable, List, Optional

from pydantic import ValidationError

from bookcart.config import settings
from bookcart.exceptions import CartError, LineNotFound
from bookcart.schemas.cart_schemas import CartLine
from bookcart.services.inventory_service import InventoryService
from bookcart.services.local_storage import KeyValueStore
from bookcart.services.stock_service import check_add, check_update, ensure_positive_quantity

logger = logging.getLogger(__name__)


class AnonymousCartStore:
    """Cart for a session with no signed-in shopper.

    The whole line list lives as one JSON blob under a single key, so every
    mutation reads the collection, changes it and writes all of it back.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        inventory: InventoryService,
        key: Optional[str] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.storage = storage
        self.inventory = inventory
        self.key = key or settings.guest_cart_key
        self.clock = clock

    # ------------------------------------------------------------------
    # persistence
    # ------------------------------------------------------------------
    def _load(self) -> List[CartLine]:
        raw = self.storage.get(self.key)
        if not raw:
            return []

        try:
            return [CartLine.model_validate(item) for item in json.loads(raw)]
        except (ValueError, TypeError, ValidationError) as e:
            logger.warning(f"Discarding unreadable guest cart: {e}")
            self.storage.remove(self.key)
            return []

    def _save(self, lines: List[CartLine]) -> None:
        self.storage.set(
            self.key,
            json.dumps([line.model_dump(mode="json") for line in lines]),
        )

    def _next_id(self, lines: List[CartLine]) -> int:
        taken = {line.id for line in lines}
        line_id = int(self.clock() * 1000)
        while line_id in taken:
            line_id += 1
        return line_id

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------
    async def list(self) -> List[CartLine]:
        return self._load()

    async def count(self) -> int:
        return sum(line.quantity for line in self._load())

    # ------------------------------------------------------------------
    # mutations
    # ------------------------------------------------------------------
    async def add(self, book_id: int, quantity: int = 1) -> CartLine:
        ensure_positive_quantity(quantity)

        book = await self.inventory.get_book(book_id)

        lines = self._load()
        existing = next((line for line in lines if line.book_id == book_id), None)
        in_cart = existing.quantity if existing else 0

        new_quantity = check_add(book_id, book.stock, in_cart, quantity, book.title)

        if existing:
            existing.quantity = new_quantity
            existing.book = book
            line = existing
        else:
            line = CartLine(
                id=self._next_id(lines),
                book_id=book_id,
                book=book,
                quantity=new_quantity,
                owner_id=None,
                created_at=datetime.utcnow(),
            )
            lines.append(line)

        self._save(lines)
        logger.info(f"Guest cart: book {book_id} now x{new_quantity}")
        return line

    async def update(self, line_id: int, quantity: int) -> CartLine:
        lines = self._load()
        line = next((line for line in lines if line.id == line_id), None)
        if line is None:
            raise LineNotFound(line_id)

        line.quantity = check_update(line.book_id, line.book.stock, quantity)
        self._save(lines)
        return line

    async def remove(self, line_id: int) -> None:
        lines = self._load()
        remaining = [line for line in lines if line.id != line_id]
        if len(remaining) != len(lines):
            self._save(remaining)

    async def clear(self) -> None:
        self.storage.remove(self.key)

    async def refresh_stock(self) -> List[CartLine]:
        """Re-read every line's book; a failed lookup keeps the old snapshot."""
        lines = self._load()
        if not lines:
            return []

        async def fetch(line: CartLine):
            try:
                return await self.inventory.get_book(line.book_id)
            except CartError as e:
                logger.warning(f"Keeping stale snapshot for book {line.book_id}: {e}")
                return None

        books = await asyncio.gather(*(fetch(line) for line in lines))
        fresh = {line.book_id: book for line, book in zip(lines, books) if book is not None}

        # Lines may have changed while the lookups were in flight.
        lines = self._load()
        for line in lines:
            if line.book_id in fresh:
                line.book = fresh[line.book_id]

        self._save(lines)
        return lines
