import logging
from dataclasses import dataclass, field
from typing import List, Optional

from bookcart.exceptions import CartError
from bookcart.schemas.cart_schemas import CartLine
from bookcart.services.anonymous_cart import AnonymousCartStore
from bookcart.services.session_cart import SessionCartStore

logger = logging.getLogger(__name__)


@dataclass
class MigrationOutcome:
    line: CartLine
    migrated: Optional[CartLine] = None
    error: Optional[CartError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class MigrationReport:
    outcomes: List[MigrationOutcome] = field(default_factory=list)

    @property
    def migrated(self) -> List[MigrationOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> List[MigrationOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def partial(self) -> bool:
        return bool(self.failed)


class CartReconciler:
    """Moves a guest cart into the shopper's server cart at sign-in.

    Lines are added one at a time, each request awaited before the next is
    sent: the server's add is not safe to run concurrently for one cart.
    The guest cart is emptied afterwards whatever the per-line outcomes were,
    including when an unexpected error aborts the loop.
    Failed lines are not retried; they are reported to the caller.
    """

    def __init__(self, anonymous: AnonymousCartStore, session: SessionCartStore):
        self.anonymous = anonymous
        self.session = session

    async def reconcile(self) -> MigrationReport:
        report = MigrationReport()
        lines = await self.anonymous.list()
        if not lines:
            return report

        logger.info(f"Migrating {len(lines)} guest cart lines")

        try:
            for line in lines:
                try:
                    migrated = await self.session.add(line.book_id, line.quantity)
                except CartError as e:
                    logger.warning(f"Guest line for book {line.book_id} not migrated: {e}")
                    report.outcomes.append(MigrationOutcome(line=line, error=e))
                else:
                    report.outcomes.append(MigrationOutcome(line=line, migrated=migrated))
        finally:
            await self.anonymous.clear()
            self.session.invalidate()

        logger.info(
            f"Guest cart migrated: {len(report.migrated)} ok, {len(report.failed)} failed"
        )
        return report
