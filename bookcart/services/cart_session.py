import logging
from typing import Callable, Optional

import httpx

from bookcart.schemas.checkout_schemas import CheckoutTotals, Discount
from bookcart.services.anonymous_cart import AnonymousCartStore
from bookcart.services.cart_reconciler import CartReconciler, MigrationReport
from bookcart.services.cart_store import CartStore
from bookcart.services.exchange_rate_service import ExchangeRateService
from bookcart.services.inventory_service import InventoryService
from bookcart.services.local_storage import KeyValueStore
from bookcart.services.pricing_engine import PricingEngine
from bookcart.services.session_cart import SessionCartStore
from bookcart.services.shipping_service import ShippingService
from bookcart.utils.http import create_client

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Optional[str]], httpx.AsyncClient]


class CartSession:
    """Cart state for one storefront session.

    Owns both cart stores and hands out whichever is authoritative: the
    guest cart until the shopper signs in, the server cart afterwards. The
    guest cart is migrated once, on the signed-out -> signed-in edge.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        client_factory: ClientFactory = create_client,
        rates_client: Optional[httpx.AsyncClient] = None,
    ):
        self.storage = storage
        self.client_factory = client_factory

        self.client = client_factory(None)
        self._rates_client = rates_client
        self.inventory = InventoryService(self.client)
        self.anonymous = AnonymousCartStore(storage, self.inventory)
        self.rates = ExchangeRateService(storage, rates_client or self.client)
        self.pricing = PricingEngine(ShippingService(self.client), self.rates)

        self.session_cart: Optional[SessionCartStore] = None
        self._session_client: Optional[httpx.AsyncClient] = None
        self.last_migration: Optional[MigrationReport] = None

    @property
    def is_authenticated(self) -> bool:
        return self.session_cart is not None

    @property
    def active(self) -> CartStore:
        if self.session_cart is not None:
            return self.session_cart
        return self.anonymous

    async def authenticate(self, token: str) -> Optional[MigrationReport]:
        """Switch to the server cart; returns the migration report on the login edge."""
        if self.is_authenticated:
            return None

        self._session_client = self.client_factory(token)
        self.session_cart = SessionCartStore(self._session_client)
        logger.info("Session authenticated, reconciling guest cart")

        try:
            self.last_migration = await CartReconciler(self.anonymous, self.session_cart).reconcile()
        except Exception:
            logger.exception("Guest cart reconciliation failed, staying signed out")
            await self.sign_out()
            raise
        return self.last_migration

    async def sign_out(self) -> None:
        if self._session_client is not None:
            await self._session_client.aclose()
        self._session_client = None
        self.session_cart = None

    async def checkout_totals(
        self,
        country_code: Optional[str],
        display_currency: Optional[str] = None,
        discount: Optional[Discount] = None,
    ) -> CheckoutTotals:
        lines = await self.active.list()
        return await self.pricing.totals(lines, country_code, display_currency, discount)

    async def close(self) -> None:
        await self.sign_out()
        await self.client.aclose()
        if self._rates_client is not None:
            await self._rates_client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()
