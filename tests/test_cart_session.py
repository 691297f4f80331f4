import asyncio
from decimal import Decimal

import httpx
import pytest

from bookcart.schemas.checkout_schemas import Discount
from bookcart.services.anonymous_cart import AnonymousCartStore
from bookcart.services.cart_session import CartSession
from bookcart.services.local_storage import MemoryStore
from bookcart.services.session_cart import SessionCartStore


def offline_rates():
    def handler(request):
        raise httpx.ConnectError("offline", request=request)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_active_store_follows_authentication(client_factory, token, add_book):
    book = add_book(stock=4)

    async def scenario():
        async with CartSession(MemoryStore(), client_factory, rates_client=offline_rates()) as cart:
            assert isinstance(cart.active, AnonymousCartStore)
            await cart.active.add(book.id, 2)

            report = await cart.authenticate(token)
            assert isinstance(cart.active, SessionCartStore)
            lines = await cart.active.list()

            await cart.sign_out()
            assert not cart.is_authenticated
            return report, lines, await cart.active.list()

    report, lines, guest_after = asyncio.run(scenario())
    assert len(report.migrated) == 1
    assert [(line.book_id, line.quantity) for line in lines] == [(book.id, 2)]
    assert guest_after == []


def test_reconciler_fires_once_per_login(client_factory, token, add_book):
    book = add_book(stock=10)

    async def scenario():
        async with CartSession(MemoryStore(), client_factory, rates_client=offline_rates()) as cart:
            await cart.active.add(book.id, 1)
            first = await cart.authenticate(token)
            second = await cart.authenticate(token)
            return first, second, await cart.active.count()

    first, second, count = asyncio.run(scenario())
    assert len(first.outcomes) == 1
    assert second is None
    assert count == 1


def test_checkout_totals_for_active_cart(client_factory, token, add_book, add_shipping_rate):
    book = add_book(price=Decimal("10.00"), stock=5)
    add_shipping_rate("DE", "4.00")

    async def scenario():
        async with CartSession(MemoryStore(), client_factory, rates_client=offline_rates()) as cart:
            await cart.active.add(book.id, 2)
            guest_totals = await cart.checkout_totals("DE", "EUR")
            await cart.authenticate(token)
            return guest_totals, await cart.checkout_totals("DE")

    guest_totals, session_totals = asyncio.run(scenario())

    assert guest_totals.subtotal.base.amount == Decimal("20.00")
    assert guest_totals.shipping_cost.base.amount == Decimal("4.00")
    # rates offline: EUR requested, base shown
    assert guest_totals.grand_total.display.currency == "USD"
    assert session_totals.grand_total.base == guest_totals.grand_total.base


def test_failed_reconciliation_leaves_session_signed_out(inventory):
    inventory.put(1)
    clients = {}

    def handler(request):
        raise RuntimeError("cart backend crashed")

    def factory(token=None):
        clients[token] = httpx.AsyncClient(base_url="http://api", transport=httpx.MockTransport(handler))
        return clients[token]

    async def scenario():
        async with CartSession(MemoryStore(), factory, rates_client=offline_rates()) as cart:
            cart.anonymous.inventory = inventory
            await cart.active.add(1, 2)
            with pytest.raises(RuntimeError):
                await cart.authenticate("token-1")
            return cart.is_authenticated, cart.active, cart.last_migration

    authenticated, active, report = asyncio.run(scenario())
    assert not authenticated
    assert isinstance(active, AnonymousCartStore)
    assert report is None
    assert clients["token-1"].is_closed


def test_checkout_totals_with_coupon(client_factory, add_book, add_shipping_rate):
    book = add_book(price=Decimal("10.00"), stock=5)
    add_shipping_rate("DE", "4.00")
    coupon = Discount(discount_type="fixed", value=Decimal("5.00"))

    async def scenario():
        async with CartSession(MemoryStore(), client_factory, rates_client=offline_rates()) as cart:
            await cart.active.add(book.id, 2)
            return await cart.checkout_totals("DE", discount=coupon)

    totals = asyncio.run(scenario())
    assert totals.discount.base.amount == Decimal("5.00")
    # 20.00 + 4.00 + 0.20 tax - 5.00
    assert totals.grand_total.base.amount == Decimal("19.20")
