import asyncio
from decimal import Decimal

import httpx
import pytest

from bookcart.config import settings
from bookcart.exceptions import CartServiceError
from bookcart.services.shipping_service import ShippingService


def shipping_client(handler):
    return httpx.AsyncClient(base_url="http://api", transport=httpx.MockTransport(handler))


def not_found(request):
    return httpx.Response(404, json={"detail": "No shipping rate found"})


def test_quote_from_configured_rate():
    def handler(request):
        assert request.url.path == "/shipping-rate/DE"
        return httpx.Response(200, json={
            "country_code": "DE",
            "country_name": "Germany",
            "shipping_cost": "4.50",
            "min_delivery_days": 2,
            "max_delivery_days": 4,
        })

    quote = asyncio.run(ShippingService(shipping_client(handler)).quote("de"))
    assert quote.shipping_cost == Decimal("4.50")
    assert not quote.is_default


def test_missing_rate_uses_configured_default():
    quote = asyncio.run(ShippingService(shipping_client(not_found)).quote("ZZ"))
    assert quote.is_default
    assert quote.country_code == "ZZ"
    assert quote.shipping_cost == settings.default_shipping_cost
    assert (quote.min_delivery_days, quote.max_delivery_days) == (
        settings.default_min_delivery_days,
        settings.default_max_delivery_days,
    )


def test_zero_defaults_are_kept():
    service = ShippingService(
        shipping_client(not_found),
        default_cost=Decimal("0"),
        default_min_days=0,
        default_max_days=0,
    )
    quote = asyncio.run(service.quote("ZZ"))
    assert quote.shipping_cost == Decimal("0")
    assert (quote.min_delivery_days, quote.max_delivery_days) == (0, 0)


def test_server_error_is_not_hidden_by_default():
    service = ShippingService(shipping_client(lambda request: httpx.Response(500, text="boom")))
    with pytest.raises(CartServiceError):
        asyncio.run(service.quote("DE"))
