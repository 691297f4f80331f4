import json
import logging
import time
from decimal import Decimal, InvalidOperation
from typing import Callable, Dict, Optional, Sequence

import httpx

from bookcart.config import settings
from bookcart.exceptions import ConversionUnavailable
from bookcart.services.local_storage import KeyValueStore

logger = logging.getLogger(__name__)


def parse_rates(raw) -> Dict[str, Decimal]:
    """Rate table from a provider or cache payload; unreadable entries are skipped."""
    rates = {}
    for code, rate in raw.items():
        try:
            value = Decimal(str(rate))
        except InvalidOperation:
            logger.warning(f"Skipping unreadable exchange rate for {code}: {rate!r}")
            continue
        if value.is_finite() and value > 0:
            rates[code] = value
        else:
            logger.warning(f"Skipping unusable exchange rate for {code}: {rate!r}")
    return rates


class ExchangeRateService:
    """Currency conversion backed by a public rates provider.

    One rate table is cached in the local store at a time, tagged with its
    base currency and an expiry. A hit for the same base before expiry does
    no network call.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        client: httpx.AsyncClient,
        ttl_seconds: Optional[int] = None,
        urls: Optional[Sequence[str]] = None,
        key: Optional[str] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.storage = storage
        self.client = client
        self.ttl_seconds = settings.exchange_rate_ttl_seconds if ttl_seconds is None else ttl_seconds
        self.urls = list(urls or (settings.exchange_rate_url, settings.exchange_rate_fallback_url))
        self.key = key or settings.exchange_rate_cache_key
        self.clock = clock

    def cached_rates(self, base_currency: str) -> Optional[Dict[str, Decimal]]:
        raw = self.storage.get(self.key)
        if not raw:
            return None

        try:
            cache = json.loads(raw)
            if cache["base_currency"] == base_currency and self.clock() < cache["expiry"]:
                rates = parse_rates(cache["rates"])
                if rates:
                    return rates
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Failed to read cached exchange rates: {e}")

        # expired, other base, empty or unreadable
        self.storage.remove(self.key)
        return None

    def cache_rates(self, rates: Dict[str, Decimal], base_currency: str) -> None:
        now = self.clock()
        self.storage.set(
            self.key,
            json.dumps({
                "rates": {code: str(rate) for code, rate in rates.items()},
                "base_currency": base_currency,
                "timestamp": now,
                "expiry": now + self.ttl_seconds,
            }),
        )

    async def fetch_rates(self, base_currency: str) -> Dict[str, Decimal]:
        for url in self.urls:
            target = url.format(base=base_currency)
            try:
                response = await self.client.get(target)
                if response.is_success:
                    rates = parse_rates(response.json().get("rates") or {})
                    if rates:
                        return rates
                logger.warning(f"Exchange rate provider {target} answered {response.status_code}")
            except (httpx.HTTPError, ValueError, AttributeError) as e:
                logger.warning(f"Exchange rate provider {target} failed: {e}")

        raise ConversionUnavailable(base_currency, "*", "no provider answered")

    async def get_rates(self, base_currency: str) -> Dict[str, Decimal]:
        rates = self.cached_rates(base_currency)
        if rates is not None:
            return rates

        rates = await self.fetch_rates(base_currency)
        self.cache_rates(rates, base_currency)
        logger.info(f"Cached {len(rates)} exchange rates for {base_currency}")
        return rates

    async def refresh(self, base_currency: str) -> Dict[str, Decimal]:
        self.storage.remove(self.key)
        return await self.get_rates(base_currency)

    async def convert(self, amount: Decimal, from_currency: str, to_currency: str) -> Decimal:
        if from_currency == to_currency:
            return amount

        rates = await self.get_rates(from_currency)
        rate = rates.get(to_currency)
        if rate is None:
            raise ConversionUnavailable(from_currency, to_currency)
        return amount * rate
