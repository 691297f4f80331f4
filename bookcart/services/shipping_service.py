import logging
from decimal import Decimal
from typing import Optional

import httpx

from bookcart.config import settings
from bookcart.exceptions import CartServiceError
from bookcart.schemas.shipping_schemas import ShippingQuote
from bookcart.utils.http import response_detail

logger = logging.getLogger(__name__)


class ShippingService:
    def __init__(
        self,
        client: httpx.AsyncClient,
        default_cost: Optional[Decimal] = None,
        default_min_days: Optional[int] = None,
        default_max_days: Optional[int] = None,
    ):
        self.client = client
        self.default_cost = settings.default_shipping_cost if default_cost is None else default_cost
        self.default_min_days = (
            settings.default_min_delivery_days if default_min_days is None else default_min_days
        )
        self.default_max_days = (
            settings.default_max_delivery_days if default_max_days is None else default_max_days
        )

    def default_quote(self, country_code: Optional[str] = None) -> ShippingQuote:
        return ShippingQuote(
            country_code=country_code,
            shipping_cost=self.default_cost,
            min_delivery_days=self.default_min_days,
            max_delivery_days=self.default_max_days,
            is_default=True,
        )

    async def quote(self, country_code: Optional[str]) -> ShippingQuote:
        if not country_code:
            return self.default_quote()

        country_code = country_code.upper()
        try:
            response = await self.client.get(f"/shipping-rate/{country_code}")
        except httpx.HTTPError as e:
            logger.error(f"Shipping rate lookup for {country_code} failed: {e}")
            raise CartServiceError(None, str(e)) from e

        if response.status_code == 404:
            logger.info(f"No shipping rate for {country_code}, using default")
            return self.default_quote(country_code)
        if response.is_error:
            raise CartServiceError(response.status_code, response_detail(response))

        return ShippingQuote.model_validate(response.json())
