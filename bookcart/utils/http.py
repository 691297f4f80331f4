from typing import Any, Optional

import httpx

from bookcart.config import settings
from bookcart.exceptions import CartError, error_from_detail


def create_client(
    token: Optional[str] = None,
    base_url: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    return httpx.AsyncClient(
        base_url=base_url or settings.api_base_url,
        headers=headers,
        timeout=settings.http_timeout,
        transport=transport,
    )


def response_detail(response: httpx.Response) -> Any:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and "detail" in body:
        return body["detail"]
    return body


def cart_error_for(response: httpx.Response) -> CartError:
    return error_from_detail(response.status_code, response_detail(response))
