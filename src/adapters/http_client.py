"""httpx client factory and response checks shared by the backend adapter.

Tests pass an `httpx.MockTransport` through `transport`.
"""

from __future__ import annotations

from typing import Any

import httpx

from core.config import AppSettings
from core.domain.errors import BackendError


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` pointed at the backend with safe defaults."""

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=settings.api_base_url.rstrip("/"),
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def decode_body(response: httpx.Response) -> Any:
    """Decoded JSON body, or the raw text when it is not JSON."""

    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def raise_for_backend_error(response: httpx.Response) -> None:
    """Raise `BackendError` for non-2xx responses, keeping the body intact."""

    if response.is_success:
        return
    body = decode_body(response)
    raise BackendError(
        f"HTTP {response.status_code} from {response.request.method} {response.request.url.path}",
        status_code=response.status_code,
        body=body,
    )
