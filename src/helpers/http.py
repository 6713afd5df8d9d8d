"""HTTP client utilities and helpers."""

from typing import Any

import httpx

from src.helpers.constants import (
    CONNECTION_TIMEOUT,
    DEFAULT_TIMEOUT,
    MAX_CONNECTIONS,
    MAX_KEEPALIVE_CONNECTIONS,
)
from src.helpers.errors import TransportError
from src.helpers.logging import get_logger


logger = get_logger(__name__)

type JsonResponse = dict[str, Any] | list[Any] | str | int | float | bool | None


def create_http_client(
    timeout: float = DEFAULT_TIMEOUT, **kwargs: Any
) -> httpx.AsyncClient:
    """Create a configured httpx AsyncClient.

    Every request gets a total timeout so a hung upstream call cannot
    hold a concurrency slot indefinitely.

    Args:
        timeout: Default timeout in seconds (default: DEFAULT_TIMEOUT)
        **kwargs: Additional httpx.AsyncClient kwargs

    Returns:
        Configured AsyncClient instance

    Example:
        ```python
        from src.helpers.http import create_http_client

        async with create_http_client(base_url="https://blockchain.info") as client:
            response = await client.get("/rawblock/abc")
        ```
    """
    kwargs.setdefault(
        "limits",
        httpx.Limits(
            max_keepalive_connections=MAX_KEEPALIVE_CONNECTIONS,
            max_connections=MAX_CONNECTIONS,
        ),
    )
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout, connect=CONNECTION_TIMEOUT), **kwargs
    )


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: dict[str, Any] | None = None,
    timeout: float | None = None,
) -> JsonResponse:
    """Fetch JSON data from a URL.

    Args:
        client: HTTP client instance
        url: URL (or path relative to the client's base_url) to fetch
        params: Optional query parameters
        timeout: Optional timeout override

    Returns:
        Parsed JSON data

    Raises:
        TransportError: On network errors, timeouts, non-2xx statuses or a
            body that is not valid JSON

    Example:
        ```python
        async with create_http_client() as client:
            data = await fetch_json(client, "https://blockchain.info/rawblock/abc")
        ```
    """
    request_kwargs: dict[str, Any] = {"params": params}
    if timeout is not None:
        request_kwargs["timeout"] = timeout

    try:
        response = await client.get(url, **request_kwargs)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        logger.debug("HTTP %s fetching %s", status, url)
        msg = f"HTTP {status} from {url}: {e.response.text[:100]}"
        raise TransportError(url, msg, status_code=status) from e
    except httpx.TimeoutException as e:
        msg = f"Timed out fetching {url}"
        raise TransportError(url, msg) from e
    except httpx.HTTPError as e:
        msg = f"HTTP error fetching {url}: {e}"
        raise TransportError(url, msg) from e

    try:
        return response.json()
    except ValueError as e:
        msg = f"Invalid JSON from {url}: {e}"
        raise TransportError(url, msg, status_code=response.status_code) from e


__all__ = [
    "JsonResponse",
    "create_http_client",
    "fetch_json",
]
