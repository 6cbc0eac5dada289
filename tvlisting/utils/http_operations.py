"""
HTTP utilities

This module handles page and image downloads for the listing provider.
Transport failures are reported as NetworkingError; there are no retries.
"""
import logging

import httpx

from tvlisting.errors import NetworkingError


logger = logging.getLogger(__name__)


def create_client(
    timeout: float | None,
    user_agent: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """
    Create an async HTTP client for one provider operation

    Args:
        timeout: HTTP timeout in seconds, None disables it
        user_agent: User-Agent header value
        transport: Optional transport replacing the network (used in tests)

    Returns:
        A new httpx.AsyncClient; use it as an async context manager
    """
    return httpx.AsyncClient(
        timeout=timeout,
        headers={"User-Agent": user_agent},
        follow_redirects=True,
        transport=transport,
    )


async def _get(client: httpx.AsyncClient, url: str) -> httpx.Response:
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.error(f"HTTP {e.response.status_code} while fetching {url}")
        raise NetworkingError() from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error(f"Request to {url} failed: {type(e).__name__}: {e}")
        raise NetworkingError() from e
    return response


async def fetch_page(client: httpx.AsyncClient, url: str) -> tuple[bytes, str | None]:
    """
    Download a page without decoding it

    The markup is left to the HTML parser so that encoding declarations
    inside the document are honored.

    Returns:
        Tuple of (raw body, charset from the Content-Type header or None)

    Raises:
        NetworkingError: On transport errors and non-2xx responses
    """
    logger.debug(f"Fetching page {url}...")
    response = await _get(client, url)
    logger.debug(f"Fetched {len(response.content) / 1024:.1f} KB from {url}")
    return response.content, response.charset_encoding


async def fetch_bytes(client: httpx.AsyncClient, url: str) -> bytes:
    """
    Download a binary resource

    Raises:
        NetworkingError: On transport errors and non-2xx responses
    """
    logger.debug(f"Fetching binary resource {url}...")
    response = await _get(client, url)
    logger.debug(f"Fetched {len(response.content) / 1024:.1f} KB from {url}")
    return response.content
