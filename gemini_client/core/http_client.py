"""
HTTP client construction.

Builds the httpx.AsyncClient used by the transport. Each Gemini facade owns
one client (and its connection pool) unless the caller passes its own.
"""
import logging
import httpx
from typing import Optional

from .config import API_TIMEOUT, READ_TIMEOUT, MAX_CONNECTIONS, MAX_KEEPALIVE_CONNECTIONS

logger = logging.getLogger("GeminiClient.Core.HTTPClient")


def create_http_client(
    timeout: Optional[float] = None,
    read_timeout: Optional[float] = None,
    http2: bool = True,
) -> httpx.AsyncClient:
    """
    Create an AsyncClient with pooling and per-phase timeouts.

    - limits: max_connections total, max_keepalive_connections kept warm
    - timeout: overall API_TIMEOUT, with a separate read timeout so a stalled
      stream fails instead of hanging
    - http2: enabled when the server supports it
    """
    total = API_TIMEOUT if timeout is None else timeout
    read = READ_TIMEOUT if read_timeout is None else read_timeout
    logger.debug(
        f"Creating HTTP client. Timeout: {total}s, Read Timeout: {read}s, "
        f"Max Connections: {MAX_CONNECTIONS}, HTTP/2: {http2}"
    )
    return httpx.AsyncClient(
        limits=httpx.Limits(
            max_connections=MAX_CONNECTIONS,
            max_keepalive_connections=MAX_KEEPALIVE_CONNECTIONS,
            keepalive_expiry=120.0,
        ),
        timeout=httpx.Timeout(total, read=read),
        follow_redirects=True,
        http2=http2,
        trust_env=True,
    )


async def close_http_client(client: Optional[httpx.AsyncClient]) -> None:
    if client is not None and not client.is_closed:
        logger.debug("Closing HTTP client")
        await client.aclose()
