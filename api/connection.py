"""
api/connection.py
-----------------
Manages the shared HTTP client.
One httpx.AsyncClient is opened at bot startup and reused by every repository.
"""

import httpx

from config import HTTP_TIMEOUT_SECONDS
from utils.logger import get_logger

logger = get_logger(__name__)

_client: httpx.AsyncClient | None = None


def init_client(timeout: float = HTTP_TIMEOUT_SECONDS) -> httpx.AsyncClient:
    """
    Open the shared HTTP client if it is not open yet.

    Args:
        timeout: Per-request timeout in seconds.

    Returns:
        The shared httpx.AsyncClient.
    """
    global _client
    if _client is None:
        _client = httpx.AsyncClient(
            timeout=timeout,
            headers={"Accept": "application/json"},
        )
        logger.info("HTTP client initialized.")
    return _client


def get_client() -> httpx.AsyncClient:
    """
    Return the shared HTTP client.

    Raises:
        RuntimeError: If init_client() has not been called.
    """
    if _client is None:
        raise RuntimeError("HTTP client not initialized. Call init_client() first.")
    return _client


async def close_client() -> None:
    """Close the shared HTTP client and its connections."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
        logger.info("HTTP client closed.")
