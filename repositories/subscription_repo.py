"""
repositories/subscription_repo.py
---------------------------------
Remote access layer for subscriptions.
All HTTP calls against the subscriptions REST resource live here.
"""

from typing import Any

import httpx

from api.connection import get_client
from config import SUBSCRIPTIONS_API_URL
from models.subscription import Subscription
from utils.exceptions import CreateError, DeleteError, FetchError, RemoteError, UpdateError
from utils.logger import get_logger

logger = get_logger(__name__)


class SubscriptionRepository:
    """
    Client for the four CRUD calls on the subscriptions resource.

    A failed call raises the operation's RemoteError subclass whether the
    server answered with a non-2xx status or could not be reached at all.
    No call touches any local cache; callers refresh on their own.
    """

    def __init__(self, client: httpx.AsyncClient | None = None, base_url: str | None = None):
        self._client = client
        self.base_url = (base_url or SUBSCRIPTIONS_API_URL).rstrip("/")

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client or get_client()

    # ── READ ──────────────────────────────────────────────

    async def list(self) -> list[Subscription]:
        """
        Fetch every subscription, in the order the server returns them.

        Raises:
            FetchError: On a failed request or a malformed body.
        """
        response = await self._send("GET", self.base_url, FetchError, "Failed to fetch subscriptions")
        try:
            data = response.json()
            if not isinstance(data, list):
                raise TypeError(f"expected a JSON array, got {type(data).__name__}")
            return [Subscription.from_dict(item) for item in data]
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Malformed subscriptions payload: {e}")
            raise FetchError("Failed to fetch subscriptions") from e

    # ── CREATE ────────────────────────────────────────────

    async def create(self, subscription: Subscription) -> None:
        """
        POST a new subscription; the server assigns its id.

        Raises:
            CreateError: On a failed request.
        """
        await self._send(
            "POST", self.base_url, CreateError, "Failed to create subscription",
            json=subscription.to_payload(),
        )
        logger.info(f"Created subscription '{subscription.name}'")

    # ── UPDATE ────────────────────────────────────────────

    async def update(self, subscription_id: Any, subscription: Subscription) -> None:
        """
        PUT the full record to the subscription's resource.

        Raises:
            UpdateError: On a failed request.
        """
        await self._send(
            "PUT", f"{self.base_url}/{subscription_id}", UpdateError, "Failed to update subscription",
            json=subscription.to_payload(include_id=True),
        )
        logger.info(f"Updated subscription #{subscription_id}")

    # ── DELETE ────────────────────────────────────────────

    async def delete(self, subscription_id: Any) -> None:
        """
        DELETE the subscription's resource.

        Raises:
            DeleteError: On a failed request.
        """
        await self._send(
            "DELETE", f"{self.base_url}/{subscription_id}", DeleteError, "Failed to delete subscription",
        )
        logger.info(f"Deleted subscription #{subscription_id}")

    # ── HELPERS ───────────────────────────────────────────

    async def _send(
        self,
        method: str,
        url: str,
        error_cls: type[RemoteError],
        message: str,
        json: dict | None = None,
    ) -> httpx.Response:
        """Issue one request and map any failure onto `error_cls`."""
        try:
            response = await self.client.request(method, url, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"{method} {url} returned {e.response.status_code}")
            raise error_cls(message) from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {e!r}")
            raise error_cls(message) from e
        return response
