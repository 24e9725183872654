"""
services/subscription_store.py
------------------------------
The canonical client-side list of subscriptions.
"""

from typing import Any, Optional

from models.subscription import Subscription
from repositories.subscription_repo import SubscriptionRepository
from services.totals_service import Totals, calculate_totals
from utils.exceptions import RemoteError
from utils.logger import get_logger

logger = get_logger(__name__)


class SubscriptionStore:
    """
    Owns the list of subscriptions and keeps it in step with the API.

    Responsibilities:
        - Mirror the server's list as of the last successful fetch.
        - Refetch the whole list after every successful create/update/delete
          instead of patching it locally, so server-assigned ids and any
          server-side normalization always show up.
        - Turn remote failures into `last_error` instead of raising.
    """

    def __init__(self, repo: SubscriptionRepository):
        self.repo = repo
        self._items: list[Subscription] = []
        self.is_loading = False
        self.last_error: Optional[str] = None

    @property
    def items(self) -> tuple[Subscription, ...]:
        return tuple(self._items)

    @property
    def totals(self) -> Totals:
        return calculate_totals(self._items)

    def find(self, subscription_id: Any) -> Optional[Subscription]:
        """Look up a subscription in the current list by id (compared as text)."""
        wanted = str(subscription_id)
        for s in self._items:
            if str(s.id) == wanted:
                return s
        return None

    def dismiss_error(self) -> None:
        self.last_error = None

    async def refresh(self) -> None:
        """
        Replace the list with the server's.
        On failure the previous list is kept and `last_error` is set.
        """
        self.is_loading = True
        self.last_error = None
        try:
            self._items = await self.repo.list()
        except RemoteError as e:
            logger.error(f"Refresh failed: {e.message}")
            self.last_error = e.message
        finally:
            self.is_loading = False

    async def create(self, subscription: Subscription) -> bool:
        """Create on the server, then refetch. Returns False on failure."""
        try:
            await self.repo.create(subscription)
        except RemoteError as e:
            return self._fail("Create", e)
        await self.refresh()
        return True

    async def update(self, subscription_id: Any, subscription: Subscription) -> bool:
        """Replace the record on the server, then refetch. Returns False on failure."""
        try:
            await self.repo.update(subscription_id, subscription)
        except RemoteError as e:
            return self._fail("Update", e)
        await self.refresh()
        return True

    async def delete(self, subscription_id: Any) -> bool:
        """Delete on the server, then refetch. Returns False on failure."""
        try:
            await self.repo.delete(subscription_id)
        except RemoteError as e:
            return self._fail("Delete", e)
        await self.refresh()
        return True

    def _fail(self, action: str, error: RemoteError) -> bool:
        logger.error(f"{action} failed: {error.message}")
        self.last_error = error.message
        return False
