"""
services/form_controller.py
---------------------------
Drives the single add/edit form and the delete confirmation.
"""

from typing import Any, Optional

from models.subscription import Draft, Subscription
from services.subscription_store import SubscriptionStore
from utils.exceptions import ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)


class FormController:
    """
    Holds the draft being edited and decides between create and update.

    `editing_id` set means the form edits that subscription; None means the
    form creates a new one. Submitting or cancelling always returns the form
    to an empty, closed, create-mode state.
    """

    def __init__(self, store: SubscriptionStore):
        self.store = store
        self.draft = Draft()
        self.editing_id: Optional[Any] = None
        self.is_open = False
        self.validation_error: Optional[str] = None
        self.pending_delete_id: Optional[Any] = None

    @property
    def mode(self) -> str:
        return "edit" if self.editing_id is not None else "create"

    def open_for_create(self) -> None:
        self._reset()
        self.is_open = True

    def open_for_edit(self, subscription: Subscription) -> None:
        self._reset()
        self.draft = Draft.from_subscription(subscription)
        self.editing_id = subscription.id
        self.is_open = True

    def update_field(self, field_name: str, value: str) -> None:
        """Set one draft field. Validation waits until submit()."""
        self.draft.set(field_name, value)

    def cancel(self) -> None:
        self._reset()

    async def submit(self) -> bool:
        """
        Validate the draft and send it to the store.

        Returns:
            False if validation failed (nothing sent, form stays open);
            True once the create/update was dispatched. The form is reset
            and closed after dispatch even when the remote call failed; that
            failure shows up as the store's `last_error`.
        """
        try:
            subscription = self._validated()
        except ValidationError as e:
            logger.info(f"Form rejected: {e.message}")
            self.validation_error = e.message
            return False

        if self.editing_id is not None:
            await self.store.update(self.editing_id, subscription)
        else:
            await self.store.create(subscription)

        self._reset()
        return True

    def request_delete(self, subscription_id: Any) -> None:
        """Ask for a delete; nothing happens until confirm_delete(True)."""
        self.pending_delete_id = subscription_id

    def is_pending_delete(self, subscription_id: Any) -> bool:
        """Whether `subscription_id` (compared as text) is the open delete request."""
        return self.pending_delete_id is not None and str(self.pending_delete_id) == str(subscription_id)

    async def confirm_delete(self, subscription_id: Any, confirmed: bool) -> bool:
        """
        Answer the delete request for `subscription_id`.

        An answer for any other id (an older prompt) is ignored and leaves
        the open request in place.

        Returns:
            True if a delete was sent to the store.
        """
        if not self.is_pending_delete(subscription_id):
            return False
        pending, self.pending_delete_id = self.pending_delete_id, None
        if not confirmed:
            return False
        await self.store.delete(pending)
        return True

    # ── HELPERS ───────────────────────────────────────────

    def _validated(self) -> Subscription:
        if self.draft.missing_fields():
            raise ValidationError("Please fill all fields")
        return self.draft.to_subscription(self.editing_id)

    def _reset(self) -> None:
        self.draft = Draft()
        self.editing_id = None
        self.validation_error = None
        self.is_open = False
