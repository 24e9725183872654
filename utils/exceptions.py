"""
utils/exceptions.py
-------------------
Error types shared by the remote client, the store and the form controller.
"""


class AppError(Exception):
    """Base application error carrying a human-readable message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RemoteError(AppError):
    """A call to the subscriptions API failed (bad status or unreachable)."""


class FetchError(RemoteError):
    """Listing subscriptions failed."""


class CreateError(RemoteError):
    """Creating a subscription failed."""


class UpdateError(RemoteError):
    """Updating a subscription failed."""


class DeleteError(RemoteError):
    """Deleting a subscription failed."""


class ValidationError(AppError):
    """The form draft is missing required fields or holds unparsable values."""
