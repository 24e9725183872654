"""
security/guards.py
------------------
Handler decorators that gate who may use the bot and how often.
"""

import time
from collections import defaultdict
from functools import wraps
from typing import Callable, Optional

from telegram import Update
from telegram.ext import ContextTypes

from config import ALLOWED_USER_IDS, RATE_LIMIT_MESSAGES, RATE_LIMIT_WINDOW_SECONDS
from utils.logger import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """Sliding-window counter of requests per user."""

    def __init__(self, limit: int, window_seconds: float):
        self.limit = limit
        self.window_seconds = window_seconds
        self._hits: dict[int, list[float]] = defaultdict(list)

    def allow(self, user_id: int, now: Optional[float] = None) -> bool:
        """Record a request and report whether it is within the limit."""
        now = time.time() if now is None else now
        cutoff = now - self.window_seconds
        hits = [t for t in self._hits[user_id] if t > cutoff]
        if len(hits) >= self.limit:
            self._hits[user_id] = hits
            return False
        hits.append(now)
        self._hits[user_id] = hits
        return True


_limiter = RateLimiter(RATE_LIMIT_MESSAGES, RATE_LIMIT_WINDOW_SECONDS)


def is_allowed(user_id: int) -> bool:
    """An empty whitelist lets everyone in (dev mode)."""
    return not ALLOWED_USER_IDS or user_id in ALLOWED_USER_IDS


def authorized_only(func: Callable):
    """Restrict a handler to whitelisted users; others get a refusal."""
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return
        if not is_allowed(user.id):
            logger.warning(f"Unauthorized access attempt: user_id={user.id}, username={user.username}")
            if update.effective_message:
                await update.effective_message.reply_text("⛔ Sorry, this bot is private.")
            return
        return await func(update, context, *args, **kwargs)

    return wrapper


def rate_limited(func: Callable):
    """Drop requests from users above RATE_LIMIT_MESSAGES per window."""
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return
        if not _limiter.allow(user.id):
            logger.warning(f"Rate limit hit for user {user.id}")
            if update.effective_message:
                await update.effective_message.reply_text("⚠️ Too many requests. Please wait a moment.")
            return
        return await func(update, context, *args, **kwargs)

    return wrapper
