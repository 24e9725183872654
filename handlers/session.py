"""
handlers/session.py
-------------------
Per-chat store and form.
The repository is created once at startup and kept in `bot_data`; each chat
gets its own SubscriptionStore and FormController in `chat_data`.
"""

from telegram.ext import ContextTypes

from repositories.subscription_repo import SubscriptionRepository
from services.form_controller import FormController
from services.subscription_store import SubscriptionStore

REPOSITORY_KEY = "subscription_repository"
_STORE_KEY = "subscription_store"
_FORM_KEY = "subscription_form"


def get_repository(context: ContextTypes.DEFAULT_TYPE) -> SubscriptionRepository:
    repo = context.bot_data.get(REPOSITORY_KEY)
    if repo is None:
        repo = SubscriptionRepository()
        context.bot_data[REPOSITORY_KEY] = repo
    return repo


def get_store(context: ContextTypes.DEFAULT_TYPE) -> SubscriptionStore:
    store = context.chat_data.get(_STORE_KEY)
    if store is None:
        store = SubscriptionStore(get_repository(context))
        context.chat_data[_STORE_KEY] = store
    return store


def get_form(context: ContextTypes.DEFAULT_TYPE) -> FormController:
    form = context.chat_data.get(_FORM_KEY)
    if form is None:
        form = FormController(get_store(context))
        context.chat_data[_FORM_KEY] = form
    return form
