"""
handlers/views.py
-----------------
Plain-text rendering of the store, totals and form for chat replies.
"""

from typing import Iterable

from config import CURRENCY_SYMBOL
from models.subscription import CATEGORIES, BillingCycle, Subscription
from services.form_controller import FormController
from services.subscription_store import SubscriptionStore
from services.totals_service import Totals


def money(amount: float) -> str:
    return f"{CURRENCY_SYMBOL}{amount:.2f}"


def render_error(store: SubscriptionStore) -> str:
    if not store.last_error:
        return ""
    return f"⚠️ {store.last_error}\n(/dismiss to hide)"


def render_totals(totals: Totals) -> str:
    return (
        f"💰 Monthly spend: {money(totals.monthly)}\n"
        f"📅 Annual spend: {money(totals.annual)}\n"
        f"📦 Active services: {totals.count}"
    )


def render_subscription(s: Subscription) -> str:
    return (
        f"#{s.id} {s.name} [{s.category}]\n"
        f"    {money(s.amount)} · {s.billing_cycle} · next {s.next_billing_date.isoformat()}"
    )


def render_subscriptions(items: Iterable[Subscription]) -> str:
    lines = [render_subscription(s) for s in items]
    if not lines:
        return "📭 No subscriptions yet. Use /add to create your first one."
    return "\n".join(lines)


def render_list(store: SubscriptionStore) -> str:
    """Error banner, totals and the list, in that order."""
    parts = [render_error(store), render_totals(store.totals), render_subscriptions(store.items)]
    return "\n\n".join(p for p in parts if p)


def render_form(form: FormController) -> str:
    draft = form.draft
    title = "✏️ Edit Subscription" if form.mode == "edit" else "➕ New Subscription"
    lines = [
        title,
        f"  name: {draft.name or '-'}",
        f"  amount: {draft.amount.raw or '-'}",
        f"  cycle: {draft.billing_cycle}",
        f"  date: {draft.next_billing_date or '-'}",
        f"  category: {draft.category or '-'}",
    ]
    if form.validation_error:
        lines.append(f"\n❗ {form.validation_error}")
    lines.append(
        "\nSet fields with /set <field> <value>, e.g.\n"
        "  /set name Netflix\n"
        "  /set amount 499\n"
        f"  /set cycle {' | '.join(c.value for c in BillingCycle)}\n"
        "  /set date 2026-11-01\n"
        f"  /set category {' | '.join(CATEGORIES)}\n"
        f"Then /save ({'Update' if form.mode == 'edit' else 'Create'}) or /cancel."
    )
    return "\n".join(lines)
