"""
handlers/subscription_handler.py
--------------------------------
Commands for listing, adding, editing and deleting subscriptions.
"""

from datetime import date

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import ContextTypes

from config import REMINDER_DAYS_AHEAD
from handlers.session import get_form, get_store
from handlers.views import money, render_error, render_form, render_list, render_totals
from models.subscription import CATEGORIES, BillingCycle
from security.guards import authorized_only, rate_limited
from services.totals_service import upcoming_renewals
from utils.logger import get_logger

logger = get_logger(__name__)

DELETE_CALLBACK_PREFIX = "delete:"
MAX_UPCOMING_DAYS = 366

# User-facing field names for /set
_FIELD_ALIASES = {
    "name": "name",
    "amount": "amount",
    "cycle": "billing_cycle",
    "billing_cycle": "billing_cycle",
    "date": "next_billing_date",
    "next_billing_date": "next_billing_date",
    "category": "category",
}

_CHOICES = {
    "billing_cycle": [c.value for c in BillingCycle],
    "category": list(CATEGORIES),
}


def _match_choice(field_name: str, value: str) -> str | None:
    """Map free text onto the closed list for select-style fields."""
    options = _CHOICES.get(field_name)
    if options is None:
        return value
    for option in options:
        if option.lower() == value.strip().lower():
            return option
    return None


@authorized_only
@rate_limited
async def list_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /list - refresh from the API and show totals and subscriptions."""
    store = get_store(context)
    await store.refresh()
    await update.message.reply_text(render_list(store))


@authorized_only
@rate_limited
async def totals_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /totals - show monthly and annual spend."""
    store = get_store(context)
    await store.refresh()
    banner = render_error(store)
    text = render_totals(store.totals)
    await update.message.reply_text(f"{banner}\n\n{text}" if banner else text)


@authorized_only
@rate_limited
async def upcoming_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /upcoming [days] - subscriptions renewing soon.
    Usage: /upcoming 7
    """
    days = REMINDER_DAYS_AHEAD
    if context.args:
        try:
            days = int(context.args[0])
        except ValueError:
            days = -1
        if not 0 <= days <= MAX_UPCOMING_DAYS:
            await update.message.reply_text(
                f"⚠️ Usage: /upcoming [days], with days from 0 to {MAX_UPCOMING_DAYS}\n"
                "Example: /upcoming 7"
            )
            return

    store = get_store(context)
    await store.refresh()
    if store.last_error:
        await update.message.reply_text(render_error(store))
        return

    due = upcoming_renewals(store.items, date.today(), days)
    if not due:
        await update.message.reply_text(f"✅ Nothing renews in the next {days} days.")
        return
    lines = [f"⏰ Renewing in the next {days} days:"]
    lines += [f"  {s.next_billing_date.isoformat()} · {s.name} · {money(s.amount)}" for s in due]
    await update.message.reply_text("\n".join(lines))


@authorized_only
@rate_limited
async def add_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /add - open an empty form."""
    form = get_form(context)
    form.open_for_create()
    await update.message.reply_text(render_form(form))


@authorized_only
@rate_limited
async def edit_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /edit <id> - open the form seeded from an existing subscription.
    Usage: /edit 3
    """
    if not context.args:
        await update.message.reply_text("⚠️ Usage: /edit <id>\nExample: /edit 3")
        return

    store = get_store(context)
    if not store.items:
        await store.refresh()
    subscription = store.find(context.args[0])
    if subscription is None:
        await update.message.reply_text(f"⚠️ Subscription #{context.args[0]} not found. Try /list.")
        return

    form = get_form(context)
    form.open_for_edit(subscription)
    await update.message.reply_text(render_form(form))


@authorized_only
@rate_limited
async def set_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /set <field> <value> - change one field of the open form.
    Usage: /set amount 199
    """
    form = get_form(context)
    if not form.is_open:
        await update.message.reply_text("⚠️ No form is open. Use /add or /edit <id> first.")
        return
    if not context.args or len(context.args) < 2:
        await update.message.reply_text("⚠️ Usage: /set <field> <value>\nExample: /set name Netflix")
        return

    field_name = _FIELD_ALIASES.get(context.args[0].lower())
    if field_name is None:
        await update.message.reply_text(
            f"⚠️ Unknown field '{context.args[0]}'. Fields: name, amount, cycle, date, category."
        )
        return

    value = _match_choice(field_name, " ".join(context.args[1:]))
    if value is None:
        await update.message.reply_text(
            f"⚠️ Choose one of: {', '.join(_CHOICES[field_name])}."
        )
        return

    form.update_field(field_name, value)
    await update.message.reply_text(render_form(form))


@authorized_only
@rate_limited
async def save_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /save - submit the open form."""
    form = get_form(context)
    if not form.is_open:
        await update.message.reply_text("⚠️ No form is open. Use /add or /edit <id> first.")
        return

    if not await form.submit():
        await update.message.reply_text(render_form(form))
        return
    await update.message.reply_text(render_list(form.store))


@authorized_only
@rate_limited
async def cancel_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /cancel - discard the open form."""
    get_form(context).cancel()
    await update.message.reply_text("❌ Form discarded.")


@authorized_only
@rate_limited
async def delete_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /delete <id> - ask for confirmation before deleting.
    Usage: /delete 3
    """
    if not context.args:
        await update.message.reply_text("⚠️ Usage: /delete <id>\nExample: /delete 3")
        return

    subscription_id = context.args[0]
    store = get_store(context)
    if not store.items:
        await store.refresh()
    subscription = store.find(subscription_id)
    label = subscription.name if subscription else f"#{subscription_id}"

    target_id = subscription.id if subscription else subscription_id
    get_form(context).request_delete(target_id)
    keyboard = InlineKeyboardMarkup([[
        InlineKeyboardButton("🗑️ Yes, delete", callback_data=f"{DELETE_CALLBACK_PREFIX}yes:{target_id}"),
        InlineKeyboardButton("Keep it", callback_data=f"{DELETE_CALLBACK_PREFIX}no:{target_id}"),
    ]])
    await update.message.reply_text(
        f"Are you sure you want to delete {label}?",
        reply_markup=keyboard,
    )


@authorized_only
async def delete_confirmation_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle the Yes/No buttons of the delete prompt."""
    query = update.callback_query
    await query.answer()

    # callback data is "delete:<yes|no>:<id>"
    answer, _, subscription_id = query.data[len(DELETE_CALLBACK_PREFIX):].partition(":")
    form = get_form(context)
    if not subscription_id or not form.is_pending_delete(subscription_id):
        await query.edit_message_text("⌛ This prompt has expired. Send /delete <id> again.")
        return
    if not await form.confirm_delete(subscription_id, answer == "yes"):
        await query.edit_message_text("👍 Nothing deleted.")
        return
    await query.edit_message_text(render_list(form.store))


@authorized_only
async def dismiss_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /dismiss - hide the last error."""
    get_store(context).dismiss_error()
    await update.message.reply_text("✔️ Dismissed.")
