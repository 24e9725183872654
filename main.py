"""
main.py
-------
Entry point for the SubTrack Telegram bot.

Responsibilities:
    - Open the shared HTTP client for the subscriptions API.
    - Configure and start the Telegram bot with all handlers.
    - Schedule the daily renewal reminder.
"""

from datetime import date, time as dt_time

from telegram import BotCommand
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
)

from api.connection import close_client, init_client
from config import ALLOWED_USER_IDS, REMINDER_DAYS_AHEAD, TELEGRAM_BOT_TOKEN
from handlers.export_handler import export_csv_command, export_excel_command
from handlers.session import REPOSITORY_KEY, get_repository
from handlers.start_handler import help_command, myid_command, start_command
from handlers.subscription_handler import (
    DELETE_CALLBACK_PREFIX,
    add_command,
    cancel_command,
    delete_command,
    delete_confirmation_callback,
    dismiss_command,
    edit_command,
    list_command,
    save_command,
    set_command,
    totals_command,
    upcoming_command,
)
from handlers.views import money
from repositories.subscription_repo import SubscriptionRepository
from services.subscription_store import SubscriptionStore
from services.totals_service import upcoming_renewals
from utils.logger import get_logger

logger = get_logger(__name__)


async def send_reminders(context) -> None:
    """
    Scheduled job: remind whitelisted users of subscriptions renewing soon.
    Runs daily at 09:00.
    """
    store = SubscriptionStore(get_repository(context))
    await store.refresh()
    if store.last_error:
        logger.error(f"Skipping reminders: {store.last_error}")
        return

    due = upcoming_renewals(store.items, date.today(), REMINDER_DAYS_AHEAD)
    if not due:
        return

    lines = ["⏰ Upcoming renewals:"]
    lines += [f"  {s.next_billing_date.isoformat()} · {s.name} · {money(s.amount)}" for s in due]
    text = "\n".join(lines)

    for user_id in ALLOWED_USER_IDS:
        try:
            await context.bot.send_message(chat_id=user_id, text=text)
            logger.info(f"Sent {len(due)} renewal reminders to user {user_id}")
        except Exception as e:
            logger.error(f"Failed to send reminders to {user_id}: {e}")


async def on_startup(application: Application) -> None:
    """Open the HTTP client, share one repository, register the command menu."""
    application.bot_data[REPOSITORY_KEY] = SubscriptionRepository(init_client())

    commands = [
        BotCommand("list", "📋 All subscriptions and totals"),
        BotCommand("totals", "💰 Monthly and annual spend"),
        BotCommand("upcoming", "⏰ Renewing soon"),
        BotCommand("add", "➕ New subscription"),
        BotCommand("edit", "✏️ Edit a subscription"),
        BotCommand("set", "📝 Set a form field"),
        BotCommand("save", "💾 Save the form"),
        BotCommand("cancel", "❌ Discard the form"),
        BotCommand("delete", "🗑️ Delete a subscription"),
        BotCommand("dismiss", "✔️ Hide the last error"),
        BotCommand("export_csv", "📄 Export CSV"),
        BotCommand("export_excel", "📊 Export Excel"),
        BotCommand("help", "📖 Help"),
        BotCommand("myid", "🆔 Your Telegram ID"),
    ]
    await application.bot.set_my_commands(commands)
    logger.info("Bot commands menu registered successfully.")


async def on_shutdown(application: Application) -> None:
    await close_client()


def main() -> None:
    """Initialize and run the bot."""

    # ── 1. Build the Telegram application ─────────────────
    logger.info("Starting Telegram bot...")
    app = (
        Application.builder()
        .token(TELEGRAM_BOT_TOKEN)
        .post_init(on_startup)
        .post_shutdown(on_shutdown)
        .build()
    )

    # ── 2. Register command handlers ──────────────────────
    app.add_handler(CommandHandler("start", start_command))
    app.add_handler(CommandHandler("help", help_command))
    app.add_handler(CommandHandler("myid", myid_command))
    app.add_handler(CommandHandler("list", list_command))
    app.add_handler(CommandHandler("totals", totals_command))
    app.add_handler(CommandHandler("upcoming", upcoming_command))
    app.add_handler(CommandHandler("add", add_command))
    app.add_handler(CommandHandler("edit", edit_command))
    app.add_handler(CommandHandler("set", set_command))
    app.add_handler(CommandHandler("save", save_command))
    app.add_handler(CommandHandler("cancel", cancel_command))
    app.add_handler(CommandHandler("delete", delete_command))
    app.add_handler(CommandHandler("dismiss", dismiss_command))
    app.add_handler(CommandHandler("export_csv", export_csv_command))
    app.add_handler(CommandHandler("export_excel", export_excel_command))

    # ── 3. Delete confirmation buttons ────────────────────
    app.add_handler(
        CallbackQueryHandler(delete_confirmation_callback, pattern=f"^{DELETE_CALLBACK_PREFIX}")
    )

    # ── 4. Schedule jobs ──────────────────────────────────
    job_queue = app.job_queue
    if job_queue and ALLOWED_USER_IDS:
        job_queue.run_daily(
            send_reminders,
            time=dt_time(hour=9, minute=0),
            name="renewal_reminders",
        )
        logger.info("Scheduled daily renewal reminders (09:00)")

    # ── 5. Start polling ──────────────────────────────────
    logger.info("🚀 SubTrack is running! Press Ctrl+C to stop.")
    app.run_polling(drop_pending_updates=True, allowed_updates=["message", "callback_query"])
    logger.info("SubTrack stopped.")


if __name__ == "__main__":
    main()
