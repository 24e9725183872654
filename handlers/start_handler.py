"""
handlers/start_handler.py
--------------------------
Handles /start, /help and /myid.
"""

from telegram import Update
from telegram.ext import ContextTypes

from security.guards import authorized_only, rate_limited
from utils.logger import get_logger

logger = get_logger(__name__)

HELP_TEXT = """
🤖 SubTrack - track your recurring subscriptions

📋 Overview
/list - all subscriptions with monthly and annual spend
/totals - spend summary only
/upcoming [days] - subscriptions renewing soon

✏️ Changes
/add - open the form for a new subscription
/edit <id> - open the form for an existing one
/set <field> <value> - fill a form field (name, amount, cycle, date, category)
/save - create or update from the form
/cancel - discard the form
/delete <id> - delete after confirmation

📄 Other
/export_csv - download the list as CSV
/export_excel - download the list as Excel
/dismiss - hide the last error
/myid - show your Telegram ID
"""


@authorized_only
@rate_limited
async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - greet the user and show the commands."""
    user = update.effective_user
    logger.info(f"User {user.id} ({user.first_name}) started the bot.")
    await update.message.reply_text(f"Hi {user.first_name}! 👋\n{HELP_TEXT}")


@authorized_only
@rate_limited
async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command - show all available commands."""
    await update.message.reply_text(HELP_TEXT)


@authorized_only
async def myid_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /myid command - show the user's Telegram ID for whitelisting."""
    user = update.effective_user
    await update.message.reply_text(
        f"🆔 Your Telegram ID: {user.id}\n"
        f"Add it to ALLOWED_USER_IDS in .env to lock the bot to you."
    )
