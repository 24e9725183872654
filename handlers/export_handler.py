"""
handlers/export_handler.py
---------------------------
Handles data export commands (CSV, Excel).
Delegates to ExportService.
"""

from datetime import date

from telegram import Update
from telegram.ext import ContextTypes

from handlers.session import get_store
from handlers.views import render_error
from security.guards import authorized_only, rate_limited
from services.export_service import ExportService
from utils.logger import get_logger

logger = get_logger(__name__)
export_service = ExportService()


async def _send_export(update: Update, context: ContextTypes.DEFAULT_TYPE, kind: str) -> None:
    store = get_store(context)
    await store.refresh()
    if store.last_error:
        await update.message.reply_text(render_error(store))
        return

    stamp = date.today().isoformat()
    try:
        if kind == "csv":
            buffer = export_service.export_csv(store.items)
            filename = f"subscriptions_{stamp}.csv"
        else:
            buffer = export_service.export_excel(store.items)
            filename = f"subscriptions_{stamp}.xlsx"
    except (ValueError, OSError) as e:
        logger.error(f"{kind.upper()} export failed: {e}")
        await update.message.reply_text("❌ Export failed. Please try again.")
        return

    await update.message.reply_document(
        document=buffer,
        filename=filename,
        caption=f"📊 {len(store.items)} subscriptions - {kind.upper()}",
    )


@authorized_only
@rate_limited
async def export_csv_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /export_csv command - send the subscription list as CSV."""
    await _send_export(update, context, "csv")


@authorized_only
@rate_limited
async def export_excel_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /export_excel command - send the subscription list as Excel."""
    await _send_export(update, context, "excel")
