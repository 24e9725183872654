"""
services/export_service.py
---------------------------
Generates CSV and Excel exports of the subscription list.
"""

import io
from typing import Iterable

import pandas as pd

from models.subscription import Subscription
from services.totals_service import monthly_equivalent, totals_by_category
from utils.logger import get_logger

logger = get_logger(__name__)

COLUMNS = ["Name", "Category", "Billing Cycle", "Amount", "Monthly Equivalent", "Next Billing Date"]


class ExportService:
    """Builds downloadable subscription reports in CSV and Excel formats."""

    @staticmethod
    def _frame(items: Iterable[Subscription]) -> pd.DataFrame:
        rows = [
            {
                "Name": s.name,
                "Category": s.category,
                "Billing Cycle": s.billing_cycle,
                "Amount": s.amount,
                "Monthly Equivalent": round(monthly_equivalent(s), 2),
                "Next Billing Date": s.next_billing_date.isoformat(),
            }
            for s in items
        ]
        return pd.DataFrame(rows, columns=COLUMNS)

    def export_csv(self, items: Iterable[Subscription]) -> io.BytesIO:
        """
        Export subscriptions as a CSV file.

        Returns:
            A BytesIO buffer containing UTF-8 (with BOM) CSV data.
        """
        df = self._frame(items)
        buffer = io.BytesIO()
        df.to_csv(buffer, index=False, encoding="utf-8-sig")
        buffer.seek(0)
        logger.info(f"Exported {len(df)} subscriptions as CSV")
        return buffer

    def export_excel(self, items: Iterable[Subscription]) -> io.BytesIO:
        """
        Export subscriptions as an Excel (.xlsx) file with a per-category
        summary sheet.

        Returns:
            A BytesIO buffer containing the workbook.
        """
        items = list(items)
        df = self._frame(items)

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Subscriptions", index=False)
            if items:
                summary = pd.DataFrame(
                    list(totals_by_category(items).items()),
                    columns=["Category", "Monthly Total"],
                )
                summary.to_excel(writer, sheet_name="Summary", index=False)

        buffer.seek(0)
        logger.info(f"Exported {len(df)} subscriptions as Excel")
        return buffer
