"""
services/totals_service.py
--------------------------
Spend aggregates over a list of subscriptions.
Pure functions: no I/O, no state.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

from models.subscription import BillingCycle, Subscription

# Average weeks per month, not calendar-exact.
WEEKS_PER_MONTH = 4.33


@dataclass(frozen=True)
class Totals:
    monthly: float
    annual: float
    count: int


def monthly_equivalent(subscription: Subscription) -> float:
    """
    What one subscription adds to the normalized monthly spend.
    Unknown billing cycles contribute nothing.
    """
    cycle = subscription.billing_cycle
    if cycle == BillingCycle.MONTHLY.value:
        return subscription.amount
    if cycle == BillingCycle.YEARLY.value:
        return subscription.amount / 12
    if cycle == BillingCycle.WEEKLY.value:
        return subscription.amount * WEEKS_PER_MONTH
    return 0.0


def calculate_totals(items: Iterable[Subscription]) -> Totals:
    """
    Compute monthly and annual spend, rounded to 2 decimals.

    The annual figure is derived from the unrounded monthly sum.
    """
    items = list(items)
    monthly = sum(monthly_equivalent(s) for s in items)
    return Totals(
        monthly=round(monthly, 2),
        annual=round(monthly * 12, 2),
        count=len(items),
    )


def totals_by_category(items: Iterable[Subscription]) -> dict[str, float]:
    """Monthly-equivalent spend per category, in first-seen order."""
    totals: dict[str, float] = {}
    for s in items:
        totals[s.category] = totals.get(s.category, 0.0) + monthly_equivalent(s)
    return {category: round(amount, 2) for category, amount in totals.items()}


def upcoming_renewals(
    items: Iterable[Subscription], today: date, days_ahead: int
) -> list[Subscription]:
    """
    Subscriptions billed between `today` and `today + days_ahead` inclusive,
    soonest first.
    """
    horizon = today + timedelta(days=days_ahead)
    due = [s for s in items if today <= s.next_billing_date <= horizon]
    return sorted(due, key=lambda s: s.next_billing_date)
