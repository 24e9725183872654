"""
models/subscription.py
----------------------
Domain models for subscriptions and the editable form draft.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Optional

from utils.exceptions import ValidationError


class BillingCycle(str, Enum):
    MONTHLY = "Monthly"
    YEARLY = "Yearly"
    WEEKLY = "Weekly"


CATEGORIES: tuple[str, ...] = (
    "Entertainment",
    "Music",
    "Software",
    "Fitness",
    "Education",
    "Cloud Storage",
    "Other",
)


def _text(data: dict, key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"'{key}' must be a string, got {type(value).__name__}")
    return value


@dataclass
class Subscription:
    """
    A recurring expense as stored by the subscriptions API.

    Attributes:
        id: Server-assigned identifier (None only for records not yet sent).
        name: Display name (e.g., 'Netflix').
        amount: Charge per billing cycle.
        billing_cycle: 'Monthly' | 'Yearly' | 'Weekly'. Kept verbatim from
            the server, so unknown values survive decoding.
        next_billing_date: Date of the next charge.
        category: One of CATEGORIES.
    """
    name: str
    amount: float
    billing_cycle: str
    next_billing_date: date
    category: str
    id: Optional[Any] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Subscription":
        """
        Build a Subscription from its JSON representation.

        Raises:
            KeyError: If a field is missing.
            TypeError: If a text field is null or not a string.
            ValueError: If the amount or the date cannot be parsed.
        """
        return cls(
            id=data["id"],
            name=_text(data, "name"),
            amount=float(data["amount"]),
            billing_cycle=_text(data, "billingCycle"),
            next_billing_date=date.fromisoformat(_text(data, "nextBillingDate")),
            category=_text(data, "category"),
        )

    def to_payload(self, include_id: bool = False) -> dict:
        """Serialize to the JSON shape the API accepts."""
        payload = {
            "name": self.name,
            "amount": self.amount,
            "billingCycle": self.billing_cycle,
            "nextBillingDate": self.next_billing_date.isoformat(),
            "category": self.category,
        }
        if include_id and self.id is not None:
            payload = {"id": self.id, **payload}
        return payload

    def __str__(self) -> str:
        return f"{self.name}: {self.amount:.2f} ({self.billing_cycle}) - Next: {self.next_billing_date}"


def format_amount(amount: float) -> str:
    """Render an amount the way a user would type it: 15.0 -> '15', 9.99 -> '9.99'."""
    if float(amount).is_integer():
        return str(int(amount))
    return str(amount)


@dataclass(frozen=True)
class AmountInput:
    """
    The amount field as typed into the form.

    `raw` is kept untouched while the user edits; `parse()` is the single
    point where it becomes a number.
    """
    raw: str = ""

    @property
    def is_blank(self) -> bool:
        return not self.raw.strip()

    def parse(self) -> float:
        """
        Convert the raw text to a float.

        Raises:
            ValidationError: If the text is not a finite number.
        """
        try:
            value = float(self.raw.strip())
        except ValueError:
            raise ValidationError("Amount must be a number") from None
        if value != value or value in (float("inf"), float("-inf")):
            raise ValidationError("Amount must be a number")
        return value


@dataclass
class Draft:
    """Unsaved form state for one subscription being created or edited."""
    name: str = ""
    amount: AmountInput = field(default_factory=AmountInput)
    billing_cycle: str = BillingCycle.MONTHLY.value
    next_billing_date: str = ""
    category: str = ""

    FIELDS = ("name", "amount", "billing_cycle", "next_billing_date", "category")
    REQUIRED = ("name", "amount", "next_billing_date", "category")

    @classmethod
    def from_subscription(cls, subscription: Subscription) -> "Draft":
        return cls(
            name=subscription.name,
            amount=AmountInput(format_amount(subscription.amount)),
            billing_cycle=subscription.billing_cycle,
            next_billing_date=subscription.next_billing_date.isoformat(),
            category=subscription.category,
        )

    def set(self, field_name: str, value: str) -> None:
        """Assign one field by name. Unknown names raise KeyError."""
        if field_name not in self.FIELDS:
            raise KeyError(field_name)
        if field_name == "amount":
            self.amount = AmountInput(value)
        else:
            setattr(self, field_name, value)

    def missing_fields(self) -> list[str]:
        """Names of required fields that are still empty."""
        missing = []
        for name in self.REQUIRED:
            value = getattr(self, name)
            blank = value.is_blank if isinstance(value, AmountInput) else not value.strip()
            if blank:
                missing.append(name)
        return missing

    def to_subscription(self, subscription_id: Optional[Any] = None) -> Subscription:
        """
        Parse the draft into a Subscription ready to send.

        Raises:
            ValidationError: If the amount or the date cannot be parsed.
        """
        amount = self.amount.parse()
        try:
            next_billing = date.fromisoformat(self.next_billing_date.strip())
        except ValueError:
            raise ValidationError("Next billing date must be YYYY-MM-DD") from None
        return Subscription(
            id=subscription_id,
            name=self.name.strip(),
            amount=amount,
            billing_cycle=self.billing_cycle,
            next_billing_date=next_billing,
            category=self.category.strip(),
        )
