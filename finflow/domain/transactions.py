"""Pure functions for transaction records, validation and history browsing.

This module contains the functional core for transaction operations:
- No I/O operations (no storage, no console, no files)
- No side effects
- Pure data transformations
- Easy to test
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, TypedDict

from finflow.dates import parse_iso_date
from finflow.domain.models import Amount, TransactionId, TransactionType

# Persisted key for each dataclass attribute whose name differs
_PERSISTED_KEYS = {"created_at": "createdAt", "updated_at": "updatedAt"}
_ATTRIBUTE_NAMES = {v: k for k, v in _PERSISTED_KEYS.items()}

SORT_OPTIONS = ("date", "amount")


class TransactionFields(TypedDict):
    """Caller-supplied fields for a new transaction."""

    amount: float
    date: str
    description: str
    type: TransactionType


@dataclass(frozen=True)
class Transaction:
    """Immutable transaction record."""

    id: TransactionId
    amount: Amount
    date: str
    description: str
    type: TransactionType
    created_at: str
    updated_at: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted layout (camelCase timestamps)."""
        return {
            "id": self.id,
            "amount": self.amount,
            "date": self.date,
            "description": self.description,
            "type": self.type.value,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Transaction":
        """Build a transaction from its persisted layout.

        Raises:
            KeyError: If a required key is missing.
            ValueError: If type or amount hold invalid values.
            TypeError: If data is not a mapping.
        """
        amount = data["amount"]
        if isinstance(amount, bool) or not isinstance(amount, int | float):
            raise ValueError(f"Invalid amount: {amount!r}")
        return cls(
            id=TransactionId(str(data["id"])),
            amount=Amount(amount),
            date=str(data["date"]),
            description=str(data["description"]),
            type=TransactionType(data["type"]),
            created_at=str(data["createdAt"]),
            updated_at=str(data["updatedAt"]),
        )


class TransactionValidationError(ValueError):
    """Raised when caller input does not form a valid transaction."""

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = errors
        super().__init__("; ".join(f"{field}: {message}" for field, message in errors.items()))


def attribute_name(key: str) -> str:
    """Map a persisted key (e.g. ``createdAt``) to its attribute name."""
    return _ATTRIBUTE_NAMES.get(key, key)


def signed_amount(amount: float, txn_type: TransactionType) -> Amount:
    """Apply the sign convention: expenses negative, income non-negative."""
    if txn_type == TransactionType.EXPENSE:
        return Amount(-abs(amount))
    return Amount(abs(amount))


def build_transaction_fields(
    amount: float | str | None,
    date: str | None,
    description: str | None,
    txn_type: str | TransactionType | None,
) -> TransactionFields:
    """Validate raw input and build fields ready for the store.

    Args:
        amount: Unsigned amount; must be a number greater than zero.
        date: Transaction date (YYYY-MM-DD).
        description: Free text; must be non-empty after trimming.
        txn_type: "income" or "expense".

    Returns:
        TransactionFields with the sign applied and description trimmed.

    Raises:
        TransactionValidationError: With one message per invalid field.
    """
    errors: dict[str, str] = {}

    parsed_amount = 0.0
    try:
        parsed_amount = float(amount) if amount is not None else 0.0
    except (TypeError, ValueError):
        parsed_amount = 0.0
    if not math.isfinite(parsed_amount) or parsed_amount <= 0:
        errors["amount"] = "Please enter a valid amount greater than 0"

    if not date:
        errors["date"] = "Please select a date"
    else:
        try:
            parse_iso_date(date)
        except ValueError:
            errors["date"] = "Date must be in YYYY-MM-DD format"

    clean_description = (description or "").strip()
    if not clean_description:
        errors["description"] = "Please enter a description"

    parsed_type: TransactionType | None = None
    try:
        parsed_type = TransactionType(txn_type) if txn_type else None
    except ValueError:
        parsed_type = None
    if parsed_type is None:
        errors["type"] = "Please select a transaction type (income or expense)"

    if errors or parsed_type is None or date is None:
        raise TransactionValidationError(errors)

    return TransactionFields(
        amount=signed_amount(parsed_amount, parsed_type),
        date=parse_iso_date(date).isoformat(),
        description=clean_description,
        type=parsed_type,
    )


def search_transactions(transactions: Iterable[Transaction], term: str | None) -> list[Transaction]:
    """Filter transactions whose description contains term (case-insensitive).

    An empty or missing term matches everything.
    """
    if not term:
        return list(transactions)
    needle = term.lower()
    return [t for t in transactions if needle in t.description.lower()]


def sort_transactions(transactions: Iterable[Transaction], sort_by: str = "date") -> list[Transaction]:
    """Sort transactions for display.

    Args:
        transactions: Transactions to sort.
        sort_by: "date" for newest date first, "amount" for largest
            absolute amount first.

    Returns:
        New sorted list; ties keep their stored order.

    Raises:
        ValueError: If sort_by is not a known option.
    """
    if sort_by == "date":
        return sorted(transactions, key=lambda t: t.date, reverse=True)
    if sort_by == "amount":
        return sorted(transactions, key=lambda t: abs(t.amount), reverse=True)
    raise ValueError(f"Unknown sort option: {sort_by} (expected one of {', '.join(SORT_OPTIONS)})")


def format_money_display(amount: float, currency_symbol: str = "$", include_sign: bool = True) -> str:
    """Format amount for display.

    Args:
        amount: Signed amount.
        currency_symbol: Symbol prefixed to the number.
        include_sign: Whether to include + or - sign.

    Returns:
        Formatted string (e.g., "-$123.45" or "$123.45").
    """
    formatted = f"{currency_symbol}{abs(amount):,.2f}"

    if include_sign:
        if amount < 0:
            return f"-{formatted}"
        else:
            return f"+{formatted}"
    else:
        return formatted
