"""Domain type definitions for finflow.

These types provide semantic clarity and help with type checking:
- Amount: Signed amount in currency units (negative for expenses)
- Month: Month in YYYY-MM format
- TransactionId: Opaque unique transaction identifier
- TransactionType: Income or expense
"""

from enum import StrEnum
from typing import NewType

# Amounts are stored as currency units, signed: expenses are negative
Amount = NewType("Amount", float)

# Month is always in YYYY-MM format (e.g., "2025-01")
Month = NewType("Month", str)

# Transaction identifier, generated by the store
TransactionId = NewType("TransactionId", str)


class TransactionType(StrEnum):
    """Kind of transaction."""

    INCOME = "income"
    EXPENSE = "expense"
