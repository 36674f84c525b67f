"""Domain models and types for finflow.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from finflow.domain.models import Amount, Month, TransactionId, TransactionType

__all__ = ["Amount", "Month", "TransactionId", "TransactionType"]
