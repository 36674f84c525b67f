"""Tests for finflow.domain.transactions pure functions."""

import pytest

from finflow.domain.models import Amount, TransactionId, TransactionType
from finflow.domain.transactions import (
    Transaction,
    TransactionValidationError,
    build_transaction_fields,
    format_money_display,
    search_transactions,
    signed_amount,
    sort_transactions,
)


def make_txn(
    txn_id: str,
    amount: float,
    date: str = "2025-01-15",
    description: str = "Test",
    txn_type: TransactionType | None = None,
) -> Transaction:
    if txn_type is None:
        txn_type = TransactionType.EXPENSE if amount < 0 else TransactionType.INCOME
    return Transaction(
        id=TransactionId(txn_id),
        amount=Amount(amount),
        date=date,
        description=description,
        type=txn_type,
        created_at="2025-01-15T10:00:00.000Z",
        updated_at="2025-01-15T10:00:00.000Z",
    )


class TestTransactionSerialization:
    """Tests for Transaction.to_dict and Transaction.from_dict."""

    def test_to_dict_uses_persisted_keys(self) -> None:
        """Should write camelCase timestamp keys and plain type string."""
        data = make_txn("t1", -20).to_dict()

        assert data == {
            "id": "t1",
            "amount": -20,
            "date": "2025-01-15",
            "description": "Test",
            "type": "expense",
            "createdAt": "2025-01-15T10:00:00.000Z",
            "updatedAt": "2025-01-15T10:00:00.000Z",
        }

    def test_from_dict_restores_record(self) -> None:
        """Should rebuild an equal transaction."""
        txn = make_txn("t1", 200, description="Salary")

        assert Transaction.from_dict(txn.to_dict()) == txn

    def test_from_dict_missing_key_raises(self) -> None:
        """Should raise KeyError when a field is missing."""
        data = make_txn("t1", -5).to_dict()
        del data["createdAt"]

        with pytest.raises(KeyError):
            Transaction.from_dict(data)

    def test_from_dict_unknown_type_raises(self) -> None:
        """Should raise ValueError for an unknown type."""
        data = make_txn("t1", -5).to_dict()
        data["type"] = "transfer"

        with pytest.raises(ValueError):
            Transaction.from_dict(data)

    def test_from_dict_non_numeric_amount_raises(self) -> None:
        """Should raise ValueError when amount is not a number."""
        data = make_txn("t1", -5).to_dict()
        data["amount"] = "-5"

        with pytest.raises(ValueError):
            Transaction.from_dict(data)


class TestSignedAmount:
    """Tests for signed_amount."""

    def test_expense_is_negative(self) -> None:
        """Should store expenses as negative."""
        assert signed_amount(20, TransactionType.EXPENSE) == -20

    def test_expense_already_negative(self) -> None:
        """Should keep a negative expense negative."""
        assert signed_amount(-20, TransactionType.EXPENSE) == -20

    def test_income_is_positive(self) -> None:
        """Should store income as positive."""
        assert signed_amount(-200, TransactionType.INCOME) == 200


class TestBuildTransactionFields:
    """Tests for build_transaction_fields."""

    def test_valid_expense(self) -> None:
        """Should apply negative sign and trim description."""
        fields = build_transaction_fields("20", "2025-03-01", "  coffee  ", "expense")

        assert fields["amount"] == -20
        assert fields["date"] == "2025-03-01"
        assert fields["description"] == "coffee"
        assert fields["type"] == TransactionType.EXPENSE

    def test_valid_income(self) -> None:
        """Should keep income positive."""
        fields = build_transaction_fields(1500.5, "2025-03-01", "Salary", TransactionType.INCOME)

        assert fields["amount"] == 1500.5
        assert fields["type"] == TransactionType.INCOME

    def test_rejects_zero_amount(self) -> None:
        """Should reject amounts that are not greater than zero."""
        with pytest.raises(TransactionValidationError) as exc_info:
            build_transaction_fields(0, "2025-03-01", "coffee", "expense")

        assert set(exc_info.value.errors) == {"amount"}

    def test_rejects_negative_amount(self) -> None:
        """Should reject negative input amounts."""
        with pytest.raises(TransactionValidationError) as exc_info:
            build_transaction_fields(-5, "2025-03-01", "coffee", "expense")

        assert "amount" in exc_info.value.errors

    def test_rejects_non_numeric_amount(self) -> None:
        """Should reject text that is not a number."""
        with pytest.raises(TransactionValidationError) as exc_info:
            build_transaction_fields("abc", "2025-03-01", "coffee", "expense")

        assert "amount" in exc_info.value.errors

    def test_rejects_blank_description(self) -> None:
        """Should reject descriptions that are empty after trimming."""
        with pytest.raises(TransactionValidationError) as exc_info:
            build_transaction_fields(5, "2025-03-01", "   ", "expense")

        assert set(exc_info.value.errors) == {"description"}

    def test_rejects_bad_date(self) -> None:
        """Should reject dates that are not YYYY-MM-DD."""
        with pytest.raises(TransactionValidationError) as exc_info:
            build_transaction_fields(5, "2025-02-30", "coffee", "expense")

        assert set(exc_info.value.errors) == {"date"}

    def test_rejects_unknown_type(self) -> None:
        """Should reject types other than income and expense."""
        with pytest.raises(TransactionValidationError) as exc_info:
            build_transaction_fields(5, "2025-03-01", "coffee", "transfer")

        assert set(exc_info.value.errors) == {"type"}

    def test_reports_every_invalid_field(self) -> None:
        """Should collect all errors at once."""
        with pytest.raises(TransactionValidationError) as exc_info:
            build_transaction_fields(None, None, None, None)

        assert set(exc_info.value.errors) == {"amount", "date", "description", "type"}


class TestSearchTransactions:
    """Tests for search_transactions."""

    def test_case_insensitive_substring(self) -> None:
        """Should match description text regardless of case."""
        txns = [make_txn("1", -4, description="Coffee Shop"), make_txn("2", -30, description="Groceries")]

        result = search_transactions(txns, "coffee")

        assert [t.id for t in result] == ["1"]

    def test_empty_term_returns_all(self) -> None:
        """Should return everything for an empty term."""
        txns = [make_txn("1", -4), make_txn("2", 10)]

        assert search_transactions(txns, "") == txns
        assert search_transactions(txns, None) == txns

    def test_no_matches(self) -> None:
        """Should return an empty list when nothing matches."""
        assert search_transactions([make_txn("1", -4, description="Rent")], "coffee") == []


class TestSortTransactions:
    """Tests for sort_transactions."""

    def test_sort_by_date_newest_first(self) -> None:
        """Should put the latest date first."""
        txns = [
            make_txn("old", -1, date="2025-01-01"),
            make_txn("new", -1, date="2025-03-01"),
            make_txn("mid", -1, date="2025-02-01"),
        ]

        result = sort_transactions(txns, "date")

        assert [t.id for t in result] == ["new", "mid", "old"]

    def test_sort_by_amount_uses_absolute_value(self) -> None:
        """Should rank by size regardless of sign."""
        txns = [make_txn("small", 10), make_txn("big-expense", -500), make_txn("mid", 100)]

        result = sort_transactions(txns, "amount")

        assert [t.id for t in result] == ["big-expense", "mid", "small"]

    def test_does_not_mutate_input(self) -> None:
        """Should return a new list."""
        txns = [make_txn("a", -1, date="2025-01-01"), make_txn("b", -1, date="2025-02-01")]

        sort_transactions(txns, "date")

        assert [t.id for t in txns] == ["a", "b"]

    def test_unknown_sort_raises(self) -> None:
        """Should reject unknown sort options."""
        with pytest.raises(ValueError):
            sort_transactions([], "description")


class TestFormatMoneyDisplay:
    """Tests for format_money_display."""

    def test_negative_with_sign(self) -> None:
        """Should prefix expenses with a minus."""
        assert format_money_display(-1234.5) == "-$1,234.50"

    def test_positive_with_sign(self) -> None:
        """Should prefix income with a plus."""
        assert format_money_display(20) == "+$20.00"

    def test_without_sign_and_custom_symbol(self) -> None:
        """Should drop the sign and use the given symbol."""
        assert format_money_display(-50, "£", include_sign=False) == "£50.00"
