"""Tests for CSV export."""

import pytest

from pocketbalance.export import (
    EXPORT_COLUMNS,
    NothingToExportError,
    format_amount,
    format_transactions_csv,
)
from pocketbalance.models.transaction import Income, Spending


def coffee():
    return Spending(
        id="1",
        description="Coffee",
        amount=5,
        category="Food",
        date="2024-01-01T00:00:00.000Z",
    )


class TestFormatTransactionsCsv:
    """Tests for the CSV document."""

    def test_empty_list_raises(self):
        """Test that no header-only document is produced."""
        with pytest.raises(NothingToExportError):
            format_transactions_csv([])

    def test_single_spending(self):
        """Test the exact document for one spending row."""
        assert format_transactions_csv([coffee()]) == (
            "id,type,description,amount,category,date\n"
            '1,spending,"Coffee",5,Food,2024-01-01T00:00:00.000Z'
        )

    def test_income_has_empty_category(self):
        """Test that income rows leave the category column empty."""
        salary = Income(id="2", description="Salary", amount=1000.5, date="2024-01-02T00:00:00.000Z")
        document = format_transactions_csv([salary])
        assert document.split("\n")[1] == '2,income,"Salary",1000.5,,2024-01-02T00:00:00.000Z'

    def test_rows_keep_given_order(self):
        """Test that rows follow the input order without a trailing newline."""
        salary = Income(id="2", description="Salary", amount=1000, date="2024-01-02T00:00:00.000Z")
        lines = format_transactions_csv([salary, coffee()]).split("\n")

        assert lines[0] == ",".join(EXPORT_COLUMNS)
        assert [line.split(",")[0] for line in lines[1:]] == ["2", "1"]
        assert lines[-1] != ""

    def test_embedded_quotes_are_not_escaped(self):
        """Test the known quoting limitation is preserved."""
        quoted = Spending(
            id="3",
            description='The "Best" Cafe',
            amount=7,
            category="Food",
            date="2024-01-03T00:00:00.000Z",
        )
        document = format_transactions_csv([quoted])
        assert '"The "Best" Cafe"' in document

    def test_commas_stay_inside_quotes(self):
        """Test that descriptions with commas are still wrapped."""
        spending = Spending(
            id="4",
            description="Bread, milk",
            amount=3,
            category="Food",
            date="2024-01-04T00:00:00.000Z",
        )
        assert '"Bread, milk"' in format_transactions_csv([spending])


class TestFormatAmount:
    """Tests for amount rendering."""

    @pytest.mark.parametrize("amount, expected", [
        (5, "5"),
        (5.0, "5"),
        (5.5, "5.5"),
        (0.1, "0.1"),
        (1234567.0, "1234567"),
        (100.0, "100"),
        (-2.5, "-2.5"),
        (0.000001, "0.000001"),
        (1e-7, "1e-7"),
        (1.5e-7, "1.5e-7"),
        (1e20, "100000000000000000000"),
        (1e21, "1e+21"),
        (1.25e22, "1.25e+22"),
    ])
    def test_plain_number_rendering(self, amount, expected):
        assert format_amount(amount) == expected
