"""
CSV Export

Serializes the transaction list to a flat text table:

    id,type,description,amount,category,date

KNOWN LIMITATION: descriptions are wrapped in double quotes but embedded
quote characters are NOT escaped. A description containing ``"`` produces
a row that strict CSV readers will misparse. Files exported by earlier
versions have the same shape, so this is kept as-is.
"""

import math
from collections.abc import Sequence
from decimal import Decimal

from pocketbalance.models.transaction import Transaction


EXPORT_COLUMNS = ("id", "type", "description", "amount", "category", "date")
EXPORT_MEDIA_TYPE = "text/csv;charset=utf-8"


class NothingToExportError(Exception):
    """Raised when an export is requested for an empty transaction list."""

    def __init__(self, message: str = "Add some transactions before exporting."):
        super().__init__(message)


def format_amount(amount: float) -> str:
    """
    Render an amount the way a JavaScript number prints.

    Uses the shortest round-tripping digits. Plain decimal notation is used
    from 1e-6 up to 1e21; outside that range the exponent form is
    ``1e-7`` / ``1.5e+21`` (no zero padding, explicit ``+``).
    """
    value = float(amount)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    # Position of the decimal point relative to the first digit
    point = len(digits) + exponent

    if len(digits) <= point <= 21:
        return sign + digits + "0" * (point - len(digits))
    if 0 < point <= 21:
        return sign + digits[:point] + "." + digits[point:]
    if -6 < point <= 0:
        return sign + "0." + "0" * -point + digits

    power = point - 1
    mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
    return f"{sign}{mantissa}e{'+' if power >= 0 else '-'}{abs(power)}"


def format_row(transaction: Transaction) -> str:
    category = transaction.category.value if transaction.type == "spending" else ""
    return ",".join([
        transaction.id,
        transaction.type,
        f'"{transaction.description}"',
        format_amount(transaction.amount),
        category,
        transaction.date,
    ])


def format_transactions_csv(transactions: Sequence[Transaction]) -> str:
    """
    Format transactions as CSV text, one header line plus one line per row.

    Rows keep the order they are given in (the store lists most recent first).

    Raises:
        NothingToExportError: If ``transactions`` is empty. A header-only
            document is never produced.
    """
    if not transactions:
        raise NothingToExportError()

    header = ",".join(EXPORT_COLUMNS)
    rows = [format_row(t) for t in transactions]
    return header + "\n" + "\n".join(rows)
