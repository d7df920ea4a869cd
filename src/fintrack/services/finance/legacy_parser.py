"""Parsers for the scalar fields of legacy spreadsheet rows."""

import math
import re
from datetime import date
from decimal import Decimal

from fintrack.errors import MalformedAmountError, MalformedDateError, UnknownTypeError
from fintrack.models import TransactionType

INCOME_LABEL = "Pemasukan"
EXPENSE_LABEL = "Pengeluaran"

TYPE_LABELS = {
    INCOME_LABEL: TransactionType.INCOME,
    EXPENSE_LABEL: TransactionType.EXPENSE,
}

_CURRENCY_PREFIX = re.compile(r"^\s*(?:Rp|IDR)\s*", re.IGNORECASE)
_DIGITS = re.compile(r"\d+", re.ASCII)
_PLAIN_NUMBER = re.compile(r"[+-]?\d+", re.ASCII)


def parse_date(value: str) -> date:
    """Parse a ``d/m/yyyy`` date into a calendar date."""
    parts = value.strip().split("/")
    if len(parts) != 3 or not all(_DIGITS.fullmatch(part) for part in parts):
        raise MalformedDateError(value)
    day, month, year = (int(part) for part in parts)
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise MalformedDateError(value) from exc


def parse_amount(value: int | float | Decimal | str) -> Decimal:
    """
    Parse a legacy amount into a Decimal.

    Strings may carry an ``Rp``/``IDR`` prefix. Every ``.`` and ``,`` is
    dropped, so ``"Rp 150.000"`` becomes ``150000`` and ``"12.50"`` becomes
    ``1250``.
    """
    if isinstance(value, bool):
        raise MalformedAmountError(value)

    if isinstance(value, str):
        cleaned = _CURRENCY_PREFIX.sub("", value)
        cleaned = cleaned.replace(".", "").replace(",", "").strip()
        if not _PLAIN_NUMBER.fullmatch(cleaned):
            raise MalformedAmountError(value)
        amount = Decimal(cleaned)
    elif isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise MalformedAmountError(value, "not finite")
        amount = Decimal(str(value))
    else:
        raise MalformedAmountError(value)

    if not amount.is_finite():
        raise MalformedAmountError(value, "not finite")
    if amount < 0:
        raise MalformedAmountError(value, "negative")
    return amount


def parse_type(label: str) -> TransactionType:
    try:
        return TYPE_LABELS[label]
    except KeyError:
        raise UnknownTypeError(label) from None
