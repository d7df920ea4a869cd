"""Import of legacy spreadsheet transactions into the normalized tables."""

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from fintrack.errors import LegacyImportError, ShapeValidationError
from fintrack.models import BatchImportResult, ForeignRecord, ImportOutcome, RecordFailure
from fintrack.repositories.finance import FinanceStore, SupabaseFinanceStore
from fintrack.services.finance.category_resolver import (
    find_or_create_category,
    lookup_category,
)
from fintrack.services.finance.legacy_parser import parse_amount, parse_date, parse_type

logger = logging.getLogger(__name__)

REQUIRED_TEXT_FIELDS = ("tanggal", "tipe", "kategori", "judul")


def validate_shape(data: Any) -> ForeignRecord:
    """Check the shape of a raw legacy record and wrap it in a ForeignRecord."""
    if not isinstance(data, Mapping):
        raise ShapeValidationError("record must be an object")

    for key in REQUIRED_TEXT_FIELDS:
        value = data.get(key)
        if value is None:
            raise ShapeValidationError(f"missing required field '{key}'")
        if not isinstance(value, str):
            raise ShapeValidationError(f"field '{key}' must be a string")
        if not value.strip():
            raise ShapeValidationError(f"field '{key}' must not be empty")

    if "jumlah" not in data or data["jumlah"] is None:
        raise ShapeValidationError("missing required field 'jumlah'")
    amount = data["jumlah"]
    if isinstance(amount, bool) or not isinstance(amount, (int, float, Decimal, str)):
        raise ShapeValidationError("field 'jumlah' must be a number or a string")

    description = data.get("deskripsi")
    if description is not None and not isinstance(description, str):
        raise ShapeValidationError("field 'deskripsi' must be a string")

    return ForeignRecord(
        date=data["tanggal"],
        type_label=data["tipe"],
        category_label=data["kategori"],
        title=data["judul"],
        amount=amount,
        description=description or None,
    )


def is_well_formed(data: Any) -> bool:
    try:
        validate_shape(data)
    except ShapeValidationError:
        return False
    return True


def import_record(owner_id: str, data: Any, store: FinanceStore) -> ImportOutcome:
    """
    Import one legacy record.

    Every failure is returned as a failed ImportOutcome. The transaction gets
    the record's own type; the category keeps its mapped type, even when the
    two differ. A category created while resolving is kept when the
    transaction insert fails afterwards.
    """
    created = False
    try:
        record = validate_shape(data)
        transaction_date = parse_date(record.date)
        transaction_type = parse_type(record.type_label)
        amount = parse_amount(record.amount)
        target = lookup_category(record.category_label)
        if target.transaction_type != transaction_type:
            logger.warning(
                "Record typed %s filed under %s category %s",
                transaction_type.value,
                target.transaction_type.value,
                target.name,
            )
        category, created = find_or_create_category(owner_id, target, store)
        transaction = store.create_transaction(
            owner_id,
            amount,
            transaction_type,
            category.id,
            record.title,
            record.description,
            transaction_date,
        )
    except LegacyImportError as exc:
        if created:
            logger.warning(
                "Transaction insert failed after creating category %s; category kept",
                category.id,
            )
        return ImportOutcome.failed(str(exc), data)
    except Exception as exc:
        logger.exception("Unexpected error importing legacy record")
        return ImportOutcome.failed(str(exc) or exc.__class__.__name__, data)

    return ImportOutcome.succeeded(transaction.id)


def import_batch(
    owner_id: str,
    records: Iterable[Any],
    store: FinanceStore | None = None,
) -> BatchImportResult:
    """
    Import legacy records one after another, in input order.

    Args:
        owner_id: The ID of the user the records belong to.
        records: Raw legacy records (decoded JSON objects).
        store: Persistence backend; defaults to Supabase.

    Returns:
        BatchImportResult with counts and one RecordFailure per failed record.
    """
    if store is None:
        store = SupabaseFinanceStore()

    result = BatchImportResult()
    for index, data in enumerate(records):
        result.total += 1
        outcome = import_record(owner_id, data, store)
        if outcome.ok:
            result.successful += 1
            continue
        result.failed += 1
        message = outcome.error or "Unknown error"
        logger.warning("Legacy record %d failed: %s", index, message)
        result.errors.append(RecordFailure(index=index, record=data, message=message))

    logger.info(
        "Legacy import for %s: %d total, %d imported, %d failed",
        owner_id,
        result.total,
        result.successful,
        result.failed,
    )
    return result
