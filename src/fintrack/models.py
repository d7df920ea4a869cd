from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


@dataclass(frozen=True)
class ForeignRecord:
    """One legacy spreadsheet row after its shape has been checked."""

    date: str
    type_label: str
    category_label: str
    title: str
    amount: int | float | Decimal | str
    description: str | None = None


@dataclass(frozen=True)
class CategoryTarget:
    name: str
    transaction_type: TransactionType


@dataclass(frozen=True)
class PersistedCategory:
    id: str
    owner_id: str
    name: str
    transaction_type: TransactionType
    is_default: bool
    icon: str | None


@dataclass(frozen=True)
class PersistedTransaction:
    id: str
    owner_id: str
    amount: Decimal
    transaction_type: TransactionType
    category_id: str
    title: str
    description: str | None
    transaction_date: date


@dataclass(frozen=True)
class ImportOutcome:
    """Result of importing a single legacy record."""

    ok: bool
    transaction_id: str | None = None
    error: str | None = None
    record: Any = None

    @classmethod
    def succeeded(cls, transaction_id: str) -> "ImportOutcome":
        return cls(ok=True, transaction_id=transaction_id)

    @classmethod
    def failed(cls, error: str, record: Any) -> "ImportOutcome":
        return cls(ok=False, error=error, record=record)


@dataclass(frozen=True)
class RecordFailure:
    """A record that could not be imported, with its position in the batch."""

    index: int
    record: Any
    message: str


@dataclass
class BatchImportResult:
    """Aggregate result of a legacy batch import."""

    total: int = 0
    successful: int = 0
    failed: int = 0
    errors: list[RecordFailure] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "successful": self.successful,
            "failed": self.failed,
            "errors": [
                {"index": e.index, "record": e.record, "message": e.message}
                for e in self.errors
            ],
        }
