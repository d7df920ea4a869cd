"""Errors raised while importing legacy spreadsheet records."""


class LegacyImportError(Exception):
    """Base class for every per-record import failure."""


class ShapeValidationError(LegacyImportError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"validation error: {reason}")
        self.reason = reason


class MalformedDateError(LegacyImportError):
    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid date format: '{value}' (expected d/m/yyyy)")
        self.value = value


class MalformedAmountError(LegacyImportError):
    def __init__(self, value: object, reason: str = "not a number") -> None:
        super().__init__(f"Invalid amount: '{value}' ({reason})")
        self.value = value
        self.reason = reason


class UnknownTypeError(LegacyImportError):
    def __init__(self, label: str) -> None:
        super().__init__(f"Unknown transaction type: {label}")
        self.label = label


class UnknownCategoryError(LegacyImportError):
    def __init__(self, label: str) -> None:
        super().__init__(
            f"Unknown category: {label}. Please add it to the category mapping."
        )
        self.label = label


class PersistenceError(LegacyImportError):
    """The datastore rejected a read or write; the message carries its cause."""


class PayloadError(ValueError):
    """A submitted payload could not be decoded into legacy records."""
