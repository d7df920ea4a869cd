"""Find-or-create resolution of legacy category names."""

import logging
from collections.abc import Mapping
from types import MappingProxyType

from fintrack.config import settings
from fintrack.errors import UnknownCategoryError
from fintrack.models import CategoryTarget, PersistedCategory, TransactionType
from fintrack.repositories.finance import FinanceStore

logger = logging.getLogger(__name__)

CATEGORY_MAPPING: Mapping[str, CategoryTarget] = MappingProxyType(
    {
        # Expense categories
        "Tagihan": CategoryTarget("Tagihan", TransactionType.EXPENSE),
        "Lainnya": CategoryTarget("Lainnya", TransactionType.EXPENSE),
        "Belanja": CategoryTarget("Belanja", TransactionType.EXPENSE),
        "Kewajiban": CategoryTarget("Kewajiban", TransactionType.EXPENSE),
        "Makanan": CategoryTarget("Makanan", TransactionType.EXPENSE),
        "Transport": CategoryTarget("Transport", TransactionType.EXPENSE),
        # Income categories
        "Gaji": CategoryTarget("Gaji", TransactionType.INCOME),
    }
)


def lookup_category(
    category_label: str, mapping: Mapping[str, CategoryTarget] = CATEGORY_MAPPING
) -> CategoryTarget:
    target = mapping.get(category_label)
    if target is None:
        raise UnknownCategoryError(category_label)
    return target


def find_or_create_category(
    owner_id: str,
    target: CategoryTarget,
    store: FinanceStore,
    icon: str | None = None,
) -> tuple[PersistedCategory, bool]:
    """Return the owner's category for ``target`` and whether it was created now."""
    existing = store.find_category(owner_id, target.name, target.transaction_type)
    if existing is not None:
        return existing, False

    category = store.create_category(
        owner_id,
        target.name,
        target.transaction_type,
        is_default=False,
        icon=icon or settings.legacy_import_default_icon,
    )
    logger.info(
        "Created %s category %s (%s) for %s",
        target.transaction_type.value,
        target.name,
        category.id,
        owner_id,
    )
    return category, True


def resolve_category(
    owner_id: str,
    category_label: str,
    store: FinanceStore,
    *,
    mapping: Mapping[str, CategoryTarget] = CATEGORY_MAPPING,
    icon: str | None = None,
) -> str:
    """
    Return the id of the owner's category for a legacy category label.

    The category is created on first use with the mapped name and type. An
    existing category is returned as-is; its icon and other attributes are
    never touched.

    Raises:
        UnknownCategoryError: the label is not in the mapping.
        PersistenceError: the store failed.
    """
    target = lookup_category(category_label, mapping)
    category, _ = find_or_create_category(owner_id, target, store, icon)
    return category.id
