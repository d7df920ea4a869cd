"""Unit tests for legacy category resolution."""

from unittest.mock import MagicMock

import pytest

from fintrack.errors import PersistenceError, UnknownCategoryError
from fintrack.models import CategoryTarget, PersistedCategory, TransactionType
from fintrack.services.finance.category_resolver import (
    CATEGORY_MAPPING,
    find_or_create_category,
    lookup_category,
    resolve_category,
)


class TestCategoryMapping:
    def test_expense_and_income_labels(self):
        assert CATEGORY_MAPPING["Tagihan"] == CategoryTarget("Tagihan", TransactionType.EXPENSE)
        assert CATEGORY_MAPPING["Gaji"] == CategoryTarget("Gaji", TransactionType.INCOME)

    def test_mapping_is_read_only(self):
        with pytest.raises(TypeError):
            CATEGORY_MAPPING["Baru"] = CategoryTarget("Baru", TransactionType.EXPENSE)

    def test_lookup_unknown(self):
        with pytest.raises(UnknownCategoryError) as excinfo:
            lookup_category("Unknown")
        assert excinfo.value.label == "Unknown"


class TestResolveCategory:
    def test_creates_missing_category(self, store):
        category_id = resolve_category("user-1", "Tagihan", store)

        assert len(store.categories) == 1
        category = store.categories[0]
        assert category.id == category_id
        assert category.owner_id == "user-1"
        assert category.name == "Tagihan"
        assert category.transaction_type is TransactionType.EXPENSE
        assert category.is_default is False
        assert category.icon == "circle"

    def test_reuses_existing_category(self, store):
        first = resolve_category("user-1", "Makanan", store)
        second = resolve_category("user-1", "Makanan", store)

        assert first == second
        assert len(store.categories) == 1

    def test_categories_are_per_owner(self, store):
        first = resolve_category("user-1", "Gaji", store)
        second = resolve_category("user-2", "Gaji", store)

        assert first != second
        assert len(store.categories) == 2

    def test_existing_category_is_not_modified(self):
        existing = PersistedCategory(
            id="cat-9",
            owner_id="user-1",
            name="Belanja",
            transaction_type=TransactionType.EXPENSE,
            is_default=True,
            icon="shopping-cart",
        )
        store = MagicMock()
        store.find_category.return_value = existing

        assert resolve_category("user-1", "Belanja", store) == "cat-9"
        store.find_category.assert_called_once_with(
            "user-1", "Belanja", TransactionType.EXPENSE
        )
        store.create_category.assert_not_called()

    def test_unknown_label_touches_nothing(self):
        store = MagicMock()
        with pytest.raises(UnknownCategoryError):
            resolve_category("user-1", "Unknown", store)
        store.find_category.assert_not_called()
        store.create_category.assert_not_called()

    def test_uses_mapped_type(self, store):
        resolve_category("user-1", "Lainnya", store)

        assert store.categories[0].transaction_type is TransactionType.EXPENSE

    def test_custom_mapping_and_icon(self, store):
        mapping = {"Kasbon": CategoryTarget("Pinjaman", TransactionType.EXPENSE)}
        resolve_category("user-1", "Kasbon", store, mapping=mapping, icon="wallet")

        assert store.categories[0].name == "Pinjaman"
        assert store.categories[0].icon == "wallet"

    def test_store_failure_propagates(self):
        store = MagicMock()
        store.find_category.side_effect = PersistenceError("connection reset")
        with pytest.raises(PersistenceError):
            resolve_category("user-1", "Tagihan", store)


class TestFindOrCreateCategory:
    def test_reports_creation(self, store):
        target = CATEGORY_MAPPING["Transport"]

        category, created = find_or_create_category("user-1", target, store)
        again, created_again = find_or_create_category("user-1", target, store)

        assert created is True
        assert created_again is False
        assert again.id == category.id
