"""Repository for categories and transactions written by the legacy importer."""

from __future__ import annotations

import itertools
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Protocol

import httpx
from postgrest.exceptions import APIError

from fintrack.config import settings
from fintrack.errors import PersistenceError
from fintrack.models import PersistedCategory, PersistedTransaction, TransactionType
from fintrack.services.supabase_client import get_supabase

logger = logging.getLogger(__name__)

CATEGORIES_TABLE = "categories"
TRANSACTIONS_TABLE = "transactions"

CATEGORY_COLUMNS = "id, user_id, name, type, is_default, icon"
TRANSACTION_COLUMNS = (
    "id, user_id, amount, type, category_id, title, description, transaction_date"
)
CATEGORY_CONFLICT_TARGET = "user_id,name,type"


class FinanceStore(Protocol):
    def find_category(
        self, owner_id: str, name: str, transaction_type: TransactionType
    ) -> PersistedCategory | None: ...

    def create_category(
        self,
        owner_id: str,
        name: str,
        transaction_type: TransactionType,
        is_default: bool,
        icon: str | None,
    ) -> PersistedCategory: ...

    def create_transaction(
        self,
        owner_id: str,
        amount: Decimal,
        transaction_type: TransactionType,
        category_id: str,
        title: str,
        description: str | None,
        transaction_date: date,
    ) -> PersistedTransaction: ...


def _build_category(row: dict) -> PersistedCategory:
    return PersistedCategory(
        id=str(row["id"]),
        owner_id=str(row["user_id"]),
        name=row["name"],
        transaction_type=TransactionType(row["type"]),
        is_default=bool(row.get("is_default", False)),
        icon=row.get("icon"),
    )


def _build_transaction(row: dict) -> PersistedTransaction:
    description = row.get("description")
    return PersistedTransaction(
        id=str(row["id"]),
        owner_id=str(row["user_id"]),
        amount=Decimal(str(row["amount"])),
        transaction_type=TransactionType(row["type"]),
        category_id=str(row["category_id"]),
        title=row["title"],
        description=description or None,
        transaction_date=date.fromisoformat(row["transaction_date"]),
    )


class SupabaseFinanceStore:
    """FinanceStore backed by the Supabase `categories` and `transactions` tables.

    With ``atomic_upsert`` enabled, category creation relies on a unique
    constraint over ``(user_id, name, type)``: the insert ignores conflicts and
    the row that won is read back, so concurrent imports never duplicate a
    category. Without it the plain read-then-insert sequence is used.
    """

    def __init__(self, client: Any = None, atomic_upsert: bool | None = None) -> None:
        self._client = client
        if atomic_upsert is None:
            atomic_upsert = settings.legacy_import_atomic_category_upsert
        self.atomic_upsert = atomic_upsert

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = get_supabase()
        return self._client

    def find_category(
        self, owner_id: str, name: str, transaction_type: TransactionType
    ) -> PersistedCategory | None:
        try:
            response = (
                self.client.table(CATEGORIES_TABLE)
                .select(CATEGORY_COLUMNS)
                .eq("user_id", owner_id)
                .eq("name", name)
                .eq("type", transaction_type.value)
                .limit(1)
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise PersistenceError(f"Failed to look up category: {exc}") from exc
        rows = response.data or []
        return _build_category(rows[0]) if rows else None

    def create_category(
        self,
        owner_id: str,
        name: str,
        transaction_type: TransactionType,
        is_default: bool,
        icon: str | None,
    ) -> PersistedCategory:
        payload = {
            "user_id": owner_id,
            "name": name,
            "type": transaction_type.value,
            "is_default": is_default,
            "icon": icon,
        }
        table = self.client.table(CATEGORIES_TABLE)
        try:
            if self.atomic_upsert:
                response = table.upsert(
                    payload,
                    on_conflict=CATEGORY_CONFLICT_TARGET,
                    ignore_duplicates=True,
                ).execute()
            else:
                response = table.insert(payload).execute()
        except (APIError, httpx.HTTPError) as exc:
            raise PersistenceError(f"Failed to create category: {exc}") from exc

        rows = response.data or []
        if rows:
            return _build_category(rows[0])

        # Conflict ignored: another writer created the row first.
        existing = self.find_category(owner_id, name, transaction_type)
        if existing is None:
            raise PersistenceError(f"Failed to create category: {name}")
        logger.info(
            "Category %s (%s) already existed for %s",
            name,
            transaction_type.value,
            owner_id,
        )
        return existing

    def create_transaction(
        self,
        owner_id: str,
        amount: Decimal,
        transaction_type: TransactionType,
        category_id: str,
        title: str,
        description: str | None,
        transaction_date: date,
    ) -> PersistedTransaction:
        try:
            response = (
                self.client.table(TRANSACTIONS_TABLE)
                .insert(
                    {
                        "user_id": owner_id,
                        "amount": str(amount),
                        "type": transaction_type.value,
                        "category_id": category_id,
                        "title": title,
                        "description": description or None,
                        "transaction_date": transaction_date.isoformat(),
                    }
                )
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise PersistenceError(str(exc)) from exc
        rows = response.data or []
        if not rows:
            raise PersistenceError("Transaction insert returned no row")
        return _build_transaction(rows[0])


class MemoryFinanceStore:
    """FinanceStore kept in process memory, used for dry runs."""

    def __init__(self) -> None:
        self.categories: list[PersistedCategory] = []
        self.transactions: list[PersistedTransaction] = []
        self._ids = itertools.count(1)

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    def find_category(
        self, owner_id: str, name: str, transaction_type: TransactionType
    ) -> PersistedCategory | None:
        for category in self.categories:
            if (
                category.owner_id == owner_id
                and category.name == name
                and category.transaction_type == transaction_type
            ):
                return category
        return None

    def create_category(
        self,
        owner_id: str,
        name: str,
        transaction_type: TransactionType,
        is_default: bool,
        icon: str | None,
    ) -> PersistedCategory:
        existing = self.find_category(owner_id, name, transaction_type)
        if existing is not None:
            return existing
        category = PersistedCategory(
            id=self._next_id("category"),
            owner_id=owner_id,
            name=name,
            transaction_type=transaction_type,
            is_default=is_default,
            icon=icon,
        )
        self.categories.append(category)
        return category

    def create_transaction(
        self,
        owner_id: str,
        amount: Decimal,
        transaction_type: TransactionType,
        category_id: str,
        title: str,
        description: str | None,
        transaction_date: date,
    ) -> PersistedTransaction:
        transaction = PersistedTransaction(
            id=self._next_id("transaction"),
            owner_id=owner_id,
            amount=amount,
            transaction_type=transaction_type,
            category_id=category_id,
            title=title,
            description=description or None,
            transaction_date=transaction_date,
        )
        self.transactions.append(transaction)
        return transaction
