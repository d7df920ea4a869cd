import pytest

from fintrack.errors import PersistenceError
from fintrack.repositories.finance import MemoryFinanceStore


class FailingTransactionStore(MemoryFinanceStore):
    def create_transaction(self, *args, **kwargs):
        raise PersistenceError("insert violates foreign key constraint")


@pytest.fixture
def store():
    return MemoryFinanceStore()


@pytest.fixture
def failing_store():
    return FailingTransactionStore()
