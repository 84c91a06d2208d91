"""Shared pytest fixtures for all tests."""

import copy
from types import SimpleNamespace

import pytest
from bson import ObjectId
from pymongo.errors import PyMongoError

from services.entry_workflow import EntryWorkflow
from services.expense_store import ExpenseStore
from services.table_view import ExpenseTableModel


class InMemoryCursor:
    """Cursor double supporting the sort + async iteration the store uses."""

    def __init__(self, documents, error=None, gate=None):
        self._documents = documents
        self._error = error
        self._gate = gate

    def sort(self, key, direction):
        def sort_key(doc):
            value = doc.get(key)
            return (value is not None, value if value is not None else 0)

        self._documents = sorted(self._documents, key=sort_key, reverse=direction == -1)
        return self

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        if self._gate is not None:
            await self._gate.wait()
        if self._error is not None:
            raise self._error
        for doc in self._documents:
            yield copy.deepcopy(doc)


class InMemoryCollection:
    """Collection double with the subset of the motor API the store calls.

    Set `fail_with` to an exception to make every operation raise it, or
    `find_fail_with` to fail reads only. Reads wait on `read_gate` when set.
    """

    def __init__(self, name="expenses", db_name="expenseTracker_test"):
        self.name = name
        self.database = SimpleNamespace(name=db_name)
        self.documents = []
        self.fail_with = None
        self.find_fail_with = None
        self.read_gate = None
        self.insert_calls = 0

    async def insert_one(self, document):
        self.insert_calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        stored = copy.deepcopy(document)
        stored["_id"] = ObjectId()
        self.documents.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"], acknowledged=True)

    def find(self):
        return InMemoryCursor(list(self.documents), error=self.fail_with or self.find_fail_with, gate=self.read_gate)


class CountingClient:
    """Client double answering ping and counting close calls."""

    def __init__(self):
        self.closed = 0
        self.pings = 0
        self.admin = SimpleNamespace(command=self._command)

    async def _command(self, name):
        self.pings += 1
        return {"ok": 1.0}

    def close(self):
        self.closed += 1


@pytest.fixture
def collection():
    """Empty in-memory expenses collection."""
    return InMemoryCollection()


@pytest.fixture
def store(collection):
    """ExpenseStore backed by the in-memory collection."""
    return ExpenseStore(collection)


@pytest.fixture
def table():
    return ExpenseTableModel()


@pytest.fixture
def workflow(store, table):
    """Entry workflow wired to the in-memory store."""
    return EntryWorkflow(store, table, currency_symbol="₹")


@pytest.fixture
def storage_failure():
    return PyMongoError("connection refused")


@pytest.fixture
def mongo_client():
    return CountingClient()
