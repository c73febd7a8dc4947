"""
Shared fixtures.

``FakeMotorClient`` keeps databases in memory and answers the subset of the
motor API that MongoKit calls. Tests patch it in for ``AsyncIOMotorClient``.
"""

import copy
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from mongokit.core.connection import ConnectionManager

TEST_URI = "mongodb://localhost:27017"


def _id_of(filter_doc):
    return (filter_doc or {}).get("_id")


class FakeCursor:
    def __init__(self, documents):
        self._documents = documents

    async def to_list(self, length=None):
        return list(self._documents)


class FakeCollection:
    def __init__(self, database, name):
        self.database = database
        self.name = name

    @property
    def _docs(self):
        return self.database.store.setdefault(self.name, {})

    def find(self, filter=None, projection=None):
        docs = [copy.deepcopy(doc) for doc in self._docs.values()]
        if filter and "_id" in filter:
            docs = [doc for doc in docs if doc["_id"] == filter["_id"]]
        if projection:
            docs = [
                {key: value for key, value in doc.items() if key in projection}
                for doc in docs
            ]
        return FakeCursor(docs)

    async def find_one(self, filter=None):
        doc = self._docs.get(_id_of(filter))
        return copy.deepcopy(doc) if doc is not None else None

    async def replace_one(self, filter, replacement, upsert=False):
        if "_id" in replacement:
            raise AssertionError("replacement must not carry _id")
        if any(key.startswith("$") for key in replacement):
            raise ValueError("replacement can not include $ operators")
        doc_id = _id_of(filter)
        matched = doc_id in self._docs
        if matched or upsert:
            self._docs[doc_id] = {"_id": doc_id, **copy.deepcopy(replacement)}
        return SimpleNamespace(
            matched_count=int(matched),
            upserted_id=None if matched or not upsert else doc_id,
        )

    async def update_one(self, filter, update, upsert=False):
        doc_id = _id_of(filter)
        matched = doc_id in self._docs
        if not matched and not upsert:
            return SimpleNamespace(matched_count=0, upserted_id=None)
        doc = self._docs.setdefault(doc_id, {"_id": doc_id})
        doc.update(copy.deepcopy(update["$set"]))
        return SimpleNamespace(
            matched_count=int(matched),
            upserted_id=None if matched else doc_id,
        )

    async def drop(self):
        self.database.store.pop(self.name, None)


class FakeDatabase:
    def __init__(self, client, name):
        self.client = client
        self.name = name

    @property
    def store(self):
        return self.client.store.setdefault(self.name, {})

    def __getitem__(self, name):
        return FakeCollection(self, name)

    async def list_collection_names(self):
        return [name for name, docs in self.store.items() if docs]


class FakeMotorClient:
    """In-memory stand-in for ``AsyncIOMotorClient``."""

    def __init__(self):
        self.store = {}
        self.admin = MagicMock()
        self.admin.command = AsyncMock(return_value={"ok": 1.0})
        self.close = MagicMock()

    def __getitem__(self, name):
        return FakeDatabase(self, name)

    async def list_database_names(self):
        return [name for name, cols in self.store.items() if any(cols.values())]

    def seed(self, database, collection, documents):
        docs = self.store.setdefault(database, {}).setdefault(collection, {})
        for doc in documents:
            docs[doc["_id"]] = copy.deepcopy(doc)


@pytest.fixture
def fake_client():
    """Empty in-memory MongoDB."""
    return FakeMotorClient()


@pytest.fixture
def motor_class(fake_client):
    """Patch ``AsyncIOMotorClient`` to hand out ``fake_client``."""
    with patch(
        "mongokit.core.connection.AsyncIOMotorClient", return_value=fake_client
    ) as mock_class:
        yield mock_class


@pytest.fixture
def session(motor_class):
    """Unconnected ConnectionManager backed by the fake client."""
    return ConnectionManager(TEST_URI)
