"""
Shared pytest fixtures for the movie API tests.

No real MongoDB is needed: the store is built either over a MagicMock
collection (to check driver calls) or over an in-memory collection that
answers the handful of queries MovieStore issues.
"""

import copy
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

from movie_api.main import create_app
from movie_api.movie_service import MovieStore


class InMemoryCollection:
    """Equality-filter subset of a pymongo Collection, kept in a list."""

    def __init__(self, docs=None):
        self.docs = [copy.deepcopy(d) for d in docs or []]

    @staticmethod
    def _matches(doc, query):
        for key, cond in (query or {}).items():
            if isinstance(cond, dict) and "$eq" in cond:
                cond = cond["$eq"]
            if key not in doc or doc[key] != cond:
                return False
        return True

    def find(self, query=None, **kwargs):
        return iter([copy.deepcopy(d) for d in self.docs if self._matches(d, query)])

    def find_one(self, query=None, **kwargs):
        return next(self.find(query), None)

    def insert_one(self, doc):
        if any(d["_id"] == doc["_id"] for d in self.docs):
            raise DuplicateKeyError(f"E11000 duplicate key error: {doc['_id']}")
        self.docs.append(copy.deepcopy(doc))
        return InsertOneResult(doc["_id"], True)

    def delete_one(self, query):
        for i, doc in enumerate(self.docs):
            if self._matches(doc, query):
                del self.docs[i]
                return DeleteResult({"n": 1}, True)
        return DeleteResult({"n": 0}, True)

    def update_one(self, query, update):
        for doc in self.docs:
            if self._matches(doc, query):
                before = dict(doc)
                doc.update(update["$set"])
                return UpdateResult({"n": 1, "nModified": int(doc != before)}, True)
        return UpdateResult({"n": 0, "nModified": 0}, True)


@pytest.fixture
def collection():
    return InMemoryCollection()

@pytest.fixture
def store(collection):
    return MovieStore(collection, lookup_timeout_ms=30000)

@pytest.fixture
def mock_collection():
    return MagicMock()

@pytest.fixture
def mock_store(mock_collection):
    return MovieStore(mock_collection, lookup_timeout_ms=30000)

@pytest.fixture
def client(store):
    """TestClient over an app wired to the in-memory store."""
    return TestClient(create_app(store=store))

@pytest.fixture
def sample_movie():
    return {
        "name": "Inception",
        "description": "A thief who steals corporate secrets through dreams.",
        "cover_image": "https://example.com/inception.jpg",
    }
