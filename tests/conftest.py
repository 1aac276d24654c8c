import os

# Cheap hashes for tests; must be set before the settings are first loaded.
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import mongomock
import pytest
from fastapi.testclient import TestClient

import database


@pytest.fixture
def mongo_db(monkeypatch):
    """In-memory MongoDB swapped in for the real database."""
    test_db = mongomock.MongoClient()["magazine_test"]
    monkeypatch.setattr(database, "db", test_db)
    database.ensure_indexes()
    return test_db


@pytest.fixture
def client(mongo_db):
    from main import app
    return TestClient(app)


@pytest.fixture
def article_fields():
    return {
        "title": "T",
        "category": "C",
        "excerpt": "E",
        "readtime": "5 min",
        "author": "X",
        "content": "body",
        "image": ["http://img"],
    }


@pytest.fixture
def article(mongo_db, article_fields):
    import articles
    return articles.create(article_fields)


@pytest.fixture
def user(mongo_db):
    import auth
    return auth.register("Ada", "ada@x.com", "pw12345")
