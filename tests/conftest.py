"""
Shared fixtures: an in-memory response store and the objects built on it.
"""

import threading
from datetime import datetime, timezone

import pytest

from app import create_app
from config import TestingConfig
from database.response_store import ResponseStore, StoreError, DuplicateRecord
from services.quiz_controller import QuizController
from services.response_gateway import ResponseGateway

DOMAIN = "allowed.com"


class InMemoryResponseStore(ResponseStore):
    """ResponseStore keeping records in a list, unique on email."""

    def __init__(self, emails=()):
        self.records = []
        self.fail_find = False
        self.fail_insert = False
        self.find_calls = 0
        self._lock = threading.Lock()
        for email in emails:
            self.insert({"email": email, "answers": "[1, 1, 1, 1, 1]", "score": 5,
                         "result": "Cerveza dorada ligera"})

    def find(self, pattern):
        self.find_calls += 1
        if self.fail_find:
            raise StoreError("connection refused")
        return [{"id": r["id"], "email": r["email"]}
                for r in self.records if pattern.matches(r["email"])]

    def find_by_email(self, email):
        if self.fail_find:
            raise StoreError("connection refused")
        found = [dict(r) for r in self.records if r["email"] == email]
        return sorted(found, key=lambda r: r["created_at"], reverse=True)

    def insert(self, record):
        if self.fail_insert:
            raise StoreError("insert timed out")
        with self._lock:
            if any(r["email"] == record["email"] for r in self.records):
                raise DuplicateRecord(f"{record['email']} already stored")
            stored = dict(record)
            stored["id"] = str(len(self.records) + 1)
            stored["created_at"] = datetime.now(timezone.utc)
            self.records.append(stored)
            return stored["id"]


@pytest.fixture
def store():
    return InMemoryResponseStore()


@pytest.fixture
def gateway(store):
    return ResponseGateway(store, allowed_domain=DOMAIN, fail_closed=True)


@pytest.fixture
def controller(gateway):
    return QuizController(gateway, allowed_domain=DOMAIN)


@pytest.fixture
def app(store):
    app = create_app(TestingConfig, store=store)
    return app


@pytest.fixture
def client(app):
    return app.test_client()
