# database/response_store.py
"""
Boundary between the quiz and whatever table holds the responses.

The gateway only talks to a ResponseStore; the Mongo implementation lives in
database/mongodb.py and tests use an in-memory one.
"""
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass


class StoreError(Exception):
    """The record store could not complete the request."""


class DuplicateRecord(StoreError):
    """Insert rejected by the store's unique constraint on email."""


@dataclass(frozen=True)
class EmailPattern:
    """
    Case-insensitive `<prefix>*@<domain>` match.

    The prefix is taken literally; only the gap between prefix and `@` is a
    wildcard.
    """
    prefix: str
    domain: str

    def to_regex(self) -> str:
        return f"^{re.escape(self.prefix)}.*@{re.escape(self.domain)}$"

    def matches(self, email: str) -> bool:
        return re.match(self.to_regex(), email or "", re.IGNORECASE) is not None

    def __str__(self) -> str:
        return f"{self.prefix}*@{self.domain}"


class ResponseStore(ABC):
    """Record store holding one quiz response per email."""

    @abstractmethod
    def find(self, pattern: EmailPattern) -> list[dict]:
        """
        Return `{"id", "email"}` for every record whose email matches pattern.

        Raises:
            StoreError: query could not be executed
        """
        pass

    @abstractmethod
    def find_by_email(self, email: str) -> list[dict]:
        """Return full records stored under exactly `email`, newest first."""
        pass

    @abstractmethod
    def insert(self, record: dict) -> str:
        """
        Insert a record and return its id. The store sets `created_at`.

        Raises:
            DuplicateRecord: email already stored
            StoreError: any other failure
        """
        pass
