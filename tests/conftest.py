"""
Shared fixtures for PocketBalance tests.

No test talks to Gemini. Fake models expose the same async
``generate_content_async`` method the real GenerativeModel has.
"""

import base64

import pytest

from pocketbalance.audit import AuditLogger
from pocketbalance.services.storage import InMemoryAuditStorage, InMemoryStorage
from pocketbalance.store import TransactionStore


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModel:
    """Returns canned text and records every request."""

    def __init__(self, text="Food", error=None):
        self.text = text
        self.error = error
        self.requests = []

    async def generate_content_async(self, contents):
        self.requests.append(contents)
        if self.error is not None:
            raise self.error
        return FakeResponse(self.text)


def make_data_uri(data=b"fake-image-bytes", mime_type="image/png"):
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


@pytest.fixture
def audit_sink():
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_sink):
    return AuditLogger(audit_sink)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def store(storage, audit_logger):
    store = TransactionStore(storage=storage, audit_logger=audit_logger)
    store.load()
    return store


def event_types(sink):
    """Event type values in the order they were logged."""
    return [e.event_type.value for e in reversed(sink.get_recent_events(limit=10_000))]
