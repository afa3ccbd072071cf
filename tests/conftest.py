"""
Shared fixtures.

Backends are replaced by an in-memory fake that records every call, so
tests can assert both what ended up in the store and which backend
operations were (or were not) issued.
"""

import pytest

from recordkeeper.models.schema import EXPENSE_SCHEMA, NOTE_SCHEMA, WIKI_SCHEMA
from recordkeeper.orchestrator import DomainWorkspace

from tests.factories import InMemoryStorage


@pytest.fixture
def messages() -> list[str]:
    """Everything shown to the user through the notifier."""
    return []


def _workspace(schema, messages, records=None) -> DomainWorkspace:
    return DomainWorkspace(
        schema,
        InMemoryStorage(schema, records),
        notify=messages.append,
        uncategorized_label="Sem categoria",
    )


@pytest.fixture
def notes(messages) -> DomainWorkspace:
    return _workspace(NOTE_SCHEMA, messages)


@pytest.fixture
def expenses(messages) -> DomainWorkspace:
    return _workspace(EXPENSE_SCHEMA, messages)


@pytest.fixture
def wiki(messages) -> DomainWorkspace:
    return _workspace(WIKI_SCHEMA, messages)


@pytest.fixture
def workspace_factory(messages):
    """Build a domain workspace over pre-existing backend records."""
    def factory(schema, records=None):
        return _workspace(schema, messages, records)
    return factory
