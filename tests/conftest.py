"""Pytest configuration and fixtures."""

import pytest

from dynamap.store.repository import Repository
from tests.fakes.gateway import InMemoryGateway
from tests.fakes.records import DEFAULT_TABLE


@pytest.fixture
def gateway() -> InMemoryGateway:
    """Provide an in-memory gateway with the test tables' keys and indexes."""
    return InMemoryGateway(
        key_attributes={"Users": "id", DEFAULT_TABLE: "sku"},
        indexes={"Users": {"email-index": "email"}},
    )


@pytest.fixture
def repo(gateway: InMemoryGateway) -> Repository:
    """Provide a Repository over the in-memory gateway."""
    return Repository(gateway, DEFAULT_TABLE)
