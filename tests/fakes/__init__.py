"""Test fakes for testing without real infrastructure.

This module provides:
- An in-memory PersistenceGateway (for testing the repository without DynamoDB)
- Record types shared across tests

Example:
    from dynamap.store.repository import Repository
    from tests.fakes import InMemoryGateway, User

    gateway = InMemoryGateway(indexes={"Users": {"email-index": "email"}})
    repo = Repository(gateway, "Items")
    repo.create(User(id="u1", email="a@x.com", name="A"))
"""

from .gateway import InMemoryGateway
from .records import AuditEvent, KeyOnly, Order, Product, TenantRecord, User

__all__ = [
    # Gateway fakes
    "InMemoryGateway",
    # Records
    "User",
    "Product",
    "AuditEvent",
    "KeyOnly",
    "TenantRecord",
    "Order",
]
