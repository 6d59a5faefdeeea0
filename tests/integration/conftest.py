"""Pytest configuration and fixtures for integration tests.

These tests run against a real DynamoDB endpoint (LocalStack or DynamoDB
Local) and are skipped unless DYNAMAP_TEST_ENDPOINT_URL is set, e.g.:

    DYNAMAP_TEST_ENDPOINT_URL=http://localhost:4566 pytest tests/integration
"""

import os
import uuid

import pytest

from dynamap.core.config import Config
from dynamap.services import RepositoryContainer
from dynamap.store.repository import Repository

ENDPOINT_ENV = "DYNAMAP_TEST_ENDPOINT_URL"


@pytest.fixture(scope="session")
def config() -> Config:
    """Provide a Config for the local endpoint, or skip."""
    endpoint = os.environ.get(ENDPOINT_ENV)
    if not endpoint:
        pytest.skip(f"{ENDPOINT_ENV} not set")

    cfg = Config.from_env()
    cfg.aws.endpoint_url = endpoint
    cfg.aws.access_key_id = cfg.aws.access_key_id or "localstack"
    cfg.aws.secret_access_key = cfg.aws.secret_access_key or "localstack"
    return cfg


@pytest.fixture(scope="session")
def container(config: Config) -> RepositoryContainer:
    """Provide a container bound to the local endpoint."""
    with RepositoryContainer(config) as c:
        yield c


@pytest.fixture
def users_table(container: RepositoryContainer) -> str:
    """Create a throwaway Users-shaped table with an email index."""
    client = container.client
    name = f"dynamap-it-{uuid.uuid4().hex[:8]}"
    client.create_table(
        TableName=name,
        AttributeDefinitions=[
            {"AttributeName": "id", "AttributeType": "S"},
            {"AttributeName": "email", "AttributeType": "S"},
        ],
        KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
        GlobalSecondaryIndexes=[
            {
                "IndexName": "email-index",
                "KeySchema": [{"AttributeName": "email", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            }
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    client.get_waiter("table_exists").wait(TableName=name)
    yield name
    client.delete_table(TableName=name)


@pytest.fixture
def repo(container: RepositoryContainer, users_table: str) -> Repository:
    """Provide a Repository defaulting to the throwaway table."""
    return Repository(container.gateway, users_table)
