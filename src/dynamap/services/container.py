"""Container wiring the DynamoDB client, gateway and repository."""

from __future__ import annotations

from typing import Any

import boto3
from botocore.config import Config as BotocoreConfig
from loguru import logger

from ..core.config import Config
from ..store.gateway import Boto3Gateway
from ..store.repository import Repository


def create_client(config: Config) -> Any:
    """Create a low-level DynamoDB client from configuration.

    Connect/read timeouts bound every request, so a stalled network call
    fails instead of hanging.
    """
    aws = config.aws
    botocore_config = BotocoreConfig(
        region_name=aws.region,
        connect_timeout=aws.connect_timeout,
        read_timeout=aws.read_timeout,
        retries={"max_attempts": aws.max_attempts, "mode": "standard"},
    )

    kwargs: dict[str, Any] = {"config": botocore_config}
    if aws.endpoint_url:
        kwargs["endpoint_url"] = aws.endpoint_url
    if aws.access_key_id and aws.secret_access_key:
        kwargs["aws_access_key_id"] = aws.access_key_id
        kwargs["aws_secret_access_key"] = aws.secret_access_key

    logger.debug(f"Creating DynamoDB client: region={aws.region!r}, endpoint={aws.endpoint_url!r}")
    return boto3.client("dynamodb", **kwargs)


class RepositoryContainer:
    """Manages the DynamoDB client and the repository built on it.

    The client is created lazily on first access.

    Usage as context manager:

        with RepositoryContainer(Config.from_env()) as container:
            container.repository.create(user)

    Attributes:
        config: Repository configuration.
    """

    def __init__(self, config: Config, client: Any | None = None):
        """Initialize container with configuration.

        Args:
            config: Repository configuration.
            client: Existing DynamoDB client to use instead of creating one.
        """
        self.config = config
        self._client = client
        self._owns_client = client is None
        self._gateway: Boto3Gateway | None = None
        self._repository: Repository | None = None

    @property
    def client(self) -> Any:
        """Get or create the DynamoDB client."""
        if self._client is None:
            self._client = create_client(self.config)
        return self._client

    @property
    def gateway(self) -> Boto3Gateway:
        """Get or create the Boto3Gateway."""
        if self._gateway is None:
            self._gateway = Boto3Gateway(
                self.client,
                consistent_reads=self.config.consistent_reads,
                page_size=self.config.page_size,
            )
        return self._gateway

    @property
    def repository(self) -> Repository:
        """Get or create the Repository."""
        if self._repository is None:
            self._repository = Repository(
                self.gateway,
                self.config.table_name,
                key_attribute=self.config.key_attribute,
            )
        return self._repository

    def close(self) -> None:
        """Close the client if this container created it."""
        if self._client is not None and self._owns_client:
            self._client.close()
            logger.debug("DynamoDB client closed")
        self._client = None
        self._gateway = None
        self._repository = None

    def __enter__(self) -> "RepositoryContainer":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
