"""Configuration management for dynamap."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv


@dataclass
class AWSConfig:
    """DynamoDB client configuration."""

    region: str = "us-east-1"
    # Override for LocalStack or DynamoDB Local, e.g. http://localhost:4566
    endpoint_url: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    connect_timeout: float = 5.0
    read_timeout: float = 10.0
    max_attempts: int = 3


@dataclass
class Config:
    """Main repository configuration."""

    table_name: str = ""
    # Key attribute used by delete() when no record type is given
    key_attribute: str = "id"
    consistent_reads: bool = True
    # Items per query/scan request; None leaves paging to the store
    page_size: int | None = None
    aws: AWSConfig = field(default_factory=AWSConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        config = cls()

        if table := os.environ.get("DYNAMAP_TABLE_NAME"):
            config.table_name = table

        if key := os.environ.get("DYNAMAP_KEY_ATTRIBUTE"):
            config.key_attribute = key

        if consistent := os.environ.get("DYNAMAP_CONSISTENT_READS"):
            config.consistent_reads = consistent.lower() not in ("0", "false", "no")

        if page_size := os.environ.get("DYNAMAP_PAGE_SIZE"):
            config.page_size = int(page_size)

        # AWS configuration
        if region := os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION"):
            config.aws.region = region

        if url := os.environ.get("AWS_ENDPOINT_URL"):
            config.aws.endpoint_url = url

        if key_id := os.environ.get("AWS_ACCESS_KEY_ID"):
            config.aws.access_key_id = key_id
        if secret := os.environ.get("AWS_SECRET_ACCESS_KEY"):
            config.aws.secret_access_key = secret

        if timeout := os.environ.get("DYNAMAP_CONNECT_TIMEOUT"):
            config.aws.connect_timeout = float(timeout)
        if timeout := os.environ.get("DYNAMAP_READ_TIMEOUT"):
            config.aws.read_timeout = float(timeout)
        if attempts := os.environ.get("DYNAMAP_MAX_ATTEMPTS"):
            config.aws.max_attempts = int(attempts)

        return config

    @classmethod
    def from_env_file(cls, path: Path) -> "Config":
        """Load a dotenv file, then configuration from environment.

        Variables already set in the environment take precedence over the file.

        Args:
            path: Path to the env file.

        Returns:
            Config with file and environment values applied.
        """
        load_dotenv(dotenv_path=path, override=False)
        return cls.from_env()
