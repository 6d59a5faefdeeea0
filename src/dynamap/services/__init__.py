"""Service wiring for dynamap."""

from .container import RepositoryContainer, create_client

__all__ = ["RepositoryContainer", "create_client"]
