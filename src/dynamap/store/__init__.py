"""DynamoDB data access layer for dynamap.

Example:
    import boto3
    from dynamap.store import Boto3Gateway, Repository

    repo = Repository(Boto3Gateway(boto3.client("dynamodb")), "Users")
    repo.create(User(id="u1", email="a@x.com", name="A"))
    user = repo.find_by_id("u1", User)
    same_email = repo.find_by_parameter("email", "a@x.com", User)
"""

from .context import CallContext
from .expressions import Expression
from .gateway import Boto3Gateway, PersistenceGateway
from .marshal import marshal_record, marshal_value, unmarshal_record, unmarshal_records
from .repository import Repository

__all__ = [
    "Repository",
    "PersistenceGateway",
    "Boto3Gateway",
    "CallContext",
    "Expression",
    "marshal_record",
    "marshal_value",
    "unmarshal_record",
    "unmarshal_records",
]
