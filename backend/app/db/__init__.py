"""Database connections package."""

from app.db.dynamodb import DynamoDBClient
from app.db.postgres import Database, get_session

__all__ = ["Database", "get_session", "DynamoDBClient"]
