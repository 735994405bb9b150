"""Database layer for memberpoints."""

from memberpoints.db.repository import PointsRepository
from memberpoints.db.schema import create_schema

__all__ = ["PointsRepository", "create_schema"]
