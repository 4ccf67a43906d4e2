"""
Persistence adapters.

Services depend on these repositories rather than touching sessions or
SQL directly.
"""

from .sql_repository import TaskRepository, UserRepository

__all__ = ["TaskRepository", "UserRepository"]
