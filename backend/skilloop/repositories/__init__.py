# backend/skilloop/repositories/__init__.py
"""Data access layer. Repositories flush; services commit."""

from .base_repository import BaseRepository
from .factory import RepositoryFactory

__all__ = ["BaseRepository", "RepositoryFactory"]
