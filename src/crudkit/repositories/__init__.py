"""
Repository layer.

Usage:
    from crudkit.repositories import BaseRepository, Repository
"""

from .protocols import Repository
from .base_repository import BaseRepository

__all__ = [
    "Repository",
    "BaseRepository",
]
