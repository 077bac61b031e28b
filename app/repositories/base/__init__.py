"""
Base repositories package.

Provides the generic repository every fee engine repository builds on.
"""

from app.repositories.base.base_repository import BaseRepository

__all__ = ["BaseRepository"]
