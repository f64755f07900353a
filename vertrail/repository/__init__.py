"""
Repository access for vertrail.

    from vertrail.repository import GitRepository, RepositoryReader
"""

from __future__ import annotations

from vertrail.repository.base import RepositoryReader
from vertrail.repository.git import GitRepository

__all__ = [
    "RepositoryReader",
    "GitRepository",
]
