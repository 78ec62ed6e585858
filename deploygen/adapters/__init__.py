"""
Stores — the generator's collaborators.

    from deploygen.adapters import ConfigStore, RepositoryStore
"""

from deploygen.adapters.base import ConfigStore, RepositoryStore
from deploygen.adapters.file_store import FileStore
from deploygen.adapters.memory import MemoryConfigStore, MemoryRepositoryStore

__all__ = [
    "ConfigStore",
    "FileStore",
    "MemoryConfigStore",
    "MemoryRepositoryStore",
    "RepositoryStore",
]
