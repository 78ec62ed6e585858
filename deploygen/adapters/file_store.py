"""
File store — serves configs and repositories from a deploygen.yml.

The document is read once when the store is created; later edits to the
file are not picked up.  One instance satisfies both store contracts.
"""

from __future__ import annotations

import logging
from pathlib import Path

from deploygen.adapters.base import ConfigStore, RepositoryStore
from deploygen.core.config.loader import find_store_file, load_store
from deploygen.core.context import RequestContext
from deploygen.core.errors import NotFoundError
from deploygen.core.models import DeploymentConfig, ImageRepository, StoreDocument

logger = logging.getLogger(__name__)


class FileStore(ConfigStore, RepositoryStore):
    """Read-only store over a loaded StoreDocument."""

    def __init__(self, document: StoreDocument, path: Path | None = None):
        self._document = document
        self._path = path

    @classmethod
    def from_path(cls, path: Path | None = None) -> FileStore:
        """Load the store file (searching upward when ``path`` is None).

        Raises:
            ConfigError: If the file is missing or invalid.
        """
        if path is None:
            path = find_store_file()
        return cls(load_store(path), path)

    @property
    def document(self) -> StoreDocument:
        return self._document

    @property
    def path(self) -> Path | None:
        return self._path

    def get_config(self, ctx: RequestContext, config_id: str) -> DeploymentConfig:
        ctx.check()
        config = self._document.find_config(config_id, ctx.namespace)
        if config is None:
            raise NotFoundError("DeploymentConfig", config_id)
        return config.model_copy(deep=True)

    def get_repository(self, ctx: RequestContext, name: str) -> ImageRepository:
        ctx.check()
        repo = self._document.find_repository(name, ctx.namespace)
        if repo is None:
            raise NotFoundError("ImageRepository", name)
        return repo.model_copy(deep=True)

    def list_repositories(self, ctx: RequestContext) -> list[ImageRepository]:
        ctx.check()
        return [repo.model_copy(deep=True) for repo in self._document.image_repositories]

    def __repr__(self) -> str:
        return f"<FileStore path={str(self._path)!r}>"
