"""
In-memory stores — test doubles and embeddable stores.

Both stores record every call they receive and can be told to fail on
the next call, so tests can assert on what the generator asked for and
how it reacts to store failures.
"""

from __future__ import annotations

from deploygen.adapters.base import ConfigStore, RepositoryStore
from deploygen.core.context import RequestContext
from deploygen.core.errors import NotFoundError
from deploygen.core.models import DeploymentConfig, ImageRepository


class MemoryConfigStore(ConfigStore):
    """Deployment configs held in a dict keyed by (namespace, name).

    Returned configs are deep copies, so callers can never mutate what
    the store holds.
    """

    def __init__(self, configs: list[DeploymentConfig] | None = None):
        self._configs: dict[tuple[str, str], DeploymentConfig] = {}
        self._failure: Exception | None = None
        self._call_log: list[tuple[str, str]] = []
        for config in configs or []:
            self.put(config)

    @property
    def call_log(self) -> list[tuple[str, str]]:
        """(namespace, name) of every get_config call."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def put(self, config: DeploymentConfig) -> None:
        """Add or replace a config."""
        self._configs[(config.namespace, config.name)] = config.model_copy(deep=True)

    def set_failure(self, error: Exception) -> None:
        """Raise ``error`` from every subsequent call."""
        self._failure = error

    def get_config(self, ctx: RequestContext, config_id: str) -> DeploymentConfig:
        ctx.check()
        self._call_log.append((ctx.namespace, config_id))
        if self._failure is not None:
            raise self._failure

        config = self._configs.get((ctx.namespace, config_id))
        if config is None:
            raise NotFoundError("DeploymentConfig", config_id)
        return config.model_copy(deep=True)

    def reset(self) -> None:
        """Clear call log and failure."""
        self._call_log.clear()
        self._failure = None


class MemoryRepositoryStore(RepositoryStore):
    """Image repositories held in a dict keyed by (namespace, name).

    ``list_repositories`` returns repositories in insertion order from
    every namespace, matching a cluster-wide list.
    """

    def __init__(self, repositories: list[ImageRepository] | None = None):
        self._repositories: dict[tuple[str, str], ImageRepository] = {}
        self._failure: Exception | None = None
        self._get_calls: list[tuple[str, str]] = []
        self._list_calls = 0
        for repo in repositories or []:
            self.put(repo)

    @property
    def get_calls(self) -> list[tuple[str, str]]:
        """(namespace, name) of every get_repository call."""
        return self._get_calls

    @property
    def list_calls(self) -> int:
        return self._list_calls

    def put(self, repository: ImageRepository) -> None:
        """Add or replace a repository."""
        key = (repository.namespace, repository.name)
        self._repositories[key] = repository.model_copy(deep=True)

    def set_failure(self, error: Exception) -> None:
        """Raise ``error`` from every subsequent call."""
        self._failure = error

    def get_repository(self, ctx: RequestContext, name: str) -> ImageRepository:
        ctx.check()
        self._get_calls.append((ctx.namespace, name))
        if self._failure is not None:
            raise self._failure

        repo = self._repositories.get((ctx.namespace, name))
        if repo is None:
            raise NotFoundError("ImageRepository", name)
        return repo.model_copy(deep=True)

    def list_repositories(self, ctx: RequestContext) -> list[ImageRepository]:
        ctx.check()
        self._list_calls += 1
        if self._failure is not None:
            raise self._failure
        return [repo.model_copy(deep=True) for repo in self._repositories.values()]

    def reset(self) -> None:
        """Clear call logs and failure."""
        self._get_calls.clear()
        self._list_calls = 0
        self._failure = None
