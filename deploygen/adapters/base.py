"""
Store contracts — what the generator needs from its backing stores.

The generator only talks to stores through these two interfaces, never
to a concrete backend.  Each takes the request context first so a store
can scope by namespace and honour cancellation.

To create a new store:
    1. Subclass ConfigStore and/or RepositoryStore
    2. Implement the abstract methods
    3. Raise NotFoundError for absent objects; let anything else propagate
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from deploygen.core.context import RequestContext
from deploygen.core.models import DeploymentConfig, ImageRepository


class ConfigStore(ABC):
    """Read access to deployment configs."""

    @abstractmethod
    def get_config(self, ctx: RequestContext, config_id: str) -> DeploymentConfig:
        """Fetch a deployment config by name in ``ctx.namespace``.

        Raises:
            NotFoundError: If no such config exists.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"


class RepositoryStore(ABC):
    """Read access to image repositories."""

    @abstractmethod
    def get_repository(self, ctx: RequestContext, name: str) -> ImageRepository:
        """Fetch one repository by name in ``ctx.namespace``.

        Raises:
            NotFoundError: If no such repository exists.
        """

    @abstractmethod
    def list_repositories(self, ctx: RequestContext) -> list[ImageRepository]:
        """List every repository visible to ``ctx``."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"
