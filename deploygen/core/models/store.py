"""
Store document — the on-disk shape of a config/repository store.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from deploygen.core.models.deploy import DeploymentConfig
from deploygen.core.models.image import ImageRepository


class StoreDocument(BaseModel):
    """Every deployment config and image repository a store serves."""

    deployment_configs: list[DeploymentConfig] = Field(default_factory=list)
    image_repositories: list[ImageRepository] = Field(default_factory=list)

    def find_config(self, name: str, namespace: str = "") -> DeploymentConfig | None:
        for config in self.deployment_configs:
            if config.name == name and config.namespace == namespace:
                return config
        return None

    def find_repository(self, name: str, namespace: str = "") -> ImageRepository | None:
        for repo in self.image_repositories:
            if repo.name == name and repo.namespace == namespace:
                return repo
        return None
