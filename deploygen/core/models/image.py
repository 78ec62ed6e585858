"""
Image repository model — tags and the registry-observed pull spec.

A repository is created by users (the declared ``docker_image_repository``)
and later observed by the registry, which fills in
``status.docker_image_repository``.  Only the observed value is used to
build container images: until it is set, the repository cannot resolve
any tag.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from deploygen.core.models.meta import ObjectMeta


class ImageRepositoryStatus(BaseModel):
    """Registry-observed state of a repository."""

    docker_image_repository: str = ""


class ImageRepository(BaseModel):
    """A named set of tags pointing at image references."""

    metadata: ObjectMeta
    docker_image_repository: str = ""          # declared, may be empty
    tags: dict[str, str] = Field(default_factory=dict)
    status: ImageRepositoryStatus = Field(default_factory=ImageRepositoryStatus)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    @property
    def qualified_name(self) -> str:
        return self.metadata.qualified_name

    @property
    def pull_spec(self) -> str:
        """Registry-qualified repository path, or "" if not yet observed."""
        return self.status.docker_image_repository

    @property
    def observed(self) -> bool:
        return bool(self.pull_spec)

    def image_for_tag(self, tag: str) -> str | None:
        """Full image string for a tag, or None if it cannot be resolved."""
        if not self.observed:
            return None
        ref = self.tags.get(tag)
        if ref is None:
            return None
        return f"{self.pull_spec}:{ref}"
