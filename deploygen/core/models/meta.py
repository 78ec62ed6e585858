"""
Object metadata — identity shared by configs, repositories and deployments.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ObjectMeta(BaseModel):
    """Name, namespace and free-form labels/annotations of an object."""

    name: str
    namespace: str = ""
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)

    @property
    def qualified_name(self) -> str:
        """``namespace/name`` (namespace may be empty)."""
        return f"{self.namespace}/{self.name}"


class ObjectReference(BaseModel):
    """Indirect pointer to another object, by name."""

    name: str
    namespace: str = ""
    kind: str = "ImageRepository"
