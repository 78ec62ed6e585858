"""
Deployment config model — versioned pod template plus its triggers.

A config carries ``latest_version`` (bumped by the generator when a
trigger changes an image), an ordered list of trigger policies and the
template every deployment of the config is stamped from.

Image-change triggers name their image source in one of two ways:

    repository_name: registry:8080/repo1      # match by pull spec
    from: {name: repo1}                       # fetch one repository

Both spellings are accepted in documents and normalised into a tagged
``source``; giving both (or neither) is a validation error.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, model_validator

from deploygen.core.models.meta import ObjectMeta, ObjectReference


# ── Pod template ────────────────────────────────────────────────


class Container(BaseModel):
    """A container in a pod template."""

    name: str
    image: str = ""


class PodTemplate(BaseModel):
    """Labels and containers of the pods a deployment runs."""

    labels: dict[str, str] = Field(default_factory=dict)
    containers: list[Container] = Field(default_factory=list)

    def get_container(self, name: str) -> Container | None:
        """Look up a container by name."""
        for container in self.containers:
            if container.name == name:
                return container
        return None

    def images(self) -> dict[str, str]:
        """Container name → image."""
        return {c.name: c.image for c in self.containers}


class ControllerTemplate(BaseModel):
    """Replication settings and the pod template they apply to."""

    replicas: int = Field(default=1, ge=0)
    selector: dict[str, str] = Field(default_factory=dict)
    template: PodTemplate = Field(default_factory=PodTemplate)


class DeploymentTemplate(BaseModel):
    """How deployments of a config are rolled out, and what they run."""

    strategy: str = "Recreate"
    controller_template: ControllerTemplate = Field(default_factory=ControllerTemplate)


# ── Triggers ────────────────────────────────────────────────────


class DeploymentTriggerType(StrEnum):
    """Kinds of trigger policy."""

    IMAGE_CHANGE = "ImageChange"


class RepositoryNameSource(BaseModel):
    """Image source addressed by its registry-qualified repository."""

    kind: Literal["name"] = "name"
    repository: str = Field(min_length=1)


class ObjectReferenceSource(BaseModel):
    """Image source addressed by a reference to a repository object."""

    kind: Literal["reference"] = "reference"
    ref: ObjectReference


ImageSource = Annotated[
    RepositoryNameSource | ObjectReferenceSource,
    Field(discriminator="kind"),
]


class ImageChangeParams(BaseModel):
    """Which containers follow which tag of which repository."""

    container_names: list[str] = Field(default_factory=list)
    tag: str
    source: ImageSource

    @model_validator(mode="before")
    @classmethod
    def _normalise_source(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        data = dict(data)
        repository_name = data.pop("repository_name", None)
        ref = data.pop("from", None)
        ref_alias = data.pop("from_", None)

        given = [v for v in (data.get("source"), repository_name, ref, ref_alias) if v is not None]
        if len(given) > 1:
            raise ValueError("only one of source, repository_name or from may be set")
        if ref is None:
            ref = ref_alias

        if repository_name is not None:
            data["source"] = {"kind": "name", "repository": repository_name}
        elif ref is not None:
            data["source"] = {"kind": "reference", "ref": ref}
        elif data.get("source") is None:
            raise ValueError("one of repository_name or from must be set")
        return data

    @property
    def repository_name(self) -> str:
        """Declared repository for name-addressed sources, else ""."""
        if isinstance(self.source, RepositoryNameSource):
            return self.source.repository
        return ""

    @property
    def from_ref(self) -> ObjectReference | None:
        """Referenced repository for reference-addressed sources, else None."""
        if isinstance(self.source, ObjectReferenceSource):
            return self.source.ref
        return None


class DeploymentTriggerPolicy(BaseModel):
    """A trigger declared on a deployment config."""

    type: DeploymentTriggerType = DeploymentTriggerType.IMAGE_CHANGE
    image_change_params: ImageChangeParams | None = None

    @model_validator(mode="after")
    def _check_params(self) -> DeploymentTriggerPolicy:
        if self.type == DeploymentTriggerType.IMAGE_CHANGE and self.image_change_params is None:
            raise ValueError("ImageChange triggers require image_change_params")
        return self


# ── Config ──────────────────────────────────────────────────────


class DeploymentConfig(BaseModel):
    """A deployment config — the unit the generator versions."""

    metadata: ObjectMeta
    latest_version: int = Field(default=0, ge=0)
    triggers: list[DeploymentTriggerPolicy] = Field(default_factory=list)
    template: DeploymentTemplate = Field(default_factory=DeploymentTemplate)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    @property
    def pod_template(self) -> PodTemplate:
        return self.template.controller_template.template

    def image_change_triggers(self) -> list[ImageChangeParams]:
        """Image-change params of every trigger, in declaration order."""
        return [
            t.image_change_params
            for t in self.triggers
            if t.type == DeploymentTriggerType.IMAGE_CHANGE and t.image_change_params
        ]


class Deployment(BaseModel):
    """One concrete deployment of a config version.

    Carries the annotations that tie it back to its config, including an
    encoded snapshot of the config it was created from.
    """

    metadata: ObjectMeta
    spec: ControllerTemplate = Field(default_factory=ControllerTemplate)
