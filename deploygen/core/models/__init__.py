"""
Domain models — Pydantic types for configs, triggers and repositories.

All models are re-exported here for convenient access:

    from deploygen.core.models import DeploymentConfig, ImageRepository
"""

from deploygen.core.models.deploy import (
    Container,
    ControllerTemplate,
    Deployment,
    DeploymentConfig,
    DeploymentTemplate,
    DeploymentTriggerPolicy,
    DeploymentTriggerType,
    ImageChangeParams,
    ImageSource,
    ObjectReferenceSource,
    PodTemplate,
    RepositoryNameSource,
)
from deploygen.core.models.image import ImageRepository, ImageRepositoryStatus
from deploygen.core.models.meta import ObjectMeta, ObjectReference
from deploygen.core.models.store import StoreDocument

__all__ = [
    # deploy.py
    "Container",
    "ControllerTemplate",
    "Deployment",
    "DeploymentConfig",
    "DeploymentTemplate",
    "DeploymentTriggerPolicy",
    "DeploymentTriggerType",
    "ImageChangeParams",
    "ImageSource",
    # image.py
    "ImageRepository",
    "ImageRepositoryStatus",
    # meta.py
    "ObjectMeta",
    "ObjectReference",
    "ObjectReferenceSource",
    "PodTemplate",
    "RepositoryNameSource",
    # store.py
    "StoreDocument",
]
