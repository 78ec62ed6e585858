"""
Deployment helpers — naming, annotations and config snapshots.

A deployment is one concrete version of a config.  It carries three
annotations tying it back to its config:

    deploygen.io/deployment-config.name    name of the config
    deploygen.io/deployment.status         DeploymentStatus value
    deploygen.io/encoded-deployment-config snapshot of the config

The snapshot is an opaque serialized config, used later for rollback
and audit.  Nothing here talks to a store.
"""

from __future__ import annotations

import logging
from enum import StrEnum

from pydantic import ValidationError

from deploygen.core.errors import InvalidSpecError
from deploygen.core.models import Deployment, DeploymentConfig, ObjectMeta

logger = logging.getLogger(__name__)

DEPLOYMENT_CONFIG_ANNOTATION = "deploygen.io/deployment-config.name"
DEPLOYMENT_STATUS_ANNOTATION = "deploygen.io/deployment.status"
DEPLOYMENT_ENCODED_CONFIG_ANNOTATION = "deploygen.io/encoded-deployment-config"


class DeploymentStatus(StrEnum):
    """Lifecycle phase of a deployment."""

    NEW = "New"
    PENDING = "Pending"
    RUNNING = "Running"
    COMPLETE = "Complete"
    FAILED = "Failed"


def latest_deployment_name_for_config(config: DeploymentConfig) -> str:
    """Name of the deployment for the config's current version."""
    return f"{config.name}-{config.latest_version}"


def encode_deployment_config(config: DeploymentConfig) -> str:
    """Serialize a config for the encoded-config annotation."""
    return config.model_dump_json()


def decode_deployment_config(data: str) -> DeploymentConfig:
    """Inverse of encode_deployment_config.

    Raises:
        InvalidSpecError: If ``data`` is not an encoded config.
    """
    try:
        return DeploymentConfig.model_validate_json(data)
    except ValidationError as e:
        raise InvalidSpecError(f"cannot decode deployment config: {e}") from e


def deployment_for_config(
    config: DeploymentConfig,
    status: DeploymentStatus = DeploymentStatus.NEW,
) -> Deployment:
    """Build the deployment for the config's current version.

    The deployment copies the config's labels and controller template
    and embeds a snapshot of the config itself.
    """
    deployment = Deployment(
        metadata=ObjectMeta(
            name=latest_deployment_name_for_config(config),
            namespace=config.namespace,
            labels=dict(config.metadata.labels),
            annotations={
                DEPLOYMENT_CONFIG_ANNOTATION: config.name,
                DEPLOYMENT_STATUS_ANNOTATION: str(status),
                DEPLOYMENT_ENCODED_CONFIG_ANNOTATION: encode_deployment_config(config),
            },
        ),
        spec=config.template.controller_template.model_copy(deep=True),
    )
    logger.debug("Built deployment %s", deployment.metadata.qualified_name)
    return deployment


def config_for_deployment(deployment: Deployment) -> DeploymentConfig:
    """Recover the config snapshot a deployment was created from.

    Raises:
        InvalidSpecError: If the annotation is missing or undecodable.
    """
    data = deployment.metadata.annotations.get(DEPLOYMENT_ENCODED_CONFIG_ANNOTATION)
    if not data:
        raise InvalidSpecError(
            f"deployment {deployment.metadata.qualified_name} has no encoded config",
            kind="Deployment",
            name=deployment.metadata.name,
        )
    return decode_deployment_config(data)
