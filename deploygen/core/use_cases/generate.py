"""
Generate use case — run the generator against a store file.

Loads the store, generates the next version of one config, reports what
changed and, when asked, writes the new version back to the store.

Initial deployment is a separate, opt-in policy: a config that has
never been deployed (version 0) and has no image change stays at 0
unless the caller asks for ``initial_deploy``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from deploygen.adapters.file_store import FileStore
from deploygen.core.config.loader import ConfigError
from deploygen.core.context import RequestContext
from deploygen.core.errors import StatusError
from deploygen.core.models import Deployment, DeploymentConfig
from deploygen.core.persistence.store_file import replace_config, save_store
from deploygen.core.services.config_generator import DeploymentConfigGenerator
from deploygen.core.services.deploy_util import deployment_for_config

logger = logging.getLogger(__name__)


@dataclass
class ImageChange:
    """One container whose image moved."""

    container: str
    old_image: str
    new_image: str

    def to_dict(self) -> dict:
        return {"container": self.container, "old": self.old_image, "new": self.new_image}


@dataclass
class GenerateResult:
    """Outcome of one generate run."""

    config_id: str = ""
    namespace: str = ""
    store_path: Path | None = None
    previous: DeploymentConfig | None = None
    config: DeploymentConfig | None = None
    deployment: Deployment | None = None
    image_changes: list[ImageChange] = field(default_factory=list)
    initial_deployment: bool = False
    written: bool = False
    error: str | None = None
    error_reason: str | None = None

    @property
    def changed(self) -> bool:
        """Whether the generated config is a new version."""
        if self.previous is None or self.config is None:
            return False
        return self.config.latest_version != self.previous.latest_version

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        result: dict = {"config_id": self.config_id, "namespace": self.namespace}
        if self.error:
            result["error"] = self.error
            result["reason"] = self.error_reason
            return result

        result["changed"] = self.changed
        result["previous_version"] = self.previous.latest_version if self.previous else None
        result["latest_version"] = self.config.latest_version if self.config else None
        result["image_changes"] = [c.to_dict() for c in self.image_changes]
        result["initial_deployment"] = self.initial_deployment
        result["written"] = self.written
        if self.config:
            result["config"] = self.config.model_dump(mode="json")
        if self.deployment:
            result["deployment"] = self.deployment.model_dump(mode="json")
        return result


def apply_initial_deployment_policy(config: DeploymentConfig) -> bool:
    """Raise a never-deployed config (version 0) to version 1.

    Returns:
        True if the version was raised.
    """
    if config.latest_version != 0:
        return False
    config.latest_version = 1
    return True


def diff_images(previous: DeploymentConfig, config: DeploymentConfig) -> list[ImageChange]:
    """Containers whose image differs between two versions of a config."""
    before = previous.pod_template.images()
    changes = []
    for name, image in config.pod_template.images().items():
        old = before.get(name, "")
        if old != image:
            changes.append(ImageChange(container=name, old_image=old, new_image=image))
    return changes


def run_generate(
    config_id: str,
    store_path: Path | None = None,
    namespace: str = "",
    write: bool = False,
    initial_deploy: bool = False,
) -> GenerateResult:
    """Generate the next version of a config from the store file.

    Args:
        config_id: Name of the deployment config.
        store_path: Optional explicit path to deploygen.yml.
        namespace: Namespace the config lives in.
        write: Persist a new version back to the store file.
        initial_deploy: Apply the initial-deployment policy.

    Returns:
        GenerateResult. Store and generator failures are reported in
        ``error`` rather than raised.
    """
    result = GenerateResult(config_id=config_id, namespace=namespace)

    try:
        store = FileStore.from_path(store_path)
    except ConfigError as e:
        result.error = str(e)
        result.error_reason = "ConfigError"
        return result

    result.store_path = store.path
    ctx = RequestContext(namespace=namespace)
    generator = DeploymentConfigGenerator(store, store)

    try:
        previous = store.get_config(ctx, config_id) if config_id else None
        config = generator.generate(ctx, config_id)
    except StatusError as e:
        result.error = str(e)
        result.error_reason = e.reason
        return result
    except ValueError as e:
        result.error = str(e)
        result.error_reason = "Invalid"
        return result

    result.previous = previous
    result.config = config
    result.image_changes = diff_images(previous, config)

    if initial_deploy and not result.changed:
        result.initial_deployment = apply_initial_deployment_policy(config)

    if not result.changed:
        return result

    result.deployment = deployment_for_config(config)

    if write:
        replace_config(store.document, config)
        save_store(store.document, store.path)
        result.written = True
        logger.info(
            "Wrote %s version %d to %s", config.name, config.latest_version, store.path,
        )

    return result
