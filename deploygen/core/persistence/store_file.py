"""
Store file persistence — atomic write of a StoreDocument.

Writes are atomic (write to temp file, then rename) so a crash
mid-write never leaves a half-written store behind.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

import yaml

from deploygen.core.models import DeploymentConfig, StoreDocument

logger = logging.getLogger(__name__)


def replace_config(document: StoreDocument, config: DeploymentConfig) -> bool:
    """Swap in ``config`` for the config with the same namespace/name.

    Appends it when no such config exists.

    Returns:
        True if an existing config was replaced.
    """
    for i, existing in enumerate(document.deployment_configs):
        if existing.name == config.name and existing.namespace == config.namespace:
            document.deployment_configs[i] = config.model_copy(deep=True)
            return True
    document.deployment_configs.append(config.model_copy(deep=True))
    return False


def save_store(document: StoreDocument, path: Path) -> None:
    """Save a store document as YAML (atomic write).

    Args:
        document: The document to save.
        path: Target path for the store file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    data = document.model_dump(mode="json")
    content = yaml.safe_dump(data, sort_keys=False, default_flow_style=False)

    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=path.parent,
            prefix=".deploygen_",
            suffix=".tmp",
        )
        os.close(fd)
        tmp = Path(tmp_path)
        try:
            tmp.write_text(content, encoding="utf-8")
            tmp.replace(path)
            logger.debug("Store saved to %s", path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise
    except Exception as e:
        logger.error("Failed to save store to %s: %s", path, e)
        raise
