"""
Store loader — reads deploygen.yml into a validated StoreDocument.

The store file holds every deployment config and image repository the
CLI works against.  It is plain YAML, validated with Pydantic:

    deployment_configs:
      - metadata: {name: frontend}
        latest_version: 1
        triggers:
          - type: ImageChange
            image_change_params:
              container_names: [web]
              repository_name: registry:8080/frontend
              tag: latest
        template: ...
    image_repositories:
      - metadata: {name: frontend}
        tags: {latest: ref1}
        status: {docker_image_repository: registry:8080/frontend}
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from deploygen.core.models import StoreDocument

logger = logging.getLogger(__name__)

# Default store filename
STORE_FILE = "deploygen.yml"


class ConfigError(Exception):
    """Raised when the store file is missing or invalid."""


def find_store_file(start_dir: Path | None = None) -> Path | None:
    """Search for deploygen.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to deploygen.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / STORE_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_store(path: Path | None = None) -> StoreDocument:
    """Load and validate a store document.

    Args:
        path: Explicit path to the store file. If None, searches upward.

    Returns:
        Validated StoreDocument.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        path = find_store_file()

    if path is None:
        raise ConfigError(
            f"No {STORE_FILE} found. Create one, or specify --store."
        )

    if not path.is_file():
        raise ConfigError(f"Store file not found: {path}")

    logger.debug("Loading store from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    # An empty file is an empty store
    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        document = StoreDocument.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid store document: {e}") from e

    logger.info(
        "Loaded store with %d configs, %d repositories",
        len(document.deployment_configs),
        len(document.image_repositories),
    )
    return document
