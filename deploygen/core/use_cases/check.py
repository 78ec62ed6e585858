"""
Store check use case — validate deploygen.yml and report trigger issues.

Errors make the store unusable (duplicate identities, unreadable file).
Warnings flag triggers that will currently resolve to "no change" or
fail at generate time, so they can be fixed before anyone relies on them.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from deploygen.core.config.loader import ConfigError, find_store_file, load_store
from deploygen.core.models import StoreDocument


@dataclass
class StoreCheckResult:
    """Result of store validation."""

    valid: bool = False
    document: StoreDocument | None = None
    store_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "store_path": str(self.store_path) if self.store_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "config_count": len(self.document.deployment_configs) if self.document else 0,
            "repository_count": len(self.document.image_repositories) if self.document else 0,
        }


def check_store(store_path: Path | None = None) -> StoreCheckResult:
    """Validate a store file and report issues.

    Args:
        store_path: Optional explicit path to deploygen.yml.

    Returns:
        StoreCheckResult with validation status and any issues.
    """
    result = StoreCheckResult()

    if store_path is None:
        store_path = find_store_file()
    if store_path is None:
        result.errors.append("No deploygen.yml found.")
        return result
    result.store_path = store_path

    try:
        document = load_store(store_path)
    except ConfigError as e:
        result.errors.append(str(e))
        return result
    result.document = document

    config_ids = Counter(c.metadata.qualified_name for c in document.deployment_configs)
    for ident, count in sorted(config_ids.items()):
        if count > 1:
            result.errors.append(f"Duplicate deployment config: {ident}")

    repo_ids = Counter(r.qualified_name for r in document.image_repositories)
    for ident, count in sorted(repo_ids.items()):
        if count > 1:
            result.errors.append(f"Duplicate image repository: {ident}")

    for repo in document.image_repositories:
        if not repo.observed:
            result.warnings.append(
                f"Image repository {repo.qualified_name} has no registry-observed image"
            )

    observed = {r.pull_spec for r in document.image_repositories if r.observed}

    for config in document.deployment_configs:
        label = config.metadata.qualified_name
        for i, params in enumerate(config.image_change_triggers()):
            where = f"{label} trigger {i}"
            for name in params.container_names:
                if config.pod_template.get_container(name) is None:
                    result.warnings.append(f"{where}: container '{name}' not in template")

            if params.repository_name:
                if params.repository_name not in observed:
                    result.warnings.append(
                        f"{where}: repository '{params.repository_name}' not observed yet"
                    )
            elif params.from_ref is not None:
                ref = params.from_ref
                namespace = ref.namespace or config.namespace
                if document.find_repository(ref.name, namespace) is None:
                    result.warnings.append(
                        f"{where}: image repository {namespace}/{ref.name} does not exist"
                    )

    result.valid = not result.errors
    return result
