"""
Deployment config generator — bump a config when a tracked image moves.

Given a config name, fetch the config, resolve every image-change
trigger against the live repositories and return either the config as
fetched or a new candidate version with updated container images.

Resolution per trigger:

    repository_name   → list all repositories, pick the one whose
                        observed pull spec equals the declared name.
                        No match means "not observed yet": no change.
    from (reference)  → fetch that one repository.  Fetch errors abort
                        the call; a repository without an observed pull
                        spec is an InvalidSpecError.

A tag missing from the repository is no change.  Containers named by a
trigger but absent from the template are ignored.

The returned config is always a copy; ``latest_version`` is bumped by
exactly one when any container image changed.  Nothing is written.
"""

from __future__ import annotations

import logging

from deploygen.adapters.base import ConfigStore, RepositoryStore
from deploygen.core.context import RequestContext
from deploygen.core.errors import InvalidSpecError
from deploygen.core.models import (
    DeploymentConfig,
    ImageChangeParams,
    ImageRepository,
    ObjectReferenceSource,
    RepositoryNameSource,
)

logger = logging.getLogger(__name__)


class DeploymentConfigGenerator:
    """Produces the next version of a deployment config.

    Stateless between calls; safe to share.

    Args:
        configs: Store the config is fetched from.
        repositories: Store image repositories are resolved against.
    """

    def __init__(self, configs: ConfigStore, repositories: RepositoryStore):
        self._configs = configs
        self._repositories = repositories

    def generate(self, ctx: RequestContext, config_id: str) -> DeploymentConfig:
        """Return the config named ``config_id``, updated to the latest images.

        Raises:
            ValueError: If ``config_id`` is empty.
            NotFoundError: If the config, or a referenced repository, is absent.
            InvalidSpecError: If a referenced repository has no observed image.
        """
        if not config_id:
            raise ValueError("deployment config id must not be empty")

        fetched = self._configs.get_config(ctx, config_id)
        config = fetched.model_copy(deep=True)

        changed = False
        for params in config.image_change_triggers():
            repo = self._resolve_repository(ctx, params)
            if repo is None:
                continue

            image = repo.image_for_tag(params.tag)
            if image is None:
                logger.debug(
                    "Tag %r not in repository %s; skipping trigger",
                    params.tag, repo.qualified_name,
                )
                continue

            if _apply_image(config, params.container_names, image):
                changed = True

        if changed:
            config.latest_version = fetched.latest_version + 1
            logger.info(
                "Deployment config %s: image change, version %d -> %d",
                config.metadata.qualified_name,
                fetched.latest_version,
                config.latest_version,
            )
        else:
            logger.debug(
                "Deployment config %s: no image change at version %d",
                config.metadata.qualified_name,
                config.latest_version,
            )

        return config

    def _resolve_repository(
        self,
        ctx: RequestContext,
        params: ImageChangeParams,
    ) -> ImageRepository | None:
        """Find the repository a trigger points at, or None for "no change"."""
        source = params.source

        if isinstance(source, RepositoryNameSource):
            for repo in self._repositories.list_repositories(ctx):
                if repo.pull_spec and repo.pull_spec == source.repository:
                    return repo
            logger.debug(
                "No observed repository matches %r; skipping trigger",
                source.repository,
            )
            return None

        if isinstance(source, ObjectReferenceSource):
            ref_ctx = ctx.with_namespace(source.ref.namespace)
            repo = self._repositories.get_repository(ref_ctx, source.ref.name)
            if not repo.pull_spec:
                raise InvalidSpecError(
                    f"image repository {repo.qualified_name} does not have a Docker "
                    "image repository reference set and can't be used in a "
                    "deployment config trigger",
                    kind="ImageRepository",
                    name=repo.name,
                )
            return repo

        raise TypeError(f"unsupported image source: {source!r}")


def _apply_image(config: DeploymentConfig, container_names: list[str], image: str) -> bool:
    """Point every named container at ``image``; True if any changed."""
    changed = False
    template = config.pod_template
    for name in container_names:
        container = template.get_container(name)
        if container is None:
            continue
        if container.image != image:
            logger.debug("Container %s: %s -> %s", name, container.image, image)
            container.image = image
            changed = True
    return changed
