"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from deploygen.adapters.memory import MemoryConfigStore, MemoryRepositoryStore
from deploygen.core.context import RequestContext
from tests.builders import basic_deployment_config, ok_image_repo


# ── Fixtures ─────────────────────────────────────────────────────────


@pytest.fixture
def ctx() -> RequestContext:
    return RequestContext()


@pytest.fixture
def config_store() -> MemoryConfigStore:
    return MemoryConfigStore([basic_deployment_config()])


@pytest.fixture
def repo_store() -> MemoryRepositoryStore:
    return MemoryRepositoryStore([ok_image_repo()])


STORE_YAML = textwrap.dedent("""\
    deployment_configs:
      - metadata:
          name: frontend
          labels:
            app: frontend
        latest_version: 1
        triggers:
          - type: ImageChange
            image_change_params:
              container_names: [web]
              repository_name: registry:8080/frontend
              tag: latest
        template:
          controller_template:
            replicas: 2
            template:
              containers:
                - name: web
                  image: registry:8080/frontend:ref1
                - name: sidecar
                  image: busybox:1
      - metadata:
          name: backend
        latest_version: 0
        triggers:
          - type: ImageChange
            image_change_params:
              container_names: [api]
              from:
                name: backend
              tag: stable
        template:
          controller_template:
            template:
              containers:
                - name: api
                  image: internal/default/backend:v1
    image_repositories:
      - metadata:
          name: frontend
        tags:
          latest: ref2
        status:
          docker_image_repository: registry:8080/frontend
      - metadata:
          name: backend
        tags:
          stable: v1
        status:
          docker_image_repository: internal/default/backend
""")


@pytest.fixture
def store_file(tmp_path: Path) -> Path:
    """A deploygen.yml where frontend has a pending image change."""
    path = tmp_path / "deploygen.yml"
    path.write_text(STORE_YAML)
    return path
