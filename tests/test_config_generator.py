"""
Tests for the deployment config generator — trigger resolution and
version bumping.
"""

from __future__ import annotations

import pytest

from deploygen.adapters.memory import MemoryConfigStore, MemoryRepositoryStore
from deploygen.core.context import RequestContext
from deploygen.core.errors import ContextCancelledError, InvalidSpecError, NotFoundError
from deploygen.core.models import Container, ObjectMeta
from deploygen.core.services.config_generator import DeploymentConfigGenerator
from tests.builders import (
    basic_deployment_config,
    empty_image_repo,
    image_trigger,
    internal_image_repo,
    ok_image_repo,
    reference_deployment_config,
)


def _generator(configs, repos) -> DeploymentConfigGenerator:
    return DeploymentConfigGenerator(MemoryConfigStore(configs), MemoryRepositoryStore(repos))


def _image(config, container: str) -> str:
    return config.pod_template.get_container(container).image


# ── Missing / unchanged configs ──────────────────────────────────────


class TestGenerateWithoutChange:
    def test_missing_config_raises_not_found(self, ctx):
        gen = _generator([], [ok_image_repo()])
        with pytest.raises(NotFoundError) as exc:
            gen.generate(ctx, "1234")
        assert exc.value.reason == "NotFound"
        assert exc.value.name == "1234"

    def test_empty_id_rejected(self, ctx):
        gen = _generator([basic_deployment_config()], [])
        with pytest.raises(ValueError):
            gen.generate(ctx, "")

    def test_tag_unchanged_keeps_version(self, ctx):
        gen = _generator([basic_deployment_config()], [ok_image_repo()])
        config = gen.generate(ctx, "deploy1")
        assert config is not None
        assert config.latest_version == 1
        assert _image(config, "container1") == "registry:8080/repo1:ref1"

    def test_zero_version_without_change_stays_zero(self, ctx):
        gen = _generator([basic_deployment_config(latest_version=0)], [ok_image_repo()])
        config = gen.generate(ctx, "deploy1")
        assert config.latest_version == 0

    def test_no_triggers(self, ctx):
        dc = basic_deployment_config()
        dc.triggers = []
        gen = _generator([dc], [ok_image_repo()])
        config = gen.generate(ctx, "deploy1")
        assert config.latest_version == 1
        assert config.pod_template.images() == dc.pod_template.images()

    def test_unobserved_name_addressed_repository_is_no_change(self, ctx):
        gen = _generator([basic_deployment_config()], [empty_image_repo()])
        config = gen.generate(ctx, "deploy1")
        assert config.latest_version == 1

    def test_no_matching_repository_is_no_change(self, ctx):
        repo = ok_image_repo()
        repo.status.docker_image_repository = "registry:8080/other"
        gen = _generator([basic_deployment_config()], [repo])
        config = gen.generate(ctx, "deploy1")
        assert config.latest_version == 1
        assert _image(config, "container1") == "registry:8080/repo1:ref1"

    def test_match_uses_observed_pull_spec_not_declared(self, ctx):
        repo = ok_image_repo()
        repo.tags["tag1"] = "ref2"
        repo.status.docker_image_repository = "registry:8080/moved"
        gen = _generator([basic_deployment_config()], [repo])
        config = gen.generate(ctx, "deploy1")
        assert config.latest_version == 1

    def test_unknown_tag_is_no_change(self, ctx):
        dc = basic_deployment_config()
        dc.triggers[0].image_change_params.tag = "missing"
        gen = _generator([dc], [ok_image_repo()])
        config = gen.generate(ctx, "deploy1")
        assert config.latest_version == 1

    def test_unknown_tag_on_referenced_repository_is_no_change(self, ctx):
        dc = reference_deployment_config()
        dc.triggers[0].image_change_params.tag = "missing"
        gen = _generator([dc], [internal_image_repo()])
        config = gen.generate(ctx, "deploy1")
        assert config.latest_version == 1

    def test_unknown_container_is_ignored(self, ctx):
        dc = basic_deployment_config()
        dc.triggers[0].image_change_params.container_names = ["nope"]
        repo = ok_image_repo()
        repo.tags["tag1"] = "ref2"
        gen = _generator([dc], [repo])
        config = gen.generate(ctx, "deploy1")
        assert config.latest_version == 1
        assert config.pod_template.images() == dc.pod_template.images()


# ── Name-addressed triggers ──────────────────────────────────────────


class TestGenerateByRepositoryName:
    def test_updated_image_ref(self, ctx):
        repo = ok_image_repo()
        repo.tags["tag1"] = "ref2"
        gen = _generator([basic_deployment_config()], [repo])

        config = gen.generate(ctx, "deploy1")

        assert config.latest_version == 2
        assert _image(config, "container1") == "registry:8080/repo1:ref2"
        assert _image(config, "container2") == "registry:8080/repo1:ref2"

    def test_selects_matching_entry_from_list(self, ctx):
        other = ok_image_repo(name="other")
        other.status.docker_image_repository = "registry:8080/other"
        other.tags["tag1"] = "zzz"
        repo = ok_image_repo()
        repo.tags["tag1"] = "ref3"
        gen = _generator([basic_deployment_config()], [other, repo])

        config = gen.generate(ctx, "deploy1")

        assert _image(config, "container1") == "registry:8080/repo1:ref3"

    def test_lists_repositories_once_per_trigger(self, ctx):
        repos = MemoryRepositoryStore([ok_image_repo()])
        gen = DeploymentConfigGenerator(MemoryConfigStore([basic_deployment_config()]), repos)
        gen.generate(ctx, "deploy1")
        assert repos.list_calls == 1
        assert repos.get_calls == []


# ── Reference-addressed triggers ─────────────────────────────────────


class TestGenerateByReference:
    def test_config_with_from(self, ctx):
        gen = _generator([reference_deployment_config()], [internal_image_repo()])

        config = gen.generate(ctx, "deploy1")

        assert config.latest_version == 2
        assert _image(config, "container1") == "internal/namespace/imageRepo1:ref1"

    def test_repository_without_image_is_invalid(self, ctx):
        gen = _generator([reference_deployment_config()], [empty_image_repo(name="repo1")])

        with pytest.raises(InvalidSpecError) as exc:
            gen.generate(ctx, "deploy1")

        assert "image repository /repo1 does not have a Docker" in str(exc.value)
        assert exc.value.name == "repo1"

    def test_missing_referenced_repository_propagates(self, ctx):
        gen = _generator([reference_deployment_config()], [])
        with pytest.raises(NotFoundError) as exc:
            gen.generate(ctx, "deploy1")
        assert exc.value.kind == "ImageRepository"

    def test_store_errors_pass_through(self, ctx):
        repos = MemoryRepositoryStore([internal_image_repo()])
        repos.set_failure(ConnectionError("registry down"))
        gen = DeploymentConfigGenerator(MemoryConfigStore([reference_deployment_config()]), repos)
        with pytest.raises(ConnectionError, match="registry down"):
            gen.generate(ctx, "deploy1")

    def test_list_errors_pass_through(self, ctx):
        repos = MemoryRepositoryStore([ok_image_repo()])
        repos.set_failure(ConnectionError("registry down"))
        gen = DeploymentConfigGenerator(MemoryConfigStore([basic_deployment_config()]), repos)
        with pytest.raises(ConnectionError, match="registry down"):
            gen.generate(ctx, "deploy1")
        assert repos.list_calls == 1
        assert repos.get_calls == []

    def test_reference_namespace_overrides_context(self):
        dc = reference_deployment_config()
        dc.metadata.namespace = "app"
        dc.triggers[0].image_change_params.source.ref.namespace = "images"
        repo = internal_image_repo()
        repo.metadata.namespace = "images"
        repos = MemoryRepositoryStore([repo])
        gen = DeploymentConfigGenerator(MemoryConfigStore([dc]), repos)

        config = gen.generate(RequestContext(namespace="app"), "deploy1")

        assert config.latest_version == 2
        assert repos.get_calls == [("images", "repo1")]

    def test_reference_defaults_to_context_namespace(self):
        dc = reference_deployment_config()
        dc.metadata.namespace = "app"
        repo = internal_image_repo()
        repo.metadata.namespace = "app"
        repos = MemoryRepositoryStore([repo])
        gen = DeploymentConfigGenerator(MemoryConfigStore([dc]), repos)

        gen.generate(RequestContext(namespace="app"), "deploy1")

        assert repos.get_calls == [("app", "repo1")]


# ── Versioning ───────────────────────────────────────────────────────


class TestVersioning:
    def test_multiple_changed_triggers_bump_once(self, ctx):
        dc = basic_deployment_config()
        dc.triggers.append(image_trigger(["container2"], from_={"name": "repo1"}))
        repo = ok_image_repo()
        repo.tags["tag1"] = "ref9"
        gen = _generator([dc], [repo, internal_image_repo()])

        config = gen.generate(ctx, "deploy1")

        assert config.latest_version == 2
        assert _image(config, "container1") == "registry:8080/repo1:ref9"
        assert _image(config, "container2") == "internal/namespace/imageRepo1:ref1"

    def test_zero_version_with_change_becomes_one(self, ctx):
        repo = ok_image_repo()
        repo.tags["tag1"] = "ref2"
        gen = _generator([basic_deployment_config(latest_version=0)], [repo])
        assert gen.generate(ctx, "deploy1").latest_version == 1

    def test_later_trigger_wins_on_shared_container(self, ctx):
        dc = basic_deployment_config()
        dc.triggers.append(image_trigger(["container1"], from_={"name": "repo1"}))
        gen = _generator([dc], [ok_image_repo(), internal_image_repo()])

        config = gen.generate(ctx, "deploy1")

        assert _image(config, "container1") == "internal/namespace/imageRepo1:ref1"
        assert config.latest_version == 2

    def test_second_generate_is_idempotent(self, ctx):
        repo = ok_image_repo()
        repo.tags["tag1"] = "ref2"
        configs = MemoryConfigStore([basic_deployment_config()])
        gen = DeploymentConfigGenerator(configs, MemoryRepositoryStore([repo]))

        first = gen.generate(ctx, "deploy1")
        configs.put(first)
        second = gen.generate(ctx, "deploy1")

        assert first.latest_version == 2
        assert second.latest_version == 2
        assert second.pod_template.images() == first.pod_template.images()

    def test_fetched_config_not_mutated(self, ctx):
        dc = basic_deployment_config()
        repo = ok_image_repo()
        repo.tags["tag1"] = "ref2"

        class RecordingStore(MemoryConfigStore):
            fetched = None

            def get_config(self, ctx, config_id):
                RecordingStore.fetched = super().get_config(ctx, config_id)
                return RecordingStore.fetched

        gen = DeploymentConfigGenerator(RecordingStore([dc]), MemoryRepositoryStore([repo]))
        config = gen.generate(ctx, "deploy1")

        assert config is not RecordingStore.fetched
        assert RecordingStore.fetched.latest_version == 1
        assert _image(RecordingStore.fetched, "container1") == "registry:8080/repo1:ref1"

    def test_untouched_fields_preserved(self, ctx):
        dc = basic_deployment_config()
        dc.metadata = ObjectMeta(name="deploy1", labels={"app": "web"})
        dc.pod_template.containers.append(Container(name="sidecar", image="busybox"))
        repo = ok_image_repo()
        repo.tags["tag1"] = "ref2"
        gen = _generator([dc], [repo])

        config = gen.generate(ctx, "deploy1")

        assert config.metadata.labels == {"app": "web"}
        assert _image(config, "sidecar") == "busybox"
        assert len(config.triggers) == 1


# ── Context ──────────────────────────────────────────────────────────


class TestCancellation:
    def test_cancelled_context_aborts(self):
        ctx = RequestContext()
        ctx.cancel()
        gen = _generator([basic_deployment_config()], [ok_image_repo()])
        with pytest.raises(ContextCancelledError):
            gen.generate(ctx, "deploy1")
