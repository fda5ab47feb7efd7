"""
Tests for versions.json reconciliation, persistence and health annotation.
"""

import json
from itertools import count

import pytest

from cf_deploy.api.exceptions import ManifestInvalidError, ManifestNotFoundError
from cf_deploy.core.executor import WranglerClient
from cf_deploy.core.health import HealthChecker
from cf_deploy.core.manifest_store import ManifestStore, load_versions_json, try_read_manifest
from cf_deploy.models.manifest import GitInfo
from cf_deploy.models.version import VersionRecord

from conftest import FIXED_TIME, release_entry, write_manifest

GIT = GitInfo(
    commit_sha="abc1234",
    commit_full="abc1234" + "0" * 33,
    commit_message="Fix things",
    branch="main",
    commit_url="https://github.com/acme/my-worker/commit/abc1234",
)


def record(version_id, created, tag):
    return VersionRecord(version_id=version_id, created=created, tag=tag)


@pytest.fixture
def store(config):
    return ManifestStore(config, clock=lambda: FIXED_TIME)


class TestBuild:
    """Test pure reconciliation of platform records."""

    def test_dedup_keeps_first_record_per_version(self, store):
        records = [
            record("new-id", "2025-01-05", "v1.0.0"),
            record("old-id", "2025-01-01", "v1.0.0"),
        ]

        manifest = store.build(records, "1.0.0")

        assert [r.version_id for r in manifest.versions] == ["new-id"]

    def test_releases_sorted_numeric_descending(self, store):
        records = [
            record("a", "2025-01-03", "v2.0.0"),
            record("b", "2025-01-02", "v10.0.0"),
            record("c", "2025-01-01", "v9.0.0"),
        ]

        manifest = store.build(records, "10.0.0")

        assert [r.version for r in manifest.versions] == ["10.0.0", "9.0.0", "2.0.0"]

    def test_release_urls(self, store):
        manifest = store.build([record("cf3bdf37-aaaa", "2025-01-01", "v1.2.0")], "1.2.0")

        release = manifest.versions[0]
        assert release.url == "https://v1-2-0-my-worker.example.workers.dev"
        assert release.preview_url == "https://cf3bdf37-my-worker.example.workers.dev"
        assert release.tag == "v1.2.0"
        assert release.date == "2025-01-01"

    def test_placeholder_for_unuploaded_app_version(self, store):
        manifest = store.build([record("a", "2025-01-01", "v1.0.0")], "2.0.0")

        placeholder = manifest.versions[0]
        assert placeholder.version == "2.0.0"
        assert placeholder.tag == "v2.0.0"
        assert placeholder.version_id == ""
        assert placeholder.preview_url == ""
        assert placeholder.date == FIXED_TIME
        assert [r.version for r in manifest.versions] == ["2.0.0", "1.0.0"]

    def test_no_placeholder_for_zero_version(self, store):
        manifest = store.build([record("a", "2025-01-01", "v1.0.0")], "0.0.0")
        assert [r.version for r in manifest.versions] == ["1.0.0"]

    def test_placeholder_on_empty_platform(self, store):
        manifest = store.build([], "1.0.0")
        assert len(manifest.versions) == 1
        assert not manifest.versions[0].is_uploaded

    def test_previews_keep_platform_order(self, store):
        records = [
            record("p2", "2025-01-02", "pr-2"),
            record("p9", "2025-01-01", "pr-9"),
            record("p2-old", "2024-12-31", "pr-2"),
        ]

        manifest = store.build(records, "0.0.0")

        assert [p.version_id for p in manifest.previews] == ["p2", "p9", "p2-old"]
        assert manifest.previews[0].label == "PR #2"
        assert manifest.previews[0].url == "https://pr-2-my-worker.example.workers.dev"

    def test_untagged_and_custom_tags_are_ignored(self, store):
        records = [record("x", "2025-01-01", "staging"), record("y", "2025-01-01", "-")]
        manifest = store.build(records, "0.0.0")
        assert manifest.versions == []
        assert manifest.previews == []

    def test_fresh_metadata_only_on_current_version(self, store):
        records = [record("a", "2025-01-02", "v2.0.0"), record("b", "2025-01-01", "v1.0.0")]

        manifest = store.build(records, "2.0.0", git_info=GIT, command_count=5)

        current, older = manifest.versions
        assert current.git == GIT
        assert current.command_count == 5
        assert older.git is None
        assert older.command_count is None

    def test_metadata_carried_forward_from_previous(self, store, config):
        write_manifest(config.versions_json, [
            release_entry("1.0.0", "b", git=GIT.to_dict(), commandCount=3),
        ])
        previous = load_versions_json(config.versions_json)
        records = [record("a", "2025-01-02", "v2.0.0"), record("b", "2025-01-01", "v1.0.0")]

        manifest = store.build(records, "2.0.0", command_count=7, previous=previous)

        older = manifest.find_release("1.0.0")
        assert older.git == GIT
        assert older.command_count == 3
        assert manifest.find_release("2.0.0").command_count == 7

    def test_placeholder_date_carried_forward(self, config):
        ticks = count()
        store = ManifestStore(config, clock=lambda: f"2025-01-0{next(ticks) + 1}T00:00:00.000Z")

        first = store.build([], "3.0.0")
        second = store.build([], "3.0.0", previous=first)

        assert second.versions[0].date == first.versions[0].date
        assert second.generated != first.generated

    def test_root_fields(self, store):
        manifest = store.build([], "0.0.0")
        assert manifest.production == "https://my-worker.example.workers.dev"
        assert manifest.github == "https://github.com/acme/my-worker"
        assert manifest.generated == FIXED_TIME


class TestPersistence:
    """Test reading and writing versions.json."""

    def test_write_format(self, store, config):
        manifest = store.build([record("a", "2025-01-01", "v1.0.0")], "1.0.0")

        path = store.write(manifest, config.assets_dir / "nested" / "versions.json")

        text = path.read_text()
        assert text.endswith("}\n")
        assert text.startswith('{\n  "production"')
        data = json.loads(text)
        assert list(data) == ["production", "github", "generated", "versions", "previews"]
        assert list(data["versions"][0]) == ["version", "tag", "date", "versionId", "url", "previewUrl"]

    def test_optional_keys_omitted(self, store):
        manifest = store.build([record("a", "2025-01-01", "v1.0.0")], "0.0.0")
        data = manifest.to_dict()
        assert "healthy" not in data["versions"][0]
        assert "git" not in data["versions"][0]
        assert "commandCount" not in data["versions"][0]

    def test_load_missing_manifest(self, tmp_path):
        with pytest.raises(ManifestNotFoundError) as exc_info:
            load_versions_json(tmp_path / "versions.json")
        assert "versions-json" in str(exc_info.value)

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / "versions.json"
        path.write_text("{not json")
        with pytest.raises(ManifestInvalidError):
            load_versions_json(path)

    def test_load_wrong_shape(self, tmp_path):
        path = tmp_path / "versions.json"
        path.write_text('{"versions": [{"tag": "v1"}]}')
        with pytest.raises(ManifestInvalidError):
            load_versions_json(path)

    def test_try_read_distinguishes_absent_from_corrupt(self, tmp_path):
        absent = try_read_manifest(tmp_path / "missing.json")
        assert not absent.found
        assert not absent.is_corrupt

        corrupt_path = tmp_path / "versions.json"
        corrupt_path.write_text("[]")
        corrupt = try_read_manifest(corrupt_path)
        assert not corrupt.found
        assert corrupt.is_corrupt

    def test_round_trip_preserves_metadata(self, store, config):
        manifest = store.build([record("a", "2025-01-01", "v1.0.0")], "1.0.0", git_info=GIT, command_count=2)
        store.write(manifest)

        loaded = store.load()

        assert loaded.to_dict() == manifest.to_dict()


class TestGenerate:
    """Test full generation against a fake wrangler."""

    def test_generate_from_wrangler_output(self, config, runner):
        store = ManifestStore(config, WranglerClient(config, runner), clock=lambda: FIXED_TIME)

        manifest = store.generate("10.0.0", git_info=GIT, command_count=3)

        assert [r.version for r in manifest.versions] == ["10.0.0", "9.0.0", "1.0.0"]
        # Most recent upload of 9.0.0 wins
        assert manifest.find_release("9.0.0").version_id.startswith("eeee5555")
        assert manifest.find_release("10.0.0").git == GIT
        assert [p.tag for p in manifest.previews] == ["pr-7"]
        assert config.versions_json.exists()

    def test_lists_versions_with_worker_name(self, config, runner):
        store = ManifestStore(config, WranglerClient(config, runner))
        store.generate("0.0.0")

        assert runner.wrangler_calls("versions", "list") == [
            ["versions", "list", "--name", "my-worker"]
        ]
        assert runner.calls[0]["capture"] is True
        assert runner.calls[0]["cwd"] == config.worker_dir

    def test_consecutive_runs_are_identical(self, config, runner):
        ticks = count()
        store = ManifestStore(
            config,
            WranglerClient(config, runner),
            clock=lambda: f"2025-02-0{next(ticks) + 1}T00:00:00.000Z",
        )

        # 11.0.0 is not uploaded, so a placeholder is synthesized each run
        store.generate("11.0.0", git_info=GIT, command_count=3)
        first = json.loads(config.versions_json.read_text())
        store.generate("11.0.0", git_info=GIT, command_count=3)
        second = json.loads(config.versions_json.read_text())

        assert first["generated"] != second["generated"]
        assert first["versions"] == second["versions"]
        assert first["previews"] == second["previews"]

    def test_corrupt_previous_manifest_is_ignored(self, config, runner):
        config.versions_json.write_text("{broken")
        store = ManifestStore(config, WranglerClient(config, runner), clock=lambda: FIXED_TIME)

        manifest = store.generate("10.0.0")

        assert manifest.latest.version == "10.0.0"
        assert json.loads(config.versions_json.read_text())["versions"][0]["version"] == "10.0.0"

    def test_health_annotation(self, config, runner, workers):
        workers.healthy("https://ffff6666-my-worker.example.workers.dev", "10.0.0")
        workers.healthy("https://pr-7-my-worker.example.workers.dev", "10.1.0")
        workers.down("https://eeee5555-my-worker.example.workers.dev")
        checker = HealthChecker(timeout=1.0, transport=workers.transport)
        store = ManifestStore(config, WranglerClient(config, runner), checker, clock=lambda: FIXED_TIME)

        manifest = store.generate("12.0.0", check_health=True)

        assert manifest.find_release("12.0.0").healthy is None
        assert manifest.find_release("10.0.0").healthy is True
        assert manifest.find_release("9.0.0").healthy is False
        # No route registered for the 1.0.0 upload: 404
        assert manifest.find_release("1.0.0").healthy is False
        assert manifest.previews[0].healthy is True

    def test_health_not_checked_by_default(self, config, runner, workers):
        checker = HealthChecker(transport=workers.transport)
        store = ManifestStore(config, WranglerClient(config, runner), checker, clock=lambda: FIXED_TIME)

        manifest = store.generate("10.0.0")

        assert workers.requests == []
        assert all(r.healthy is None for r in manifest.versions)
