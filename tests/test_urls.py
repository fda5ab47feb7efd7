"""
Tests for preview and alias URL construction.
"""

import pytest

from cf_deploy.core.urls import version_alias_url, version_preview_url, worker_url


class TestWorkerUrl:
    """Test URL builders."""

    def test_worker_url(self):
        assert worker_url("my-worker", "example.workers.dev", "pr-42") == \
            "https://pr-42-my-worker.example.workers.dev"

    @pytest.mark.parametrize("name,domain", [
        ("my-worker", "workers.dev"),
        ("api", "acme.workers.dev"),
    ])
    def test_alias_url_for_semver(self, name, domain):
        assert version_alias_url(name, domain, "1.2.3") == f"https://v1-2-3-{name}.{domain}"

    def test_alias_url_is_case_folded(self):
        assert version_alias_url("w", "d.dev", "TEST.1") == "https://vtest-1-w.d.dev"

    def test_alias_url_keeps_double_v(self):
        assert version_alias_url("w", "d.dev", "v1.0.0") == "https://vv1-0-0-w.d.dev"

    def test_preview_url_uses_first_version_id_segment(self):
        url = version_preview_url("my-worker", "workers.dev", "CF3BDF37-1234-4000-8000-000000000000")
        assert url == "https://cf3bdf37-my-worker.workers.dev"

    def test_preview_url_empty_without_version_id(self):
        assert version_preview_url("my-worker", "workers.dev", "") == ""
