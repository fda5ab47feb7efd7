"""
Tests for version helpers.
"""

from cf_deploy.utils.version_utils import (
    is_release_tag,
    is_preview_tag,
    is_valid_version,
    is_zero_version,
    release_alias,
    release_tag,
    slugify_version,
    sort_by_version,
    strip_version_prefix,
)


class TestVersionOrdering:
    """Test numeric-aware version ordering."""

    def test_descending_numeric_order(self):
        assert sort_by_version(["9.0.0", "2.0.0", "10.0.0"], key=str) == ["10.0.0", "9.0.0", "2.0.0"]

    def test_already_sorted_input_is_preserved(self):
        assert sort_by_version(["10.0.0", "9.0.0", "2.0.0"], key=str) == ["10.0.0", "9.0.0", "2.0.0"]

    def test_ascending(self):
        ordered = sort_by_version(["1.10.0", "1.9.0", "1.2.0"], key=str, reverse=False)
        assert ordered == ["1.2.0", "1.9.0", "1.10.0"]

    def test_prerelease_text_compares_case_insensitively(self):
        assert sort_by_version(["1.0.0-rc", "1.0.0-RC2"], key=str) == ["1.0.0-RC2", "1.0.0-rc"]

    def test_sort_by_version_is_stable(self):
        items = [("1.0.0", "first"), ("2.0.0", "x"), ("1.0.0", "second")]
        ordered = sort_by_version(items, key=lambda item: item[0])
        assert ordered == [("2.0.0", "x"), ("1.0.0", "first"), ("1.0.0", "second")]


class TestTagHelpers:
    """Test tag and slug helpers."""

    def test_release_tag_and_alias(self):
        assert release_tag("1.2.0") == "v1.2.0"
        assert release_alias("1.2.0-RC.1") == "v1-2-0-rc-1"

    def test_slugify(self):
        assert slugify_version("1.2.3") == "1-2-3"

    def test_strip_prefix(self):
        assert strip_version_prefix("v1.2.0") == "1.2.0"
        assert strip_version_prefix("1.2.0") == "1.2.0"

    def test_tag_classification(self):
        assert is_release_tag("v1.0.0")
        assert not is_release_tag("version-1")
        assert is_preview_tag("pr-12")
        assert not is_preview_tag("v1.0.0")

    def test_zero_version(self):
        assert is_zero_version("0.0.0")
        assert is_zero_version("")
        assert is_zero_version(None)
        assert not is_zero_version("0.0.1")

    def test_valid_version(self):
        assert is_valid_version("1.2.3")
        assert not is_valid_version("not a version")
