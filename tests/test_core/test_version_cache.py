"""Unit tests for the per-run version cache."""

from __future__ import annotations

import pytest

from conftest import FakeRegistry, RecordingReporter
from pinkeeper.core.version_cache import VersionCache


def _raw(versions) -> list:
    return [str(v) for v in versions]


@pytest.mark.unit
class TestVersionsFor:
    def test_queries_once_per_name(self, reporter: RecordingReporter) -> None:
        registry = FakeRegistry({"flask": ["3.0.0", "2.3.3"]})
        cache = VersionCache(registry, reporter=reporter)

        first = cache.versions_for("flask")
        second = cache.versions_for("flask")

        assert _raw(first) == ["3.0.0", "2.3.3"]
        assert second is first
        assert registry.queries == ["flask"]

    def test_names_are_canonicalized(self, reporter: RecordingReporter) -> None:
        registry = FakeRegistry({"Flask_Login": ["0.6.3"]})
        cache = VersionCache(registry, reporter=reporter)

        cache.versions_for("Flask_Login")
        cache.versions_for("flask-login")

        assert registry.queries == ["Flask_Login"]
        assert cache.is_cached("FLASK.LOGIN")

    def test_logs_before_querying(self, reporter: RecordingReporter) -> None:
        cache = VersionCache(FakeRegistry({"click": ["8.1.7"]}), reporter=reporter)

        cache.versions_for("click")
        cache.versions_for("click")

        assert reporter.texts == ['Searching for versions of "click" ...']

    def test_failed_query_is_cached_as_empty(self, reporter: RecordingReporter) -> None:
        registry = FakeRegistry({})
        cache = VersionCache(registry, reporter=reporter)

        assert cache.versions_for("ghost") == []
        assert cache.versions_for("ghost") == []
        assert registry.queries == ["ghost"]

    def test_instances_do_not_share_state(self, reporter: RecordingReporter) -> None:
        registry = FakeRegistry({"click": ["8.1.7"]})

        VersionCache(registry, reporter=reporter).versions_for("click")
        VersionCache(registry, reporter=reporter).versions_for("click")

        assert registry.queries == ["click", "click"]


@pytest.mark.unit
class TestPreload:
    BATCH = "flask (3.0.0, 2.3.3)\nclick (8.1.7, 8.1.6)\n"

    def test_single_batch_query(self, reporter: RecordingReporter) -> None:
        registry = FakeRegistry(batch_output=self.BATCH)
        cache = VersionCache(registry, reporter=reporter)

        cache.preload(["flask", "click"])

        assert registry.batch_queries == [["flask", "click"]]
        assert reporter.texts == ["Searching for versions of flask, click ..."]

    def test_preloaded_names_are_not_queried_again(
        self, reporter: RecordingReporter
    ) -> None:
        registry = FakeRegistry(batch_output=self.BATCH)
        cache = VersionCache(registry, reporter=reporter)

        cache.preload(["flask", "click"])

        assert _raw(cache.versions_for("flask")) == ["3.0.0", "2.3.3"]
        assert _raw(cache.versions_for("click")) == ["8.1.7", "8.1.6"]
        assert registry.queries == []

    def test_uncovered_name_is_queried_once_on_access(
        self, reporter: RecordingReporter
    ) -> None:
        registry = FakeRegistry({"jinja2": ["3.1.2"]}, batch_output=self.BATCH)
        cache = VersionCache(registry, reporter=reporter)

        cache.preload(["flask", "click", "jinja2"])

        assert not cache.is_cached("jinja2")
        assert _raw(cache.versions_for("jinja2")) == ["3.1.2"]
        cache.versions_for("jinja2")
        assert registry.queries == ["jinja2"]

    def test_skips_already_cached_names(self, reporter: RecordingReporter) -> None:
        registry = FakeRegistry({"flask": ["3.0.0"]}, batch_output=self.BATCH)
        cache = VersionCache(registry, reporter=reporter)
        cache.versions_for("flask")

        cache.preload(["flask", "click"])

        assert registry.batch_queries == [["click"]]
        assert _raw(cache.versions_for("flask")) == ["3.0.0"]

    def test_nothing_to_preload(self, reporter: RecordingReporter) -> None:
        registry = FakeRegistry({"flask": ["3.0.0"]}, batch_output=self.BATCH)
        cache = VersionCache(registry, reporter=reporter)
        cache.versions_for("flask")
        reporter.messages.clear()

        cache.preload(["flask"])

        assert registry.batch_queries == []
        assert reporter.messages == []

    def test_registry_without_batch_support(self, reporter: RecordingReporter) -> None:
        registry = FakeRegistry({"flask": ["3.0.0"]})
        cache = VersionCache(registry, reporter=reporter)

        cache.preload(["flask", "click"])

        assert registry.batch_queries == []
        assert reporter.messages == []
        assert not cache.is_cached("flask")

    def test_empty_batch_output(self, reporter: RecordingReporter) -> None:
        registry = FakeRegistry(batch_output="")
        cache = VersionCache(registry, reporter=reporter)

        cache.preload(["flask", "click"])

        assert registry.batch_queries == [["flask", "click"]]
        assert not cache.is_cached("flask")
