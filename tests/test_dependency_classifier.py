"""Tests for dependency classification against registry metadata."""

from typing import Dict, List, Optional

import pytest

from errors import PackageNotFoundError, RegistryError
from versioning.models import RegistryEntry, Resolved, RunConfig, Unregistered
from versioning.service import DependencyClassifier


class FakeRegistry:
    """In-memory registry recording lookups in call order."""

    def __init__(self, packages: Dict[str, List[str]], latest_tags: Optional[Dict[str, str]] = None,
                 errors: Optional[Dict[str, Exception]] = None):
        self.packages = packages
        self.latest_tags = latest_tags or {}
        self.errors = errors or {}
        self.calls = []

    def __call__(self, name, registry, timeout):
        self.calls.append((name, registry, timeout))
        if name in self.errors:
            raise self.errors[name]
        if name not in self.packages:
            raise PackageNotFoundError(name)
        return RegistryEntry(name, tuple(self.packages[name]), self.latest_tags.get(name))


def make_classifier(fetch, **overrides):
    return DependencyClassifier(RunConfig(**overrides), fetch=fetch)


class TestClassifyDependency:
    """Per-dependency result computation."""

    def test_stable_scenario(self):
        entry = RegistryEntry("lib", ("1.2.0", "1.3.0", "2.0.0-beta.1", "2.0.0"))
        result = make_classifier(FakeRegistry({})).classify_dependency("lib", "^1.2.0", entry)
        assert result == Resolved(name="lib", required="^1.2.0", stable="1.3.0", latest=None)

    def test_unstable_scenario_unaffected_by_out_of_range_prerelease(self):
        entry = RegistryEntry("lib", ("1.2.0", "1.3.0", "2.0.0-beta.1", "2.0.0"))
        result = make_classifier(FakeRegistry({}), unstable=True).classify_dependency("lib", "^1.2.0", entry)
        assert result.stable == "1.3.0"
        assert result.latest == "1.3.0"

    def test_any_range_stable_and_latest(self):
        entry = RegistryEntry("lib", ("1.0.0", "2.0.0-rc.1"))
        stable_only = make_classifier(FakeRegistry({})).classify_dependency("lib", "*", entry)
        assert stable_only.stable == "1.0.0"
        assert stable_only.latest is None

        with_unstable = make_classifier(FakeRegistry({}), unstable=True).classify_dependency("lib", "*", entry)
        assert with_unstable.stable == "1.0.0"
        assert with_unstable.latest == "2.0.0-rc.1"

    def test_resolved_has_no_warning(self):
        entry = RegistryEntry("lib", ("1.0.0",))
        result = make_classifier(FakeRegistry({})).classify_dependency("lib", "^1.0.0", entry)
        assert result.warning is None


class TestClassifySection:
    """Section-level classification, filtering and error handling."""

    def test_outdated_dependency_is_reported(self):
        registry = FakeRegistry({"lodash": ["4.0.0", "4.17.21"]})
        results = make_classifier(registry).classify({"lodash": "^4.0.0"})
        assert results == {
            "lodash": Resolved(name="lodash", required="^4.0.0", stable="4.17.21", latest=None)
        }

    def test_up_to_date_dependency_is_omitted(self):
        registry = FakeRegistry({"lodash": ["4.17.21"]})
        assert make_classifier(registry).classify({"lodash": "^4.17.21"}) == {}

    def test_any_range_is_omitted(self):
        registry = FakeRegistry({"a": ["1.0.0", "2.0.0"], "b": ["1.0.0", "2.0.0"]})
        assert make_classifier(registry).classify({"a": "*", "b": "latest"}) == {}

    def test_any_range_reports_newer_prerelease_in_unstable_mode(self):
        registry = FakeRegistry({"a": ["1.0.0", "2.0.0-rc.1"]})
        results = make_classifier(registry, unstable=True).classify({"a": "*"})
        assert results == {
            "a": Resolved(name="a", required="*", stable="1.0.0", latest="2.0.0-rc.1")
        }

    def test_any_range_without_prerelease_is_omitted_in_unstable_mode(self):
        registry = FakeRegistry({"a": ["1.0.0", "2.0.0"], "b": ["1.0.0-rc.1", "1.0.0"]})
        assert make_classifier(registry, unstable=True).classify({"a": "*", "b": "x"}) == {}

    def test_prerelease_below_range_floor_is_not_reported(self):
        registry = FakeRegistry({"a": ["1.1.0", "1.2.0-alpha.1", "1.2.0-beta.1"]})
        assert make_classifier(registry, unstable=True).classify({"a": "^1.2.0"}) == {}

    def test_exact_pin_is_omitted(self):
        registry = FakeRegistry({"a": ["1.0.0", "2.0.0"]})
        assert make_classifier(registry).classify({"a": "1.0.0"}) == {}

    def test_no_matching_version_is_omitted(self):
        registry = FakeRegistry({"a": ["1.0.0"]})
        assert make_classifier(registry).classify({"a": "^2.0.0"}) == {}

    def test_prerelease_update_only_in_unstable_mode(self):
        registry = FakeRegistry({"a": ["1.0.0", "1.1.0-beta.1"]})
        assert make_classifier(registry).classify({"a": "^1.0.0"}) == {}

        results = make_classifier(registry, unstable=True).classify({"a": "^1.0.0"})
        assert results["a"].latest == "1.1.0-beta.1"

    def test_global_range_reports_newer_release(self):
        registry = FakeRegistry({"npm": ["9.0.0", "9.8.1", "10.2.0"]})
        results = make_classifier(registry).classify({"npm": ">=9.8.1"})
        assert results["npm"].stable == "10.2.0"

    def test_non_semver_range_is_skipped(self):
        registry = FakeRegistry({"a": ["1.0.0"], "b": ["1.0.0", "1.1.0"]})
        results = make_classifier(registry).classify({
            "a": "git+https://github.com/example/a.git",
            "b": "^1.0.0",
        })
        assert list(results) == ["b"]

    def test_fetch_receives_registry_and_timeout(self):
        registry = FakeRegistry({"a": ["1.0.0"]})
        make_classifier(registry, registry="https://npm.example.com/", timeout=5).classify({"a": "^1.0.0"})
        assert registry.calls == [("a", "https://npm.example.com/", 5)]

    def test_results_follow_declaration_order(self):
        registry = FakeRegistry({n: ["1.0.0", "1.5.0"] for n in ("zeta", "alpha", "mid")})
        results = make_classifier(registry).classify({"zeta": "^1.0.0", "alpha": "^1.0.0", "mid": "^1.0.0"})
        assert list(results) == ["zeta", "alpha", "mid"]
        assert [c[0] for c in registry.calls] == ["zeta", "alpha", "mid"]

    def test_classification_is_idempotent(self):
        registry = FakeRegistry({"a": ["1.0.0", "1.2.0", "2.0.0-rc.1"], "b": ["0.1.0", "0.1.4"]})
        section = {"a": "^1.0.0", "b": "~0.1.0", "ghost": "^1.0.0"}
        classifier = make_classifier(registry, unstable=True, warn404=True)
        assert classifier.classify(section) == classifier.classify(section)


class TestNotFoundHandling:
    """404 handling with and without warn404."""

    def test_warn404_records_warning_and_continues(self):
        registry = FakeRegistry({"after": ["1.0.0", "1.1.0"]})
        results = make_classifier(registry, warn404=True).classify({"ghost": "^1.0.0", "after": "^1.0.0"})

        assert isinstance(results["ghost"], Unregistered)
        assert results["ghost"].kind == "Unregistered"
        assert results["ghost"].warning == "ghost is not in the npm registry"
        assert results["after"].stable == "1.1.0"

    def test_not_found_without_warn404_aborts(self):
        registry = FakeRegistry({"after": ["1.0.0", "1.1.0"]})
        with pytest.raises(PackageNotFoundError):
            make_classifier(registry).classify({"ghost": "^1.0.0", "after": "^1.0.0"})
        assert [c[0] for c in registry.calls] == ["ghost"]

    def test_other_registry_errors_always_propagate(self):
        registry = FakeRegistry(
            {"after": ["1.0.0"]},
            errors={"broken": RegistryError("broken", "registry returned HTTP 500", 500)},
        )
        with pytest.raises(RegistryError) as exc_info:
            make_classifier(registry, warn404=True).classify({"broken": "^1.0.0", "after": "^1.0.0"})
        assert not isinstance(exc_info.value, PackageNotFoundError)
        assert [c[0] for c in registry.calls] == ["broken"]
