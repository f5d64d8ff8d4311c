"""Dependency classification: registry lookups plus the version comparator."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Mapping, Optional

from errors import InvalidRangeError, PackageNotFoundError
from common.logging_utils import extra_context, is_debug_enabled
from registry.npm.client import fetch_registry_entry
from .models import DependencyResult, RegistryEntry, Resolved, RunConfig, Unregistered
from .resolvers.npm import is_any_range, lowest_satisfying, resolve_latest

logger = logging.getLogger(__name__)

Fetcher = Callable[..., RegistryEntry]


class DependencyClassifier:
    """Classify each declared dependency as updatable, up to date or unregistered."""

    def __init__(self, config: RunConfig, fetch: Optional[Fetcher] = None):
        self.config = config
        self._fetch = fetch or fetch_registry_entry

    def classify_dependency(self, name: str, required: str, entry: RegistryEntry) -> Resolved:
        """Compute the newest stable (and, in unstable mode, prerelease) versions allowed by ``required``.

        Raises:
            InvalidRangeError: If ``required`` is not a semver range.
        """
        stable = resolve_latest(required, entry.versions, False, entry.latest_tag)
        latest = None
        if self.config.unstable:
            latest = resolve_latest(required, entry.versions, True, entry.latest_tag)
        return Resolved(name=name, required=required, stable=stable, latest=latest)

    def is_up_to_date(self, result: Resolved, entry: RegistryEntry) -> bool:
        """True when the range already accepts nothing newer than its own floor.

        Any-version ranges already install the newest stable release, so in
        unstable mode they are outdated only when a newer prerelease exists.
        Otherwise the candidate is compared with the lowest published version
        the range allows under the same stability filter.
        """
        if is_any_range(result.required):
            if not self.config.unstable or result.latest is None:
                return True
            return result.latest == result.stable
        candidate = result.candidate(self.config.unstable)
        if candidate is None:
            return True
        baseline = lowest_satisfying(result.required, entry.versions, self.config.unstable)
        return candidate == baseline

    def classify(self, section: Mapping[str, str]) -> Dict[str, DependencyResult]:
        """Classify one manifest section, in declaration order.

        Up-to-date dependencies and non-semver ranges are left out.

        Raises:
            PackageNotFoundError: A package is unregistered and warn404 is off.
            RegistryError: Any other registry failure.
        """
        results: Dict[str, DependencyResult] = {}
        for name, required in section.items():
            try:
                entry = self._fetch(name, self.config.registry, self.config.timeout)
            except PackageNotFoundError as e:
                if not self.config.warn404:
                    raise
                results[name] = Unregistered(name=name, required=required, reason=str(e))
                continue

            try:
                result = self.classify_dependency(name, required, entry)
            except InvalidRangeError as e:
                logger.debug("Skipping %s: %s", name, e)
                continue

            up_to_date = self.is_up_to_date(result, entry)
            if is_debug_enabled(logger):
                logger.debug(
                    "Classified dependency",
                    extra=extra_context(
                        event="decision",
                        component="classifier",
                        package=name,
                        required=required,
                        stable=result.stable,
                        latest=result.latest,
                        outcome="up_to_date" if up_to_date else "outdated"
                    )
                )
            if not up_to_date:
                results[name] = result
        return results
