"""NPM version comparator using semantic versioning."""

import logging
import re
from typing import Iterable, List, Optional, Union

import semantic_version
from semantic_version import base

from constants import Constants
from errors import InvalidRangeError

logger = logging.getLogger(__name__)

RangeSpec = Union[semantic_version.NpmSpec, semantic_version.SimpleSpec]


def is_any_range(spec_str: Optional[str]) -> bool:
    """Return True for ranges that accept every release ("*", "x", "latest", "")."""
    return (spec_str or "").strip() in Constants.ANY_VERSION_RANGES


def _normalize_spec(spec_str: str) -> str:
    """Normalize npm range syntax (hyphen, x-ranges) into SimpleSpec-compatible form."""
    s = spec_str.strip()

    # Hyphen ranges: "1.2.3 - 1.4.5" => ">=1.2.3, <=1.4.5"
    m = re.match(r'^\s*([0-9A-Za-z\.\-\+]+)\s+-\s+([0-9A-Za-z\.\-\+]+)\s*$', s)
    if m:
        left, right = m.group(1), m.group(2)
        return f">={left},<={right}"

    # x-ranges: 1.2.x or 1.x or 1.* -> convert to comparator pairs
    s2 = s.replace('*', 'x').lower()
    m = re.match(r'^\s*v?(\d+)\.(\d+)\.x\s*$', s2)
    if m:
        major, minor = int(m.group(1)), int(m.group(2))
        return f">={major}.{minor}.0,<{major}.{minor + 1}.0"

    m = re.match(r'^\s*v?(\d+)(\.x)?(\.x)?\s*$', s2)
    if m:
        major = int(m.group(1))
        return f">={major}.0.0,<{major + 1}.0.0"

    return s


def parse_range(spec_str: Optional[str]) -> RangeSpec:
    """Parse an npm range expression.

    Raises:
        InvalidRangeError: If neither the npm grammar nor the normalized
            simple grammar accepts the expression.
    """
    if is_any_range(spec_str):
        return semantic_version.NpmSpec("*")
    # Prefer NpmSpec which understands ^, ~, hyphen ranges, x-ranges and ||
    try:
        return semantic_version.NpmSpec(spec_str.strip())
    except ValueError:
        pass
    # Fallback to normalized SimpleSpec if NpmSpec cannot parse
    try:
        return semantic_version.SimpleSpec(_normalize_spec(spec_str))
    except ValueError as e:
        raise InvalidRangeError(f"Invalid semver range '{spec_str}': {e}") from e


def _parse_versions(versions: Iterable[str]) -> List[semantic_version.Version]:
    parsed = []
    for v in versions:
        try:
            parsed.append(semantic_version.Version(v))
        except ValueError:
            continue  # Skip invalid versions
    return parsed


_PRECEDENCE_OPS = {
    base.Range.OP_EQ: lambda v, t: v == t,
    base.Range.OP_NEQ: lambda v, t: v != t,
    base.Range.OP_GT: lambda v, t: v > t,
    base.Range.OP_GTE: lambda v, t: v >= t,
    base.Range.OP_LT: lambda v, t: v < t,
    base.Range.OP_LTE: lambda v, t: v <= t,
}


def _match_precedence(clause, version: semantic_version.Version) -> bool:
    """Evaluate a parsed range by semver precedence alone, ignoring prerelease policies."""
    if isinstance(clause, base.AllOf):
        return all(_match_precedence(c, version) for c in clause.clauses)
    if isinstance(clause, base.AnyOf):
        return any(_match_precedence(c, version) for c in clause.clauses)
    if isinstance(clause, base.Range) and clause.operator in _PRECEDENCE_OPS:
        return _PRECEDENCE_OPS[clause.operator](version, clause.target)
    # Always / Never
    return clause.match(version)


def satisfies(version: semantic_version.Version, spec: RangeSpec, include_unstable: bool) -> bool:
    """Return True if ``version`` is allowed by ``spec``.

    Prereleases are never allowed in stable mode. In unstable mode a
    prerelease is allowed when the range admits it directly, or when the
    range admits its release core and every comparator holds under plain
    precedence, the way npm's includePrerelease behaves: ``^1.2.0`` takes
    ``1.3.0-beta.1`` but neither ``1.2.0-beta.1`` nor ``2.0.0-beta.1``.
    """
    if version.prerelease:
        if not include_unstable:
            return False
        if spec.match(version):
            return True
        return spec.match(version.truncate()) and _match_precedence(spec.clause, version)
    return spec.match(version)


def _matching(
    required_range: Optional[str],
    available_versions: Iterable[str],
    include_unstable: bool,
    latest_tag: Optional[str] = None,
) -> List[semantic_version.Version]:
    spec = parse_range(required_range)
    candidates = [v for v in _parse_versions(available_versions) if satisfies(v, spec, include_unstable)]

    if not include_unstable and latest_tag:
        # Versions above a stable "latest" dist-tag were not released as latest
        tag = _parse_versions([latest_tag])
        if tag and not tag[0].prerelease:
            candidates = [v for v in candidates if v <= tag[0]]
    return candidates


def resolve_latest(
    required_range: Optional[str],
    available_versions: Iterable[str],
    include_unstable: bool,
    latest_tag: Optional[str] = None,
) -> Optional[str]:
    """Pick the highest published version satisfying ``required_range``.

    Args:
        required_range: npm range expression, e.g. "^1.2.0".
        available_versions: Published version strings; invalid ones are skipped.
        include_unstable: Whether prerelease versions may be picked.
        latest_tag: The package's "latest" dist-tag, caps stable picks when known.

    Returns:
        The highest matching version string, or None if nothing matches.
    """
    candidates = _matching(required_range, available_versions, include_unstable, latest_tag)
    if not candidates:
        return None
    return str(max(candidates))


def lowest_satisfying(
    required_range: Optional[str],
    available_versions: Iterable[str],
    include_unstable: bool,
) -> Optional[str]:
    """Return the lowest published version satisfying ``required_range``."""
    candidates = _matching(required_range, available_versions, include_unstable)
    if not candidates:
        return None
    return str(min(candidates))
