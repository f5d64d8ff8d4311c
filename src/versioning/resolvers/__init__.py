"""Version comparators for supported ecosystems."""

from .npm import is_any_range, lowest_satisfying, parse_range, resolve_latest, satisfies

__all__ = [
    "is_any_range",
    "lowest_satisfying",
    "parse_range",
    "resolve_latest",
    "satisfies",
]
