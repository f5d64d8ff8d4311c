"""Text rendering of classification results (pure, no I/O)."""

from __future__ import annotations

from typing import Dict, List, Mapping

from constants import DependencyTypes
from versioning.models import DependencyResult, Resolved, Unregistered


class Colors:
    """ANSI color codes for terminal output."""

    BLUE = "\033[34m"
    GREEN = "\033[32m"
    GRAY = "\033[90m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    RESET = "\033[0m"


class _NoColors:
    BLUE = GREEN = GRAY = YELLOW = RED = RESET = ""


def _palette(color: bool):
    return Colors if color else _NoColors


def _type_prefix(dep_type: DependencyTypes) -> str:
    return dep_type.label + " " if dep_type.label else ""


def install_specifiers(results: Mapping[str, DependencyResult], unstable: bool) -> List[str]:
    """Return ``name@version`` for every resolvable update, in result order."""
    specs = []
    for name, result in results.items():
        if not isinstance(result, Resolved):
            continue
        version = result.candidate(unstable)
        if version:
            specs.append(f"{name}@{version}")
    return specs


def format_warnings(
    results: Mapping[str, DependencyResult],
    dep_type: DependencyTypes,
    color: bool = True,
) -> str:
    """Render warning results grouped by kind; empty string when there are none."""
    c = _palette(color)
    groups: Dict[str, List[str]] = {Unregistered.kind: []}
    for name, result in results.items():
        if isinstance(result, Unregistered):
            groups[result.kind].append(f"{c.GRAY}{name} ({c.RED}{result.reason}{c.RESET})")

    lines: List[str] = []
    for title, entries in groups.items():
        if not entries:
            continue
        lines.append("")
        lines.append(f"{c.YELLOW}{title} {_type_prefix(dep_type)}Dependencies{c.RESET}")
        lines.append("")
        lines.extend(entries)
        lines.append("")
    return "\n".join(lines)


def format_outdated(
    results: Mapping[str, DependencyResult],
    dep_type: DependencyTypes,
    unstable: bool = False,
    color: bool = True,
) -> str:
    """Render the outdated listing for one section.

    Lists each update with its declared range and the version to install,
    then the one-line ``npm install`` command, then any warnings. Returns an
    empty string when ``results`` is empty.
    """
    if not results:
        return ""
    specifiers = install_specifiers(results, unstable)
    if not specifiers:
        return format_warnings(results, dep_type, color)
    c = _palette(color)
    lines = ["", f"{c.YELLOW}Outdated {_type_prefix(dep_type)}Dependencies{c.RESET}", ""]
    for name, result in results.items():
        if not isinstance(result, Resolved):
            continue
        version = result.candidate(unstable)
        if not version:
            continue
        lines.append(
            f"{c.GREEN}{name}{c.RESET} {c.GRAY}(package:{c.BLUE} {result.required}, "
            f"{c.GRAY}latest: {c.BLUE}{version}{c.GRAY}){c.RESET}"
        )
    one_line = ["npm install", dep_type.install_flag] + specifiers
    lines.extend(["", f"{c.GRAY}{' '.join(one_line)}{c.RESET}", ""])

    warnings = format_warnings(results, dep_type, color)
    if warnings:
        lines.append(warnings)
    return "\n".join(lines)


def format_all_up_to_date(*sections: Mapping[str, DependencyResult], color: bool = True) -> str:
    """Return the "all up to date" line when every section is empty."""
    if any(sections):
        return ""
    c = _palette(color)
    return f"{c.GREEN}All dependencies up to date{c.RESET}"
