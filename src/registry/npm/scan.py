"""Load declared dependencies from a project's package.json."""

from __future__ import annotations

import json
import logging
import os
from typing import Dict

from constants import Constants, DependencyTypes
from errors import ManifestError
from versioning.models import Manifest

logger = logging.getLogger(__name__)

_MANIFEST_SECTIONS = (
    DependencyTypes.NORMAL,
    DependencyTypes.DEV,
    DependencyTypes.OPTIONAL,
)


def _read_section(data: dict, dep_type: DependencyTypes, path: str) -> Dict[str, str]:
    section = data.get(dep_type.value) or {}
    if not isinstance(section, dict):
        raise ManifestError(f"{dep_type.value} in {path} must be an object")
    result = {}
    for name, spec in section.items():
        if not isinstance(spec, str):
            logger.warning("Ignoring %s: version range is not a string", name)
            continue
        result[name] = spec
    return result


def load_manifest(dir_path: str) -> Manifest:
    """Read package.json from ``dir_path``.

    Args:
        dir_path: Project directory.

    Returns:
        Manifest with the dependencies, devDependencies and
        optionalDependencies sections.

    Raises:
        ManifestError: If the file is missing, unreadable or not a JSON object.
    """
    path = os.path.join(dir_path, Constants.PACKAGE_JSON_FILE)
    if not os.path.isfile(path):
        raise ManifestError(f"{Constants.PACKAGE_JSON_FILE} does not exist in {dir_path}")
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except json.JSONDecodeError as e:
        raise ManifestError(f"Failed to parse {path}: {e}") from e
    except OSError as e:
        raise ManifestError(f"Failed to read {path}: {e}") from e
    if not isinstance(data, dict):
        raise ManifestError(f"{path} must contain a JSON object")

    sections = {t: _read_section(data, t, path) for t in _MANIFEST_SECTIONS}
    logger.info(
        "Loaded %s: %d dependencies, %d devDependencies, %d optionalDependencies",
        path,
        len(sections[DependencyTypes.NORMAL]),
        len(sections[DependencyTypes.DEV]),
        len(sections[DependencyTypes.OPTIONAL]),
    )
    return Manifest(name=str(data.get("name", "")), sections=sections)
