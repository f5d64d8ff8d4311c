"""npm command-line collaborator: list global packages and install updates."""

from __future__ import annotations

import json
import logging
import subprocess
from typing import List, Sequence

from constants import Constants, DependencyTypes
from errors import InstallError, ManifestError
from versioning.models import Manifest

logger = logging.getLogger(__name__)

GLOBAL_MANIFEST_NAME = "Global Dependencies"


def list_global_packages(registry: str) -> Manifest:
    """Return globally installed packages as a manifest.

    Each package's range is ``>=<installed version>`` so that any newer
    release counts as an update.

    Raises:
        ManifestError: If npm cannot be run or its output is not JSON.
    """
    cmd = [
        Constants.NPM_COMMAND, "ls", "--global", "--depth=0", "--json",
        "--registry", registry,
    ]
    logger.debug("Running: %s", " ".join(cmd))
    try:
        # npm ls exits non-zero on extraneous/missing peers but still prints the tree
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)  # noqa: S603
    except OSError as e:
        raise ManifestError(f"Failed to run npm: {e}") from e
    try:
        data = json.loads(result.stdout or "{}")
    except json.JSONDecodeError as e:
        raise ManifestError(f"Couldn't parse npm ls output: {e}") from e
    if not isinstance(data, dict) or not isinstance(data.get("dependencies") or {}, dict):
        raise ManifestError("Unexpected npm ls output: expected a JSON object")

    deps = {}
    for name, meta in (data.get("dependencies") or {}).items():
        version = meta.get("version") if isinstance(meta, dict) else None
        if not version:
            logger.debug("Skipping global package without version: %s", name)
            continue
        deps[name] = f">={version}"
    return Manifest(name=GLOBAL_MANIFEST_NAME, sections={DependencyTypes.GLOBAL: deps})


def build_install_command(
    specifiers: Sequence[str], dep_type: DependencyTypes, registry: str
) -> List[str]:
    """Build the ``npm install`` argv for one manifest section."""
    return [
        Constants.NPM_COMMAND, "install", dep_type.install_flag,
        "--registry", registry,
        *specifiers,
    ]


def install_packages(
    specifiers: Sequence[str], dep_type: DependencyTypes, registry: str
) -> None:
    """Install ``name@version`` specifiers and save them to their section.

    Does nothing for an empty list.

    Raises:
        InstallError: If npm cannot be started or exits non-zero.
    """
    if not specifiers:
        return
    cmd = build_install_command(specifiers, dep_type, registry)
    logger.info("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, check=False)  # noqa: S603
    except OSError as e:
        raise InstallError(f"Failed to run npm: {e}") from e
    if result.returncode != 0:
        raise InstallError(
            f"npm install exited with status {result.returncode} for "
            f"{dep_type.value}: {' '.join(specifiers)}"
        )
