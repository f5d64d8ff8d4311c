"""Build the run configuration from CLI flags, environment and config file.

Precedence, highest first: CLI flags, environment variables, the YAML
config file, then Constants defaults.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Dict, Mapping, Optional

import yaml

from constants import Constants
from errors import ConfigError
from versioning.models import RunConfig

logger = logging.getLogger(__name__)

_FILE_KEYS = ("registry", "unstable", "warn404", "timeout", "color")


def load_config_file(config_path: Optional[str], directory: str = ".") -> Dict[str, Any]:
    """Load the YAML config file.

    An explicit ``config_path`` must exist; otherwise ``.depwatch.yml`` in
    ``directory`` is used when present.

    Raises:
        ConfigError: If the file is missing (explicit path only), unreadable,
            not valid YAML, or not a mapping.
    """
    path = config_path
    if not path:
        default = os.path.join(directory, Constants.CONFIG_FILE)
        if not os.path.isfile(default):
            return {}
        path = default
    elif not os.path.isfile(path):
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    unknown = sorted(set(data) - set(_FILE_KEYS))
    if unknown:
        logger.warning("Ignoring unknown config keys in %s: %s", path, ", ".join(unknown))
    logger.debug("Loaded config from: %s", path)
    return {k: data[k] for k in _FILE_KEYS if k in data}


def _pick(cli_value, env_value, file_value, default):
    for value in (cli_value, env_value, file_value):
        if value is not None:
            return value
    return default


def build_run_config(
    args: Any,
    file_config: Mapping[str, Any],
    environ: Optional[Mapping[str, str]] = None,
    isatty: Optional[bool] = None,
) -> RunConfig:
    """Merge CLI args, environment and file config into a RunConfig.

    Raises:
        ConfigError: If the registry is not a string or the timeout is not a
            positive number.
    """
    environ = os.environ if environ is None else environ
    if isatty is None:
        isatty = sys.stdout.isatty()

    registry = _pick(
        getattr(args, "REGISTRY", None),
        environ.get(Constants.ENV_REGISTRY) or None,
        file_config.get("registry"),
        Constants.REGISTRY_URL_NPM,
    )
    if not isinstance(registry, str) or not registry.strip():
        raise ConfigError(f"registry must be a URL string, got {registry!r}")
    if not registry.endswith("/"):
        registry += "/"

    try:
        timeout = float(file_config.get("timeout", Constants.REQUEST_TIMEOUT))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"timeout must be a number: {e}") from e
    if timeout <= 0:
        raise ConfigError("timeout must be positive")

    color = bool(file_config.get("color", True)) and isatty
    if getattr(args, "NO_COLOR", False) or environ.get(Constants.ENV_NO_COLOR):
        color = False

    return RunConfig(
        registry=registry,
        unstable=bool(_pick(getattr(args, "UNSTABLE", None), None, file_config.get("unstable"), False)),
        warn404=bool(_pick(getattr(args, "WARN404", None), None, file_config.get("warn404"), False)),
        global_scope=bool(getattr(args, "GLOBAL", False)),
        update=bool(getattr(args, "UPDATE", False)),
        filters=tuple(getattr(args, "FILTERS", []) or ()),
        directory=getattr(args, "DIRECTORY", None) or ".",
        timeout=timeout,
        color=color,
        error_on_warnings=bool(getattr(args, "ERROR_ON_WARNINGS", False)),
    )
