"""NPM registry client: fetch published versions and dist-tags for a package."""

from __future__ import annotations

import json
import logging
from typing import Optional
from urllib.parse import quote

from constants import Constants
from errors import PackageNotFoundError, RegistryError
from common.http_client import safe_get
from common.logging_utils import extra_context, is_debug_enabled, Timer, safe_url
from versioning.models import RegistryEntry

logger = logging.getLogger(__name__)


def package_url(registry: str, name: str) -> str:
    """Build the packument URL for ``name``; scoped names keep the "@" and encode "/"."""
    base = registry if registry.endswith("/") else registry + "/"
    return base + quote(name, safe="@")


def fetch_registry_entry(
    name: str,
    registry: str = Constants.REGISTRY_URL_NPM,
    timeout: Optional[float] = None,
) -> RegistryEntry:
    """Get the published versions of a package from the NPM registry.

    Args:
        name: Package name, optionally scoped ("@scope/pkg").
        registry: Registry base URL.
        timeout: Request timeout in seconds.

    Returns:
        RegistryEntry with every published version and the "latest" dist-tag.

    Raises:
        PackageNotFoundError: The registry answered 404.
        RegistryError: Connection failure, other non-2xx status, or malformed JSON.
    """
    url = package_url(registry, name)
    headers = {"Accept": Constants.NPM_ACCEPT_HEADER}

    logger.debug("Checking package: %s", name)
    with Timer() as timer:
        res = safe_get(url, context=name, timeout=timeout, headers=headers)
    duration_ms = timer.duration_ms()

    if res.status_code == 404:
        logger.warning(
            "Package not found in registry: %s",
            name,
            extra=extra_context(
                event="http_response",
                outcome="not_found",
                status_code=404,
                target=safe_url(url),
                package_manager="npm"
            )
        )
        raise PackageNotFoundError(name)
    if not 200 <= res.status_code < 300:
        logger.error(
            "Unexpected status code (%s) for %s",
            res.status_code,
            name,
            extra=extra_context(
                event="http_response",
                outcome="non_2xx",
                status_code=res.status_code,
                duration_ms=duration_ms,
                target=safe_url(url),
                package_manager="npm"
            )
        )
        raise RegistryError(
            name,
            f"registry returned HTTP {res.status_code} for {name}",
            status_code=res.status_code,
        )

    try:
        packument = json.loads(res.text)
    except json.JSONDecodeError as exc:
        raise RegistryError(name, f"couldn't decode registry response for {name}") from exc
    if not isinstance(packument, dict) or not isinstance(packument.get("versions", {}), dict):
        raise RegistryError(name, f"malformed registry response for {name}")

    versions = tuple(packument.get("versions", {}).keys())
    dist_tags = packument.get("dist-tags") or {}
    latest_tag = dist_tags.get("latest") if isinstance(dist_tags, dict) else None

    if is_debug_enabled(logger):
        logger.debug(
            "Registry entry parsed",
            extra=extra_context(
                event="parse",
                component="client",
                action="fetch_registry_entry",
                outcome="success",
                version_count=len(versions),
                duration_ms=duration_ms,
                package_manager="npm"
            )
        )
    return RegistryEntry(name=name, versions=versions, latest_tag=latest_tag)
