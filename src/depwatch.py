"""depwatch - report and install newer npm dependency versions

Runs a linear pipeline once per invocation: load the manifest, classify
each section against the registry, filter by the names given on the
command line, print the report and optionally install the updates.
"""
import logging
import sys
from typing import Dict, Iterable, Mapping, Optional, TypeVar

from constants import DependencyTypes, ExitCodes
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import parse_args
from cli_config import build_run_config, load_config_file
from errors import ConfigError, InstallError, ManifestError, RegistryError
from registry.npm.commands import install_packages, list_global_packages
from registry.npm.scan import load_manifest
from report import format_all_up_to_date, format_outdated, format_warnings, install_specifiers
from versioning.models import DependencyResult, Manifest, RunConfig, Unregistered
from versioning.service import DependencyClassifier, Fetcher

logger = logging.getLogger(__name__)

T = TypeVar("T")
SectionResults = Dict[DependencyTypes, Dict[str, DependencyResult]]


def load_dependencies(config: RunConfig) -> Manifest:
    """Load package.json, or the global package listing with --global."""
    if config.global_scope:
        return list_global_packages(config.registry)
    return load_manifest(config.directory)


def filter_names(entries: Mapping[str, T], names: Iterable[str]) -> Dict[str, T]:
    """Keep only the named dependencies; an empty name list keeps everything."""
    names = list(names)
    if not names:
        return dict(entries)
    return {name: value for name, value in entries.items() if name in names}


def collect_results(
    config: RunConfig, manifest: Manifest, fetch: Optional[Fetcher] = None
) -> SectionResults:
    """Classify each section in order (normal, dev, optional; or global)."""
    classifier = DependencyClassifier(config, fetch)
    collected: SectionResults = {}
    for dep_type in config.section_types():
        section = filter_names(manifest.section(dep_type), config.filters)
        if is_debug_enabled(logger):
            logger.debug(
                "Classifying section",
                extra=extra_context(
                    event="function_entry",
                    component="cli",
                    action="classify",
                    target=dep_type.value,
                    count=len(section)
                )
            )
        collected[dep_type] = classifier.classify(section)
    return collected


def install_updates(config: RunConfig, collected: SectionResults) -> None:
    """Install each section's updates, waiting for one section before the next.

    Raises:
        InstallError: On the first failing section; later sections are skipped.
    """
    for dep_type, results in collected.items():
        specifiers = install_specifiers(results, config.unstable)
        install_packages(specifiers, dep_type, config.registry)


def has_warnings(collected: SectionResults) -> bool:
    return any(
        isinstance(result, Unregistered)
        for results in collected.values()
        for result in results.values()
    )


def render(config: RunConfig, collected: SectionResults) -> str:
    """Render the report printed after classification (or after installing)."""
    chunks = []
    for dep_type, results in collected.items():
        if config.update:
            chunks.append(format_warnings(results, dep_type, config.color))
        else:
            chunks.append(format_outdated(results, dep_type, config.unstable, config.color))
    chunks.append(format_all_up_to_date(*collected.values(), color=config.color))
    return "\n".join(chunk for chunk in chunks if chunk)


def run(config: RunConfig, fetch: Optional[Fetcher] = None) -> ExitCodes:
    """Execute the pipeline and return the exit code.

    Raises:
        ManifestError: package.json or the global listing is unavailable.
        RegistryError: A registry lookup failed.
        InstallError: npm install failed.
    """
    manifest = load_dependencies(config)
    collected = collect_results(config, manifest, fetch)

    if config.update:
        install_updates(config, collected)

    output = render(config, collected)
    if output:
        print(output)

    if has_warnings(collected):
        logger.warning("One or more dependencies are not in the registry.")
        if config.error_on_warnings:
            logger.error("Warnings present, exiting with non-zero status code.")
            return ExitCodes.EXIT_WARNINGS
    return ExitCodes.SUCCESS


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL, args.LOG_FILE)

    try:
        file_config = load_config_file(args.CONFIG, args.DIRECTORY)
        config = build_run_config(args, file_config)
    except ConfigError as e:
        logger.error("%s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    try:
        code = run(config)
    except ManifestError as e:
        logger.error("%s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except RegistryError as e:
        logger.error("Failed to get updated dependencies: %s", e)
        sys.exit(ExitCodes.CONNECTION_ERROR.value)
    except InstallError as e:
        logger.error("Failed to update dependencies: %s", e)
        sys.exit(ExitCodes.INSTALL_ERROR.value)

    sys.exit(code.value)


if __name__ == "__main__":
    main()
