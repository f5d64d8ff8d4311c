"""Argument parsing functionality for depwatch."""

import argparse

from constants import Constants


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="depwatch",
        description=(
            "Get latest dependency version information.\n\n"
            "Command:\n"
            "  update, u  Update dependencies to latest STABLE versions and save to package.json"
        ),
        usage="%(prog)s [command] [options...] [dependency names...]",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=True,
    )

    parser.add_argument("NAMES",
                        help="Optional 'update' (or 'u') command followed by dependency names to filter on",
                        nargs="*",
                        metavar="name")
    parser.add_argument("-g", "--global",
                        dest="GLOBAL",
                        help="Consider global dependencies",
                        action="store_true")
    parser.add_argument("-u", "--unstable",
                        dest="UNSTABLE",
                        help="Use UNSTABLE dependencies",
                        action="store_true",
                        default=None)
    parser.add_argument("-r", "--registry",
                        dest="REGISTRY",
                        help=f"The npm registry URL (default: {Constants.REGISTRY_URL_NPM})",
                        action="store",
                        type=str)
    parser.add_argument("--warn404",
                        dest="WARN404",
                        help="If dependency not found, continue and warn",
                        action="store_true",
                        default=None)
    parser.add_argument("-v", "--version",
                        action="version",
                        version=f"v{Constants.VERSION}",
                        help="Print version number and exit")
    parser.add_argument("-d", "--directory",
                        dest="DIRECTORY",
                        help="Project directory containing package.json (default: current directory)",
                        action="store",
                        type=str,
                        default=".")
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help=f"Path to configuration file (YAML; default: {Constants.CONFIG_FILE} in the project directory)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("--no-color",
                        dest="NO_COLOR",
                        help="Disable colored output",
                        action="store_true")
    parser.add_argument("--error-on-warnings",
                        dest="ERROR_ON_WARNINGS",
                        help="Exit with a non-zero status code if warnings are present.",
                        action="store_true")

    # Options may appear between the command and dependency names
    ns = parser.parse_intermixed_args(argv)
    ns.UPDATE = any(n in Constants.UPDATE_COMMANDS for n in ns.NAMES)
    ns.FILTERS = [n for n in ns.NAMES if n not in Constants.UPDATE_COMMANDS]
    return ns
