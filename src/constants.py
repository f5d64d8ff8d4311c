"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    EXIT_WARNINGS = 3
    INSTALL_ERROR = 4


class DependencyTypes(Enum):
    """Manifest sections a dependency can be declared in.

    Args:
        Enum (string): Section key as written in package.json.
    """

    NORMAL = "dependencies"
    DEV = "devDependencies"
    OPTIONAL = "optionalDependencies"
    GLOBAL = "global"

    @property
    def label(self) -> str:
        """Human label used in report headers ("" for normal dependencies)."""
        return {
            DependencyTypes.NORMAL: "",
            DependencyTypes.DEV: "Dev",
            DependencyTypes.OPTIONAL: "Optional",
            DependencyTypes.GLOBAL: "Global",
        }[self]

    @property
    def install_flag(self) -> str:
        """npm install flag that saves into this section."""
        return {
            DependencyTypes.NORMAL: "--save",
            DependencyTypes.DEV: "--save-dev",
            DependencyTypes.OPTIONAL: "--save-optional",
            DependencyTypes.GLOBAL: "--global",
        }[self]


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    VERSION = "0.4.0"
    REGISTRY_URL_NPM = "https://registry.npmjs.org/"
    NPM_ACCEPT_HEADER = (
        "application/vnd.npm.install-v1+json; q=1.0, application/json; q=0.8, */*"
    )
    PACKAGE_JSON_FILE = "package.json"
    CONFIG_FILE = ".depwatch.yml"
    NPM_COMMAND = "npm"
    UPDATE_COMMANDS = ("update", "u")
    ANY_VERSION_RANGES = ("", "*", "x", "X", "latest")
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests

    ENV_REGISTRY = "DEPWATCH_REGISTRY"
    ENV_LOG_LEVEL = "DEPWATCH_LOG_LEVEL"
    ENV_NO_COLOR = "NO_COLOR"
