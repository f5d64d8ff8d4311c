"""Exception hierarchy shared by the registry, versioning and CLI layers."""


class DepwatchError(Exception):
    """Base class for all expected failures."""


class ManifestError(DepwatchError):
    """package.json (or the global package listing) could not be loaded."""


class ConfigError(DepwatchError):
    """The configuration file could not be read or has invalid values."""


class RegistryError(DepwatchError):
    """A registry lookup failed (connection, timeout, non-2xx, bad JSON)."""

    def __init__(self, name: str, message: str, status_code=None):
        super().__init__(message)
        self.name = name
        self.status_code = status_code


class PackageNotFoundError(RegistryError):
    """The registry answered 404 for the package."""

    def __init__(self, name: str):
        super().__init__(name, f"{name} is not in the npm registry", status_code=404)


class InstallError(DepwatchError):
    """npm install exited unsuccessfully."""


class InvalidRangeError(ValueError):
    """A required version string is not a semver range."""
