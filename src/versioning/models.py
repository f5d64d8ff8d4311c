"""Data models for manifests, registry metadata and classification results."""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple, Union

from constants import Constants, DependencyTypes


@dataclass(frozen=True)
class Manifest:
    """Declared dependencies, name -> required range, split by section."""
    name: str
    sections: Mapping[DependencyTypes, Mapping[str, str]] = field(default_factory=dict)

    def section(self, dep_type: DependencyTypes) -> Dict[str, str]:
        """Return a copy of one section (empty when not declared)."""
        return dict(self.sections.get(dep_type, {}))


@dataclass(frozen=True)
class RegistryEntry:
    """Published versions of one package plus its ``latest`` dist-tag."""
    name: str
    versions: Tuple[str, ...]
    latest_tag: Optional[str] = None


@dataclass(frozen=True)
class Resolved:
    """Newest versions allowed by ``required``.

    ``stable`` never carries a prerelease; ``latest`` is only computed in
    unstable mode.
    """
    name: str
    required: str
    stable: Optional[str]
    latest: Optional[str] = None

    @property
    def warning(self) -> None:
        return None

    def candidate(self, unstable: bool) -> Optional[str]:
        """The version an update would install."""
        return self.latest if unstable else self.stable


@dataclass(frozen=True)
class Unregistered:
    """The registry does not know the package."""
    name: str
    required: str
    reason: str

    kind = "Unregistered"

    @property
    def warning(self) -> str:
        return self.reason


DependencyResult = Union[Resolved, Unregistered]


@dataclass(frozen=True)
class RunConfig:
    """Explicit configuration passed into classification and install calls."""
    registry: str = Constants.REGISTRY_URL_NPM
    unstable: bool = False
    warn404: bool = False
    global_scope: bool = False
    update: bool = False
    filters: Tuple[str, ...] = ()
    directory: str = "."
    timeout: float = Constants.REQUEST_TIMEOUT
    color: bool = True
    error_on_warnings: bool = False

    def section_types(self) -> List[DependencyTypes]:
        """Manifest sections processed by this run, in install order."""
        if self.global_scope:
            return [DependencyTypes.GLOBAL]
        return [DependencyTypes.NORMAL, DependencyTypes.DEV, DependencyTypes.OPTIONAL]
