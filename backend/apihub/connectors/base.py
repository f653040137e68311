"""
Boundary to externally hosted, source-control-like targets.

Concrete connectors (GitHub, GitLab, ...) live outside this package and are
registered on the app at start-up.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional

from apihub.domain.documents import ResourceInfo


@dataclass
class ResourceContent:
    content: str
    # Opaque revision marker (commit sha, blob id, ...) needed for updates
    revision: Optional[str] = None


@dataclass(frozen=True)
class PublicationTarget:
    type: str
    org: Optional[str] = None
    repo: Optional[str] = None
    team: Optional[str] = None
    group: Optional[str] = None
    project: Optional[str] = None
    branch: Optional[str] = None
    resource: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "type": self.type,
            "org": self.org,
            "repo": self.repo,
            "team": self.team,
            "group": self.group,
            "project": self.project,
            "branch": self.branch,
            "resource": self.resource,
        }


class SourceConnector(ABC):
    type: str = ""

    @abstractmethod
    def accepts(self, url: str) -> bool:
        """True if ``url`` points into this connector's hosting system."""

    @abstractmethod
    def resource_url(self, target: PublicationTarget) -> str:
        ...

    @abstractmethod
    def validate_resource_exists(self, url: str) -> ResourceInfo:
        """Raise NotFound if the resource does not exist."""

    @abstractmethod
    def get_resource_content(self, url: str) -> ResourceContent:
        """Raise NotFound if the resource does not exist."""

    @abstractmethod
    def create_resource_content(self, url: str, message: str, content: str) -> None:
        ...

    @abstractmethod
    def update_resource_content(
        self,
        url: str,
        message: str,
        previous: Optional[ResourceContent],
        content: str,
    ) -> None:
        ...
