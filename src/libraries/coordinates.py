"""Maven coordinates for downloadable library jars."""

from dataclasses import dataclass
from typing import Optional

from constants import Constants
from common.errors import InvalidCoordinateError


@dataclass(frozen=True)
class LibraryCoordinate:
    """A ``group:artifact:version`` coordinate, optionally tagged with a short name."""
    group_id: str
    artifact_id: str
    version: str
    name: Optional[str] = None

    @classmethod
    def parse(cls, text: str, name: Optional[str] = None) -> "LibraryCoordinate":
        """Parse ``group:artifact:version``.

        Raises:
            InvalidCoordinateError: Unless there are exactly three non-empty parts.
        """
        parts = [p.strip() for p in text.strip().split(":")]
        if len(parts) != 3 or not all(parts):
            raise InvalidCoordinateError(
                f"Invalid coordinate format: {text!r} (expected groupId:artifactId:version)"
            )
        return cls(group_id=parts[0], artifact_id=parts[1], version=parts[2], name=name)

    @property
    def coordinate(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    @property
    def jar_name(self) -> str:
        return f"{self.artifact_id}-{self.version}.jar"

    def to_url(self, repo_root: Optional[str] = None) -> str:
        """Repository URL of the jar, derived mechanically from the coordinate."""
        root = (repo_root or Constants.MAVEN_REPO_ROOT).rstrip("/")
        group_path = self.group_id.replace(".", "/")
        return f"{root}/{group_path}/{self.artifact_id}/{self.version}/{self.jar_name}"

    def __str__(self) -> str:
        return self.coordinate
