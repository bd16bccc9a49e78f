"""
Value records describing one publication.

All records are immutable and live only for the duration of a publish.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple
from urllib.parse import urlparse

from .auth import CredentialSource
from .errors import ValidationError

SNAPSHOT_SUFFIX = '-SNAPSHOT'

_FORBIDDEN = re.compile(r'[\s/\\:]')


@dataclass(frozen=True)
class Coordinates:
    """Maven coordinates (group, artifact, version)."""
    group: str
    artifact: str
    version: str

    def __str__(self) -> str:
        return f"{self.group}:{self.artifact}:{self.version}"

    @classmethod
    def parse(cls, notation: str) -> 'Coordinates':
        """Parse 'group:artifact:version' notation."""
        parts = notation.split(':')
        if len(parts) != 3:
            raise ValidationError(f"Invalid coordinates '{notation}', expected group:artifact:version")
        coordinates = cls(*parts)
        coordinates.validate()
        return coordinates

    def validate(self) -> None:
        for name in ('group', 'artifact', 'version'):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ValidationError(f"Coordinates {name} must be a non-empty string")
            if _FORBIDDEN.search(value):
                raise ValidationError(f"Coordinates {name} '{value}' contains whitespace, '/', '\\' or ':'")
            if value.startswith('.'):
                raise ValidationError(f"Coordinates {name} '{value}' must not start with '.'")
        if any(not segment for segment in self.group.split('.')):
            raise ValidationError(f"Coordinates group '{self.group}' has an empty segment")

    @property
    def is_snapshot(self) -> bool:
        return self.version.endswith(SNAPSHOT_SUFFIX)

    @property
    def group_path(self) -> str:
        return self.group.replace('.', '/')

    @property
    def version_dir(self) -> str:
        return f"{self.group_path}/{self.artifact}/{self.version}"

    @property
    def metadata_path(self) -> str:
        return f"{self.group_path}/{self.artifact}/maven-metadata.xml"

    def file_name(self, classifier: Optional[str] = None, extension: str = 'jar') -> str:
        if classifier:
            return f"{self.artifact}-{self.version}-{classifier}.{extension}"
        return f"{self.artifact}-{self.version}.{extension}"

    def artifact_path(self, classifier: Optional[str] = None, extension: str = 'jar') -> str:
        return f"{self.version_dir}/{self.file_name(classifier, extension)}"


@dataclass(frozen=True)
class RepositoryTarget:
    """A named remote Maven repository."""
    name: str
    url: str
    credentials: CredentialSource
    allow_overwrite: bool = False

    def validate(self) -> None:
        if not self.name:
            raise ValidationError("Repository name must not be empty")
        parsed = urlparse(self.url or '')
        if parsed.scheme != 'https':
            raise ValidationError(f"Repository '{self.name}' URL must use https: {self.url!r}")
        if not parsed.netloc:
            raise ValidationError(f"Repository '{self.name}' URL has no host: {self.url!r}")

    @property
    def base_url(self) -> str:
        return self.url.rstrip('/')


@dataclass(frozen=True)
class PublicationArtifacts:
    """Archives produced by the build for one publication."""
    primary: Optional[Path]
    sources: Optional[Path] = None
    javadoc: Optional[Path] = None
    extension: str = 'jar'

    @classmethod
    def from_libs_dir(cls,
                      libs_dir: str,
                      coordinates: Coordinates,
                      include_sources: bool = True,
                      include_javadoc: bool = True) -> 'PublicationArtifacts':
        """
        Locate archives in a Gradle-style libs directory.

        Missing auxiliary archives are left out; a missing primary is kept so
        that validation reports it.
        """
        base = Path(libs_dir)
        sources = base / coordinates.file_name('sources')
        javadoc = base / coordinates.file_name('javadoc')
        return cls(
            primary=base / coordinates.file_name(),
            sources=sources if include_sources and sources.is_file() else None,
            javadoc=javadoc if include_javadoc and javadoc.is_file() else None,
        )

    def entries(self) -> List[Tuple[Optional[str], Path]]:
        """List (classifier, path) pairs, primary first."""
        result = [(None, Path(self.primary))] if self.primary else []
        if self.sources:
            result.append(('sources', Path(self.sources)))
        if self.javadoc:
            result.append(('javadoc', Path(self.javadoc)))
        return result

    def validate(self) -> None:
        if not self.primary:
            raise ValidationError("A primary artifact is required")
        if not self.extension:
            raise ValidationError("Primary artifact extension must not be empty")

        for classifier, path in self.entries():
            label = classifier or 'primary'
            if not path.exists():
                raise ValidationError(f"{label} artifact not found: {path}")
            if not path.is_file():
                raise ValidationError(f"{label} artifact is not a file: {path}")
            if path.stat().st_size == 0:
                raise ValidationError(f"{label} artifact is empty: {path}")


@dataclass(frozen=True)
class PublishReceipt:
    """Where a publication ended up."""
    coordinates: Coordinates
    repository: str
    repository_url: str
    remote_paths: Tuple[str, ...] = field(default_factory=tuple)
    bytes_uploaded: int = 0
    replaced: bool = False

    @property
    def urls(self) -> List[str]:
        base = self.repository_url.rstrip('/')
        return [f"{base}/{path}" for path in self.remote_paths]

    @property
    def primary_path(self) -> str:
        return self.remote_paths[0] if self.remote_paths else ''
