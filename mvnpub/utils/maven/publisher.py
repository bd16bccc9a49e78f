"""
Maven publisher for Java library artifacts.

Handles the actual publishing process to Maven repositories.
"""

from pathlib import Path
from typing import Callable, List, Optional, Tuple

from .auth import Credentials
from .config import MavenConfig
from .errors import ConflictError, PublishError, ValidationError
from .models import Coordinates, PublicationArtifacts, PublishReceipt, RepositoryTarget
from .pom import PomInfo, PublishedFile, generate_module_metadata, generate_pom, merge_maven_metadata
from .toolchain import ToolchainSpec, check_toolchain
from .uploader import MavenUploader, calculate_checksums
from ..context.result import CliResult

UploaderFactory = Callable[[RepositoryTarget, Credentials], MavenUploader]


class MavenPublisher:
    """Handle publishing artifacts to a Maven repository."""

    def __init__(self,
                 target: RepositoryTarget,
                 toolchain: Optional[ToolchainSpec] = None,
                 pom_info: Optional[PomInfo] = None,
                 timeout: float = MavenUploader.DEFAULT_TIMEOUT,
                 retries: int = MavenUploader.DEFAULT_RETRIES,
                 verbose: bool = False,
                 uploader_factory: Optional[UploaderFactory] = None):
        """
        Initialize Maven publisher.

        Args:
            target: Repository to publish to
            toolchain: Toolchain pin checked against the primary jar
            pom_info: Descriptive POM metadata
            timeout: Per-request timeout in seconds
            retries: Transport retries for connection errors and 5xx
            verbose: Enable verbose output
            uploader_factory: Builds the uploader once credentials are resolved
        """
        self.target = target
        self.toolchain = toolchain or ToolchainSpec()
        self.pom_info = pom_info or PomInfo()
        self.timeout = timeout
        self.retries = retries
        self.verbose = verbose
        self.uploader_factory = uploader_factory or self._create_uploader

    def _create_uploader(self, target: RepositoryTarget, credentials: Credentials) -> MavenUploader:
        return MavenUploader(
            target.base_url,
            credentials.get_headers(),
            timeout=self.timeout,
            retries=self.retries,
            verbose=self.verbose,
        )

    def validate(self, artifacts: PublicationArtifacts, coordinates: Coordinates):
        """Run every local check; no network access."""
        coordinates.validate()
        artifacts.validate()
        self.target.validate()
        if artifacts.extension == 'jar':
            check_toolchain(Path(artifacts.primary), self.toolchain, self.verbose)

    def publish(self, artifacts: PublicationArtifacts, coordinates: Coordinates) -> PublishReceipt:
        """
        Publish the artifacts to the Maven repository.

        Returns:
            Receipt listing every stored path

        Raises:
            ValidationError: bad artifacts, coordinates or target (before any network call)
            AuthenticationError: credentials missing or rejected
            ConflictError: version exists and overwrite is forbidden
            NetworkError: repository unreachable or answered unexpectedly
        """
        self.validate(artifacts, coordinates)
        contents = self._read_artifacts(artifacts)

        # Resolved only now, so nothing is sent without complete credentials
        credentials = self.target.credentials.resolve()

        if self.verbose:
            print(f"\nPublishing {coordinates} to {self.target.name} ({self.target.url})")

        uploader = self.uploader_factory(self.target, credentials)
        try:
            return self._upload(uploader, artifacts, contents, coordinates)
        finally:
            uploader.close()

    def probe(self, coordinates: Coordinates, extension: str = 'jar') -> bool:
        """
        Check credentials against the repository without uploading.

        Returns:
            True if the version is already published
        """
        coordinates.validate()
        self.target.validate()
        credentials = self.target.credentials.resolve()
        uploader = self.uploader_factory(self.target, credentials)
        try:
            return uploader.exists(coordinates.artifact_path(extension=extension))
        finally:
            uploader.close()

    @staticmethod
    def _read_artifacts(artifacts: PublicationArtifacts) -> List[Tuple[Optional[str], bytes]]:
        contents = []
        for classifier, path in artifacts.entries():
            try:
                contents.append((classifier, path.read_bytes()))
            except OSError as e:
                raise ValidationError(f"Cannot read artifact {path}: {e}") from e
        return contents

    def _upload(self, uploader: MavenUploader, artifacts: PublicationArtifacts,
                contents: List[Tuple[Optional[str], bytes]],
                coordinates: Coordinates) -> PublishReceipt:
        primary_path = coordinates.artifact_path(extension=artifacts.extension)

        replaced = uploader.exists(primary_path)
        if replaced and not (self.target.allow_overwrite or coordinates.is_snapshot):
            raise ConflictError(
                f"{coordinates} already exists in repository '{self.target.name}' "
                f"and overwrite is not allowed"
            )

        # Merged up front so unreadable metadata stops the publish before any PUT
        existing_metadata = uploader.fetch_text(coordinates.metadata_path)
        metadata = merge_maven_metadata(existing_metadata, coordinates)

        stored: List[str] = []
        published: List[PublishedFile] = []

        for classifier, data in contents:
            extension = artifacts.extension if classifier is None else 'jar'
            remote_path = coordinates.artifact_path(classifier, extension)
            stored.extend(uploader.upload_bytes(data, remote_path, 'application/java-archive'))
            published.append(PublishedFile(
                classifier=classifier,
                name=coordinates.file_name(classifier, extension),
                size=len(data),
                checksums=calculate_checksums(data),
            ))

        pom = generate_pom(coordinates, self.pom_info, self.toolchain, packaging=artifacts.extension)
        stored.extend(uploader.upload_text(pom, coordinates.artifact_path(extension='pom')))

        module = generate_module_metadata(coordinates, published, self.toolchain)
        stored.extend(uploader.upload_text(
            module, coordinates.artifact_path(extension='module'), 'application/json'
        ))

        stored.extend(uploader.upload_text(metadata, coordinates.metadata_path))

        if self.verbose:
            action = 'Replaced' if replaced else 'Published'
            print(f"✓ {action} {coordinates} in {self.target.name}")
            print(f"  Coordinates: {coordinates}")
            print(f"  Published to: {uploader.url_for(primary_path)}")

        return PublishReceipt(
            coordinates=coordinates,
            repository=self.target.name,
            repository_url=self.target.url,
            remote_paths=tuple(stored),
            bytes_uploaded=uploader.bytes_sent,
            replaced=replaced,
        )


def publish(artifacts: PublicationArtifacts,
            coordinates: Coordinates,
            target: RepositoryTarget,
            toolchain: Optional[ToolchainSpec] = None,
            pom_info: Optional[PomInfo] = None,
            verbose: bool = False,
            uploader_factory: Optional[UploaderFactory] = None) -> CliResult:
    """
    Publish artifacts under the given coordinates to a repository.

    Returns:
        CliResult holding a PublishReceipt, or the PublishError that aborted it
    """
    publisher = MavenPublisher(
        target,
        toolchain=toolchain,
        pom_info=pom_info,
        verbose=verbose,
        uploader_factory=uploader_factory,
    )
    try:
        return CliResult(value=publisher.publish(artifacts, coordinates))
    except PublishError as e:
        return CliResult(error=e)


def publish_from_config(config: MavenConfig,
                        artifacts: Optional[PublicationArtifacts] = None,
                        verbose: bool = False,
                        uploader_factory: Optional[UploaderFactory] = None) -> CliResult:
    """
    Convenience function to publish using mvnpub.toml settings.

    Args:
        config: Loaded MavenConfig
        artifacts: Explicit artifacts, defaults to the configured libs directory
        verbose: Enable verbose output
        uploader_factory: Override uploader construction

    Returns:
        CliResult holding a PublishReceipt or a PublishError
    """
    is_valid, error_msg = config.validate()
    if not is_valid:
        return CliResult(error=ValidationError(f"Configuration validation failed: {error_msg}"))

    publisher = MavenPublisher(
        config.get_repository_target(),
        toolchain=config.toolchain,
        pom_info=config.pom_info,
        timeout=config.timeout,
        retries=config.retries,
        verbose=verbose,
        uploader_factory=uploader_factory,
    )
    try:
        return CliResult(value=publisher.publish(artifacts or config.find_artifacts(), config.coordinates))
    except PublishError as e:
        return CliResult(error=e)
