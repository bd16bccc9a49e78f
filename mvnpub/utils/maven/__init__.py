"""
Maven repository integration for mvnpub.

This module provides functionality to publish Java library artifacts to Maven repositories.
"""

from .auth import CredentialSource, Credentials
from .config import MavenConfig, load_maven_config
from .errors import AuthenticationError, ConflictError, NetworkError, PublishError, ValidationError
from .models import Coordinates, PublicationArtifacts, PublishReceipt, RepositoryTarget
from .publisher import MavenPublisher, publish, publish_from_config
from .toolchain import ToolchainSpec
from .uploader import MavenUploader

__all__ = [
    'AuthenticationError', 'ConflictError', 'Coordinates', 'CredentialSource', 'Credentials',
    'MavenConfig', 'MavenPublisher', 'MavenUploader', 'NetworkError', 'PublicationArtifacts',
    'PublishError', 'PublishReceipt', 'RepositoryTarget', 'ToolchainSpec', 'ValidationError',
    'load_maven_config', 'publish', 'publish_from_config',
]
