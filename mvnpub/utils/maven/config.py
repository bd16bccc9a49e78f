"""
Maven publishing configuration for mvnpub.

Handles project, toolchain and repository configuration from mvnpub.toml and
environment variables. Credentials are never read from the file; the
configuration only names where they live.
"""

import os
import re
import sys
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlparse

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from .auth import CredentialSource
from .errors import ValidationError
from .models import Coordinates, PublicationArtifacts, RepositoryTarget
from .pom import PomInfo
from .toolchain import ToolchainSpec

DEFAULT_CONFIG_FILE = 'mvnpub.toml'

FORBIDDEN_CREDENTIAL_KEYS = ('username', 'password')


class MavenConfig:
    """Handle Maven repository configuration."""

    DEFAULT_LIBS_DIR = 'build/libs'

    def __init__(self, config: Dict[str, Any], base_dir: str = '.'):
        """
        Initialize Maven configuration.

        Args:
            config: Configuration dictionary from mvnpub.toml
            base_dir: Directory relative paths are resolved against
        """
        self.raw_config = config
        self.base_dir = base_dir

        project = config.get('project', {})
        java = config.get('java', {})
        self.maven_config = config.get('publish', {}).get('maven', {})

        # Maven coordinates
        self.group_id = self._expand_env(self.maven_config.get('group_id', project.get('group', '')))
        self.artifact_id = self._expand_env(self.maven_config.get('artifact_id', project.get('name', '')))
        self.version = self._expand_env(self.maven_config.get('version', project.get('version', '')))

        # Repository
        self.repo_name = self._expand_env(self.maven_config.get('name', ''))
        self.repo_url = self._expand_env(self.maven_config.get('url', ''))
        self.allow_overwrite = bool(self.maven_config.get('allow_overwrite', False))
        self.timeout = self.maven_config.get('timeout', 60)
        self.retries = self.maven_config.get('retries', 3)
        self.libs_dir = self._expand_env(self.maven_config.get('libs_dir', self.DEFAULT_LIBS_DIR))

        # Credentials are only located here, resolved at publish time
        self.auth_config = self.maven_config.get('credentials', {})

        # Toolchain
        self.toolchain = ToolchainSpec(
            language_version=java.get('language_version', 8),
            vendor=str(java.get('vendor', 'adoptium')).lower(),
            encoding=java.get('encoding', 'UTF-8'),
        )
        self.publish_sources = java.get('sources', True)
        self.publish_javadoc = java.get('javadoc', True)

        pom = self.maven_config.get('pom', {})
        self.pom_info = PomInfo(
            name=self._expand_env(pom.get('name', self.artifact_id)),
            description=self._expand_env(pom.get('description', project.get('description', ''))),
            url=self._expand_env(pom.get('url', project.get('url', ''))),
            license_name=self._expand_env(pom.get('license_name', '')),
            license_url=self._expand_env(pom.get('license_url', '')),
            developer_id=self._expand_env(pom.get('developer_id', '')),
            developer_name=self._expand_env(pom.get('developer_name', '')),
            developer_email=self._expand_env(pom.get('developer_email', '')),
            scm_url=self._expand_env(pom.get('scm_url', '')),
            scm_connection=self._expand_env(pom.get('scm_connection', '')),
            scm_dev_connection=self._expand_env(pom.get('scm_dev_connection', '')),
        )

    def _expand_env(self, value: str) -> str:
        """
        Expand environment variables in configuration values.

        Supports ${VAR_NAME} and $VAR_NAME syntax.
        """
        if not isinstance(value, str):
            return value

        # Pattern for ${VAR_NAME}
        pattern1 = re.compile(r'\$\{([^}]+)\}')
        value = pattern1.sub(lambda m: os.environ.get(m.group(1), m.group(0)), value)

        # Pattern for $VAR_NAME
        pattern2 = re.compile(r'\$([A-Za-z_][A-Za-z0-9_]*)')
        value = pattern2.sub(lambda m: os.environ.get(m.group(1), m.group(0)), value)

        return value

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(self.group_id, self.artifact_id, self.version)

    def get_credential_source(self) -> CredentialSource:
        return CredentialSource(
            self.repo_name,
            username_env=self.auth_config.get('username_env'),
            password_env=self.auth_config.get('password_env'),
            properties_file=self.auth_config.get('properties_file'),
        )

    def get_repository_target(self) -> RepositoryTarget:
        return RepositoryTarget(
            name=self.repo_name,
            url=self.repo_url,
            credentials=self.get_credential_source(),
            allow_overwrite=self.allow_overwrite,
        )

    def get_libs_dir(self) -> str:
        return os.path.join(self.base_dir, self.libs_dir)

    def find_artifacts(self, libs_dir: Optional[str] = None) -> PublicationArtifacts:
        """Locate the build outputs for the configured coordinates."""
        return PublicationArtifacts.from_libs_dir(
            libs_dir or self.get_libs_dir(),
            self.coordinates,
            include_sources=self.publish_sources,
            include_javadoc=self.publish_javadoc,
        )

    def validate(self) -> Tuple[bool, str]:
        """
        Validate the configuration.

        Returns:
            Tuple of (is_valid, error_message)
        """
        stored = [key for key in FORBIDDEN_CREDENTIAL_KEYS if key in self.auth_config]
        if stored:
            return False, (f"Credentials must not be stored in configuration ({', '.join(stored)}); "
                           f"use username_env/password_env or the environment")

        if not self.repo_name:
            return False, "Repository requires 'name' to be specified"

        if not self.repo_url:
            return False, "Repository requires 'url' to be specified"

        if urlparse(self.repo_url).scheme != 'https':
            return False, f"Repository URL must use https: {self.repo_url}"

        try:
            self.coordinates.validate()
        except ValidationError as e:
            return False, str(e)

        is_valid, error_msg = self.toolchain.validate()
        if not is_valid:
            return False, error_msg

        if not isinstance(self.timeout, (int, float)) or self.timeout <= 0:
            return False, f"Invalid timeout: {self.timeout!r}"

        if not isinstance(self.retries, int) or self.retries < 0:
            return False, f"Invalid retries: {self.retries!r}"

        return True, ""

    def get_config_summary(self) -> str:
        """Get a summary of the configuration for display."""
        source = self.get_credential_source()
        lines = []
        lines.append(f"  Repository: {self.repo_name}")
        lines.append(f"  Repository URL: {self.repo_url}")
        lines.append(f"  Group ID: {self.group_id}")
        lines.append(f"  Artifact ID: {self.artifact_id}")
        lines.append(f"  Version: {self.version}")
        lines.append(f"  Overwrite: {'allowed' if self.allow_overwrite else 'forbidden'}")
        lines.append(f"  Toolchain: Java {self.toolchain.language_version} ({self.toolchain.vendor}), "
                     f"encoding {self.toolchain.encoding}")
        lines.append(f"  Sources jar: {'yes' if self.publish_sources else 'no'}")
        lines.append(f"  Javadoc jar: {'yes' if self.publish_javadoc else 'no'}")
        lines.append(f"  Username from: {', '.join(source.env_candidates('username'))}")
        lines.append(f"  Password from: {', '.join(source.env_candidates('password'))}")
        return '\n'.join(lines)


def load_maven_config(config_path: str = DEFAULT_CONFIG_FILE) -> MavenConfig:
    """
    Load Maven configuration from a TOML file.

    Raises:
        ValidationError: if the file is missing or not valid TOML
    """
    if not os.path.isfile(config_path):
        raise ValidationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, 'rb') as f:
            config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValidationError(f"Invalid TOML in {config_path}: {e}") from e

    return MavenConfig(config, base_dir=os.path.dirname(os.path.abspath(config_path)))
