"""
Credential resolution for Maven repositories.

Credentials are never stored in configuration. A CredentialSource only knows
where to look; the username and password are read when the upload starts.

Lookup order for a repository named ``N`` (first non-empty value wins):
    1. explicit environment variable names (username_env / password_env)
    2. ORG_GRADLE_PROJECT_<N>Username / ORG_GRADLE_PROJECT_<N>Password
    3. <N_UPPER>_USERNAME / <N_UPPER>_PASSWORD
    4. MAVEN_USERNAME / MAVEN_PASSWORD
    5. <N>Username / <N>Password in $GRADLE_USER_HOME/gradle.properties
"""

import base64
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from .errors import AuthenticationError


@dataclass(frozen=True)
class Credentials:
    """Resolved username/password pair."""
    username: str
    password: str = field(repr=False)

    def is_complete(self) -> bool:
        return bool(self.username) and bool(self.password)

    def get_headers(self) -> Dict[str, str]:
        """Get headers for basic authentication."""
        credentials = f"{self.username}:{self.password}"
        encoded = base64.b64encode(credentials.encode('utf-8')).decode('ascii')
        return {'Authorization': f'Basic {encoded}'}


class CredentialSource:
    """Describe where a repository's credentials can be found."""

    GENERIC_PREFIX = 'MAVEN'

    def __init__(self,
                 repository_name: str,
                 username_env: Optional[str] = None,
                 password_env: Optional[str] = None,
                 properties_file: Optional[str] = None,
                 environ: Optional[Mapping[str, str]] = None):
        """
        Initialize credential source.

        Args:
            repository_name: Repository name, used to derive lookup keys
            username_env: Explicit environment variable holding the username
            password_env: Explicit environment variable holding the password
            properties_file: gradle.properties path (default: Gradle user home)
            environ: Environment mapping, defaults to os.environ at resolve time
        """
        self.repository_name = repository_name
        self.username_env = username_env
        self.password_env = password_env
        self.properties_file = properties_file
        self._environ = environ

    def __repr__(self) -> str:
        return (f"CredentialSource(repository_name={self.repository_name!r}, "
                f"username_env={self.username_env!r}, password_env={self.password_env!r})")

    def __eq__(self, other) -> bool:
        if not isinstance(other, CredentialSource):
            return NotImplemented
        return (self.repository_name, self.username_env, self.password_env, self.properties_file) == \
            (other.repository_name, other.username_env, other.password_env, other.properties_file)

    def __hash__(self) -> int:
        return hash((self.repository_name, self.username_env, self.password_env, self.properties_file))

    @property
    def environ(self) -> Mapping[str, str]:
        return self._environ if self._environ is not None else os.environ

    def env_candidates(self, field_name: str) -> List[str]:
        """
        List environment variable names checked for a field, in priority order.

        Args:
            field_name: 'username' or 'password'
        """
        suffix = field_name.capitalize()
        explicit = self.username_env if field_name == 'username' else self.password_env

        names = []
        if explicit:
            names.append(explicit)
        if self.repository_name:
            names.append(f"ORG_GRADLE_PROJECT_{self.repository_name}{suffix}")
            upper = re.sub(r'[^A-Za-z0-9]', '_', self.repository_name).upper()
            names.append(f"{upper}_{field_name.upper()}")
        names.append(f"{self.GENERIC_PREFIX}_{field_name.upper()}")
        return names

    def get_properties_path(self) -> Path:
        if self.properties_file:
            return Path(self.properties_file).expanduser()
        gradle_home = self.environ.get('GRADLE_USER_HOME')
        if gradle_home:
            return Path(gradle_home).expanduser() / 'gradle.properties'
        return Path.home() / '.gradle' / 'gradle.properties'

    def _read_properties(self) -> Dict[str, str]:
        path = self.get_properties_path()
        if not path.is_file():
            return {}
        return parse_properties(path.read_text(encoding='utf-8'))

    def _lookup(self, field_name: str, properties: Optional[Dict[str, str]]) -> str:
        for name in self.env_candidates(field_name):
            value = self.environ.get(name, '')
            if value:
                return value

        if properties and self.repository_name:
            return properties.get(f"{self.repository_name}{field_name.capitalize()}", '')
        return ''

    def resolve(self) -> Credentials:
        """
        Resolve credentials now.

        Returns:
            Credentials with non-empty username and password

        Raises:
            AuthenticationError: if either value is missing or empty
        """
        properties = None
        username = self._lookup('username', None)
        password = self._lookup('password', None)
        if not username or not password:
            properties = self._read_properties()
            username = username or self._lookup('username', properties)
            password = password or self._lookup('password', properties)

        missing = [name for name, value in (('username', username), ('password', password)) if not value]
        if missing:
            hint = ', '.join(self.env_candidates(missing[0]))
            raise AuthenticationError(
                f"No {' or '.join(missing)} found for repository '{self.repository_name}'. "
                f"Set one of: {hint}"
            )

        return Credentials(username=username, password=password)


def parse_properties(content: str) -> Dict[str, str]:
    """Parse a Java .properties file (key=value or key: value lines)."""
    result = {}
    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith(('#', '!')):
            continue
        match = re.match(r'^([^=:\s]+)\s*[=:]?\s*(.*)$', line)
        if match:
            result[match.group(1)] = match.group(2)
    return result
