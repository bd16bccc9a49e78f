"""
HTTP transport for Maven repositories.

Files are stored with a plain HTTP PUT at their layout path, each followed by
its checksum files. HEAD checks for existing files and GET reads metadata.
"""

import hashlib
from pathlib import Path
from typing import Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .errors import AuthenticationError, ConflictError, NetworkError

CHECKSUM_ALGORITHMS = ('md5', 'sha1', 'sha256', 'sha512')

SUCCESS_CODES = (200, 201, 204)


def calculate_checksums(data: bytes) -> Dict[str, str]:
    """Calculate every checksum a Maven repository expects."""
    return {name: hashlib.new(name, data).hexdigest() for name in CHECKSUM_ALGORITHMS}


def format_size(size: float) -> str:
    """Format file size in human-readable format."""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0
    return f"{size:.2f} TB"


class MavenUploader:
    """Handle file uploads to a Maven repository."""

    DEFAULT_TIMEOUT = 60

    DEFAULT_RETRIES = 3

    def __init__(self,
                 repository_url: str,
                 headers: Dict[str, str],
                 timeout: float = DEFAULT_TIMEOUT,
                 retries: int = DEFAULT_RETRIES,
                 verbose: bool = False):
        """
        Initialize Maven uploader.

        Args:
            repository_url: Repository base URL
            headers: Authentication headers
            timeout: Per-request timeout in seconds
            retries: Retries for connection errors and 5xx responses
            verbose: Enable verbose output
        """
        self.repository_url = repository_url.rstrip('/')
        self.headers = headers
        self.timeout = timeout
        self.retries = retries
        self.verbose = verbose
        self.bytes_sent = 0

        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Create HTTP session with retry strategy."""
        session = requests.Session()

        retry = Retry(
            total=self.retries,
            read=self.retries,
            connect=self.retries,
            backoff_factor=0.3,
            status_forcelist=(500, 502, 503, 504),
            allowed_methods=frozenset(['HEAD', 'GET', 'PUT']),
        )

        adapter = HTTPAdapter(max_retries=retry)
        session.mount('https://', adapter)

        session.headers.update(self.headers)
        session.headers['User-Agent'] = 'mvnpub'

        return session

    def close(self):
        self.session.close()

    def __enter__(self) -> 'MavenUploader':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def url_for(self, remote_path: str) -> str:
        return f"{self.repository_url}/{remote_path.lstrip('/')}"

    def _request(self, method: str, remote_path: str, **kwargs) -> requests.Response:
        url = self.url_for(remote_path)
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            raise NetworkError(f"{method} {url} timed out after {self.timeout}s") from e
        except requests.exceptions.RetryError as e:
            raise NetworkError(f"{method} {url} failed after {self.retries} retries: {e}") from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"{method} {url} failed: {e}") from e

    def _raise_for_status(self, response: requests.Response, method: str, remote_path: str):
        status = response.status_code
        if status in SUCCESS_CODES:
            return
        if status in (401, 403):
            raise AuthenticationError(
                f"Repository rejected credentials for {method} {remote_path}", status_code=status
            )
        if status == 409:
            raise ConflictError(
                f"Repository refused to overwrite {remote_path}", status_code=status
            )
        raise NetworkError(
            f"Unexpected response for {method} {remote_path}: {response.text[:200]}", status_code=status
        )

    def exists(self, remote_path: str) -> bool:
        """Check whether a file is already stored at remote_path."""
        response = self._request('HEAD', remote_path, allow_redirects=True)
        if response.status_code == 404:
            return False
        self._raise_for_status(response, 'HEAD', remote_path)
        return True

    def fetch_text(self, remote_path: str) -> Optional[str]:
        """Read a text file, or None if it does not exist."""
        response = self._request('GET', remote_path)
        if response.status_code == 404:
            return None
        self._raise_for_status(response, 'GET', remote_path)
        return response.text

    def put_bytes(self, data: bytes, remote_path: str,
                  content_type: str = 'application/octet-stream') -> int:
        """Store raw bytes at remote_path."""
        response = self._request('PUT', remote_path, data=data, headers={'Content-Type': content_type})
        self._raise_for_status(response, 'PUT', remote_path)
        self.bytes_sent += len(data)
        return len(data)

    def upload_bytes(self, data: bytes, remote_path: str,
                     content_type: str = 'application/octet-stream') -> List[str]:
        """
        Upload content followed by its checksum files.

        Returns:
            Remote paths stored, content first
        """
        self.put_bytes(data, remote_path, content_type)
        stored = [remote_path]

        for name, digest in calculate_checksums(data).items():
            checksum_path = f"{remote_path}.{name}"
            self.put_bytes(digest.encode('ascii'), checksum_path, 'text/plain')
            stored.append(checksum_path)

        if self.verbose:
            print(f"  ✓ {remote_path} ({format_size(len(data))})")
        return stored

    def upload_file(self, file_path: str, remote_path: str,
                    content_type: str = 'application/java-archive') -> List[str]:
        """Upload a local file followed by its checksum files."""
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        if self.verbose:
            print(f"Uploading: {file_path.name}")

        return self.upload_bytes(file_path.read_bytes(), remote_path, content_type)

    def upload_text(self, content: str, remote_path: str,
                    content_type: str = 'application/xml') -> List[str]:
        """Upload text content as an artifact."""
        return self.upload_bytes(content.encode('utf-8'), remote_path, content_type)
