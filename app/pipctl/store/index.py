"""Package index client.

Looks up the latest published release of a project through the JSON
API of a PyPI-compatible index.
"""

import logging
import threading

import httpx
from packaging.utils import canonicalize_name

from pipctl.core.errors import RegistryUnavailableError
from pipctl.models.package import RemoteRecord

logger = logging.getLogger(__name__)


class IndexClient:
    """Client for the JSON API of a PyPI-compatible index.

    Attributes:
        base_url: Index base URL, e.g. https://pypi.org.
        timeout: Timeout in seconds for each request.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the index client.

        Args:
            base_url: Index base URL.
            timeout: Timeout in seconds for each request.
            client: Optional preconfigured httpx client (used by tests).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        # Lookups run on several threads; only one of them may create the client.
        self._lock = threading.Lock()

    def _get_client(self) -> httpx.Client:
        with self._lock:
            if self._client is None:
                self._client = httpx.Client(
                    timeout=httpx.Timeout(self.timeout),
                    follow_redirects=True,
                    headers={"Accept": "application/json"},
                )
            return self._client

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    def project_url(self, name: str) -> str:
        """Return the JSON API URL for a project."""
        return f"{self.base_url}/pypi/{canonicalize_name(name)}/json"

    def find_latest(self, name: str) -> RemoteRecord | None:
        """Look up the latest release of a project.

        Args:
            name: Project name (any normalization).

        Returns:
            RemoteRecord for the latest release, or None if the index
            answers 404 for the project.

        Raises:
            RegistryUnavailableError: On connection errors, timeouts,
                unexpected status codes or malformed responses.
        """
        url = self.project_url(name)
        logger.debug("Querying index: %s", url)

        try:
            response = self._get_client().get(url)
        except httpx.RequestError as e:
            msg = f"Cannot reach package index {self.base_url}: {e}"
            raise RegistryUnavailableError(msg) from e

        if response.status_code == httpx.codes.NOT_FOUND:
            logger.info("Package %s not found on %s", name, self.base_url)
            return None

        if response.status_code != httpx.codes.OK:
            msg = f"Package index returned HTTP {response.status_code} for {name}"
            raise RegistryUnavailableError(msg)

        try:
            info = response.json()["info"]
            version = info["version"]
            project = info.get("name") or name
        except (ValueError, KeyError, TypeError) as e:
            msg = f"Malformed index response for {name}: {e}"
            raise RegistryUnavailableError(msg) from e

        if not version:
            logger.info("Package %s has no published release", name)
            return None

        return RemoteRecord(name=project, version=version, summary=info.get("summary") or None)
