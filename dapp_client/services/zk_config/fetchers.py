"""
Artifact fetch backends.

Download prover keys, verifier keys and circuit representations from an
HTTP server or read them from a local zk-config directory. Both use the
same layout: ``keys/<circuit>.prover``, ``keys/<circuit>.verifier`` and
``zkir/<circuit>.bzkir``.
"""

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

import aiohttp
from loguru import logger

from dapp_client.config.constants import ARTIFACT_FETCH_TIMEOUT
from dapp_client.utils.exceptions import ArtifactFetchError, ConfigurationError

from .types import ArtifactKind, artifact_relative_path

if TYPE_CHECKING:
    from dapp_client.config.settings import Settings


class HttpArtifactFetcher:
    """
    Fetches artifacts over HTTP from a configured base URL.

    The session is created lazily and closed by ``close()`` unless it was
    supplied by the caller.
    """

    def __init__(
        self,
        base_url: str,
        session: aiohttp.ClientSession | None = None,
        timeout: float = ARTIFACT_FETCH_TIMEOUT,
    ) -> None:
        """
        Initialize HTTP fetcher.

        Args:
            base_url: Base URL serving keys/ and zkir/
            session: Optional shared aiohttp session (not closed by us)
            timeout: Total timeout per download in seconds
        """
        if not base_url or not base_url.strip():
            raise ValueError("base_url must not be empty")
        self.base_url = base_url.strip().rstrip("/")
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    def url_for(self, kind: ArtifactKind, circuit_id: str) -> str:
        """Full URL of an artifact."""
        return f"{self.base_url}/{artifact_relative_path(kind, circuit_id)}"

    async def fetch(self, kind: ArtifactKind, circuit_id: str) -> bytes:
        """
        Download one artifact.

        Raises:
            ArtifactFetchError: On a non-2xx response
            aiohttp.ClientError: On connection failures
        """
        url = self.url_for(kind, circuit_id)
        session = await self._get_session()
        logger.debug(f"Downloading {kind} for circuit '{circuit_id}' from {url}")

        async with session.get(
            url, timeout=aiohttp.ClientTimeout(total=self.timeout)
        ) as response:
            if response.status >= 300:
                raise ArtifactFetchError(
                    f"Failed to fetch {kind} for circuit '{circuit_id}': "
                    f"HTTP {response.status} from {url}"
                )
            data = await response.read()

        logger.debug(f"Downloaded {kind} for circuit '{circuit_id}' ({len(data)} bytes)")
        return data

    async def get_prover_key(self, circuit_id: str) -> bytes:
        return await self.fetch(ArtifactKind.PROVER_KEY, circuit_id)

    async def get_verifier_key(self, circuit_id: str) -> bytes:
        return await self.fetch(ArtifactKind.VERIFIER_KEY, circuit_id)

    async def get_zkir(self, circuit_id: str) -> bytes:
        return await self.fetch(ArtifactKind.REPRESENTATION, circuit_id)

    async def close(self) -> None:
        """Close the session if we created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "HttpArtifactFetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


class FileArtifactFetcher:
    """Reads artifacts from a local zk-config directory."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def path_for(self, kind: ArtifactKind, circuit_id: str) -> Path:
        """Filesystem path of an artifact."""
        return self.directory / artifact_relative_path(kind, circuit_id)

    async def fetch(self, kind: ArtifactKind, circuit_id: str) -> bytes:
        """
        Read one artifact off the event loop.

        Raises:
            ArtifactFetchError: If the file is missing or unreadable
        """
        path = self.path_for(kind, circuit_id)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise ArtifactFetchError(
                f"Failed to read {kind} for circuit '{circuit_id}' from {path}: {e}"
            ) from e

    async def get_prover_key(self, circuit_id: str) -> bytes:
        return await self.fetch(ArtifactKind.PROVER_KEY, circuit_id)

    async def get_verifier_key(self, circuit_id: str) -> bytes:
        return await self.fetch(ArtifactKind.VERIFIER_KEY, circuit_id)

    async def get_zkir(self, circuit_id: str) -> bytes:
        return await self.fetch(ArtifactKind.REPRESENTATION, circuit_id)


def fetcher_from_settings(
    settings: "Settings", session: aiohttp.ClientSession | None = None
) -> HttpArtifactFetcher | FileArtifactFetcher:
    """
    Pick the artifact backend configured in settings.

    A local ``zk_config_path`` wins over ``zk_config_url``.

    Raises:
        ConfigurationError: If neither location is configured
    """
    if settings.zk_config_path is not None:
        logger.info(f"Reading zero-knowledge artifacts from {settings.zk_config_path}")
        return FileArtifactFetcher(settings.zk_config_path)
    if settings.zk_config_url:
        logger.info(f"Downloading zero-knowledge artifacts from {settings.zk_config_url}")
        return HttpArtifactFetcher(settings.zk_config_url, session=session)
    raise ConfigurationError("Neither zk_config_path nor zk_config_url is configured")
