"""
Cached zero-knowledge artifact provider.

Memoizes per-circuit artifacts for the lifetime of the process. The
artifact set is small and fixed per contract deployment, so entries are
never evicted or invalidated.
"""

import asyncio
from collections.abc import Iterable

from loguru import logger

from dapp_client.services.callbacks import (
    ProviderCallback,
    ProviderCallbackEvent,
    notify,
)

from .types import ArtifactFetcher, ArtifactKind, CacheKey


class CachedArtifactProvider:
    """
    Write-once cache in front of an artifact fetch backend.

    Features:
    - Cache hits never touch the backend
    - Paired downloadProverStarted/downloadProverDone events around
      prover key downloads, "done" emitted even when the download fails
    - Optional single-flight mode: concurrent misses on one key share a
      single download

    Usage:
        provider = CachedArtifactProvider(HttpArtifactFetcher(url), callback)
        key = await provider.get_artifact(ArtifactKind.PROVER_KEY, "increment")
    """

    def __init__(
        self,
        fetcher: ArtifactFetcher,
        callback: ProviderCallback | None = None,
        single_flight: bool = False,
    ) -> None:
        """
        Initialize cached provider.

        Args:
            fetcher: Backend used on cache misses
            callback: Lifecycle callback for prover key downloads
            single_flight: De-duplicate concurrent misses on the same key
        """
        self.fetcher = fetcher
        self.callback = callback
        self.single_flight = single_flight
        self._cache: dict[CacheKey, bytes] = {}
        self._in_flight: dict[CacheKey, asyncio.Future[bytes]] = {}

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: object) -> bool:
        return key in self._cache

    def cached_keys(self) -> list[CacheKey]:
        """Keys currently held in the cache."""
        return list(self._cache)

    async def get_artifact(self, kind: ArtifactKind | str, circuit_id: str) -> bytes:
        """
        Return an artifact, downloading it on first use.

        Args:
            kind: Artifact kind
            circuit_id: Circuit identifier

        Returns:
            Artifact bytes
        """
        key = CacheKey(ArtifactKind(kind), circuit_id)
        cached = self._cache.get(key)
        if cached is not None:
            logger.trace(f"Artifact cache hit: {key}")
            return cached

        logger.debug(f"Artifact cache miss: {key}")
        if self.single_flight:
            value = await self._fetch_shared(key)
        else:
            value = await self._fetch(key)
        return self._cache.setdefault(key, value)

    async def get_prover_key(self, circuit_id: str) -> bytes:
        return await self.get_artifact(ArtifactKind.PROVER_KEY, circuit_id)

    async def get_verifier_key(self, circuit_id: str) -> bytes:
        return await self.get_artifact(ArtifactKind.VERIFIER_KEY, circuit_id)

    async def get_zkir(self, circuit_id: str) -> bytes:
        return await self.get_artifact(ArtifactKind.REPRESENTATION, circuit_id)

    async def get_verifier_keys(
        self, circuit_ids: Iterable[str]
    ) -> list[tuple[str, bytes]]:
        """Verifier keys for several circuits, in the order requested."""
        return [
            (circuit_id, await self.get_verifier_key(circuit_id))
            for circuit_id in circuit_ids
        ]

    async def _fetch_shared(self, key: CacheKey) -> bytes:
        # No await between lookup and registration, so one task per key
        pending = self._in_flight.get(key)
        if pending is None:
            pending = asyncio.ensure_future(self._fetch_and_store(key))
            self._in_flight[key] = pending
            pending.add_done_callback(lambda _: self._in_flight.pop(key, None))
        else:
            logger.debug(f"Joining in-flight download: {key}")
        return await asyncio.shield(pending)

    async def _fetch_and_store(self, key: CacheKey) -> bytes:
        # Cached before the shared future resolves and leaves _in_flight
        value = await self._fetch(key)
        return self._cache.setdefault(key, value)

    async def _fetch(self, key: CacheKey) -> bytes:
        if key.kind is ArtifactKind.PROVER_KEY:
            notify(self.callback, ProviderCallbackEvent.DOWNLOAD_PROVER_STARTED)
            try:
                return await self.fetcher.get_prover_key(key.circuit_id)
            finally:
                notify(self.callback, ProviderCallbackEvent.DOWNLOAD_PROVER_DONE)
        if key.kind is ArtifactKind.VERIFIER_KEY:
            return await self.fetcher.get_verifier_key(key.circuit_id)
        return await self.fetcher.get_zkir(key.circuit_id)
