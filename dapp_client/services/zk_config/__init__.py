"""
Zero-knowledge artifact services.

Fetch backends (HTTP, local directory) and the process-wide artifact cache.
"""

from .cache import CachedArtifactProvider
from .fetchers import FileArtifactFetcher, HttpArtifactFetcher, fetcher_from_settings
from .types import ArtifactFetcher, ArtifactKind, CacheKey, artifact_relative_path


__all__ = [
    "ArtifactFetcher",
    "ArtifactKind",
    "CacheKey",
    "CachedArtifactProvider",
    "FileArtifactFetcher",
    "HttpArtifactFetcher",
    "artifact_relative_path",
    "fetcher_from_settings",
]
