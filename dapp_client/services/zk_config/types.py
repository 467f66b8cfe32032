"""
Zero-knowledge artifact types.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol


class ArtifactKind(StrEnum):
    """Per-circuit artifact kinds."""

    PROVER_KEY = "proverKey"
    VERIFIER_KEY = "verifierKey"
    REPRESENTATION = "zkir"


@dataclass(frozen=True)
class CacheKey:
    """Identifies one cached artifact."""

    kind: ArtifactKind
    circuit_id: str

    def __str__(self) -> str:
        return f"{self.kind}:{self.circuit_id}"


class ArtifactFetcher(Protocol):
    """Backend that downloads or reads per-circuit artifacts."""

    async def get_prover_key(self, circuit_id: str) -> bytes: ...

    async def get_verifier_key(self, circuit_id: str) -> bytes: ...

    async def get_zkir(self, circuit_id: str) -> bytes: ...


# Relative location of each artifact kind under a zk-config root
ARTIFACT_LAYOUT: dict[ArtifactKind, tuple[str, str]] = {
    ArtifactKind.PROVER_KEY: ("keys", ".prover"),
    ArtifactKind.VERIFIER_KEY: ("keys", ".verifier"),
    ArtifactKind.REPRESENTATION: ("zkir", ".bzkir"),
}


def artifact_relative_path(kind: ArtifactKind, circuit_id: str) -> str:
    """Relative path of an artifact, e.g. ``keys/increment.prover``."""
    folder, suffix = ARTIFACT_LAYOUT[kind]
    return f"{folder}/{circuit_id}{suffix}"
