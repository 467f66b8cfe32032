"""
Client settings.

Loads configuration from environment variables using pydantic-settings.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dapp_client.config.constants import (
    FUNDS_LOG_INTERVAL,
    FUNDS_TIMEOUT,
    RETRY_BACKOFF_FACTOR,
    RETRY_INITIAL_DELAY,
    RETRY_MAX_ATTEMPTS,
    RETRY_MAX_DELAY,
    SYNC_LOG_INTERVAL,
    SYNC_TIMEOUT,
    TX_WATCH_INITIAL_DELAY,
)
from dapp_client.config.networks import NetworkId, NetworkName, get_preset


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    # Network preset; explicit endpoint values below override it
    network: NetworkName = NetworkName.TESTNET_REMOTE
    network_id: NetworkId | None = None

    # Endpoints
    indexer_url: str | None = None
    indexer_ws_url: str | None = None
    node_url: str | None = None
    proof_server_url: str | None = None

    # Persisted wallet snapshots (optional)
    sync_cache: Path | None = Field(
        default=None,
        description="Directory for persisted wallet state; unset disables persistence",
    )

    # Zero-knowledge artifacts
    zk_config_url: str | None = Field(
        default=None, description="Base URL serving keys/ and zkir/ artifacts"
    )
    zk_config_path: Path | None = Field(
        default=None, description="Local directory holding keys/ and zkir/ artifacts"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("DEBUG_LEVEL", "LOG_LEVEL"),
    )
    log_dir: Path | None = None

    # Retry policy
    retry_max_attempts: int = Field(default=RETRY_MAX_ATTEMPTS, ge=0)
    retry_initial_delay: float = Field(default=RETRY_INITIAL_DELAY, ge=0)
    retry_backoff_factor: float = Field(default=RETRY_BACKOFF_FACTOR, gt=1.0)
    retry_max_delay: float = Field(default=RETRY_MAX_DELAY, ge=0)
    tx_watch_initial_delay: float = Field(default=TX_WATCH_INITIAL_DELAY, ge=0)

    # Wallet synchronization deadlines (seconds)
    sync_timeout: float = Field(
        default=SYNC_TIMEOUT, gt=0, description="Maximum wait for a wallet to sync"
    )
    funds_timeout: float = Field(
        default=FUNDS_TIMEOUT, gt=0, description="Maximum wait for a positive balance"
    )
    sync_log_interval: float = Field(default=SYNC_LOG_INTERVAL, gt=0)
    funds_log_interval: float = Field(default=FUNDS_LOG_INTERVAL, gt=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """Upper-case the level so loguru accepts 'info' as well as 'INFO'."""
        return value.strip().upper() or "INFO"

    @model_validator(mode="after")
    def apply_network_preset(self) -> "Settings":
        """Fill endpoints not given explicitly from the network preset."""
        preset = get_preset(self.network)
        self.indexer_url = self.indexer_url or preset.indexer
        self.indexer_ws_url = self.indexer_ws_url or preset.indexer_ws
        self.node_url = self.node_url or preset.node
        self.proof_server_url = self.proof_server_url or preset.proof_server
        if self.network_id is None:
            self.network_id = preset.network_id

        for name in ("indexer_url", "indexer_ws_url", "node_url", "proof_server_url"):
            if not getattr(self, name).strip():
                raise ValueError(f"{name} must not be empty")
        return self

    @model_validator(mode="after")
    def check_retry_bounds(self) -> "Settings":
        """Initial delays must not exceed the delay cap."""
        if self.retry_initial_delay > self.retry_max_delay:
            raise ValueError("retry_initial_delay must not exceed retry_max_delay")
        if self.tx_watch_initial_delay > self.retry_max_delay:
            raise ValueError("tx_watch_initial_delay must not exceed retry_max_delay")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
