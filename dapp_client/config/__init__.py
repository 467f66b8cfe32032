"""Configuration for the client layer."""

from .networks import NETWORK_PRESETS, NetworkId, NetworkName, NetworkPreset, get_preset
from .settings import Settings, get_settings


__all__ = [
    "NETWORK_PRESETS",
    "NetworkId",
    "NetworkName",
    "NetworkPreset",
    "Settings",
    "get_preset",
    "get_settings",
]
