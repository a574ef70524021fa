"""Shapehash runtime configuration."""

from shapehash.runtime.config import FingerprintConfig, load_config

__all__ = [
    "FingerprintConfig",
    "load_config",
]
