"""Fingerprint configuration.

Configuration is an explicit, immutable parameter on every engine call; there
is no process-wide state. It can be loaded from a YAML file:

    fingerprint:
      max_depth: 128
      decode_log_level: WARNING
      merges:
        body:
          encoding: BASE64
          decodedType: JSON
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from shapehash.primitives.errors import ConfigurationError
from shapehash.primitives.guard import DEFAULT_MAX_DEPTH
from shapehash.schemas.merges import NO_MERGES, SchemaMerges, parse_schema_merges

logger = logging.getLogger(__name__)

CONFIG_SECTION = "fingerprint"

_KNOWN_KEYS = ("max_depth", "decode_log_level", "merges")


@dataclass(frozen=True)
class FingerprintConfig:
    """Engine settings.

    Attributes:
        max_depth: Maximum nesting depth before DepthExceededError.
        merges: Directives used when a call passes none.
        decode_log_level: Logging level for decode failure diagnostics.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    merges: SchemaMerges = field(default_factory=lambda: NO_MERGES)
    decode_log_level: int = logging.DEBUG

    def __post_init__(self):
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
            raise ConfigurationError(
                f"max_depth must be an integer, got {self.max_depth!r}",
                field="max_depth",
            )
        if self.max_depth < 1:
            raise ConfigurationError(
                f"max_depth must be >= 1, got {self.max_depth}",
                field="max_depth",
            )
        object.__setattr__(self, "merges", parse_schema_merges(self.merges))
        object.__setattr__(self, "decode_log_level", _parse_level(self.decode_log_level))

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "FingerprintConfig":
        """Build a config from a dict, optionally nested under `fingerprint`."""
        if not data:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"config must be a mapping, got {type(data).__name__}")
        if CONFIG_SECTION in data:
            data = data[CONFIG_SECTION] or {}
            if not isinstance(data, Mapping):
                raise ConfigurationError(
                    f"{CONFIG_SECTION} section must be a mapping",
                    field=CONFIG_SECTION,
                )

        unknown = sorted(set(data) - set(_KNOWN_KEYS))
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {unknown}")

        kwargs: Dict[str, Any] = {key: data[key] for key in _KNOWN_KEYS if key in data}
        if kwargs.get("merges") is None:
            kwargs.pop("merges", None)
        return cls(**kwargs)


def _parse_level(level: Any) -> int:
    if isinstance(level, int) and not isinstance(level, bool):
        return level
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if isinstance(resolved, int):
            return resolved
    raise ConfigurationError(
        f"decode_log_level must be a logging level, got {level!r}",
        field="decode_log_level",
    )


def load_config(path: Path) -> FingerprintConfig:
    """Load a FingerprintConfig from a YAML file.

    Args:
        path: Path to the YAML config.

    Returns:
        Parsed config; an empty file yields the defaults.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ConfigurationError: If the YAML is invalid or holds bad values.
    """
    path = Path(path)
    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}")

    logger.debug(f"Loaded fingerprint config from {path}")
    return FingerprintConfig.from_dict(data)
