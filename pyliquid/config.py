"""
Engine configuration.

Loads EngineConfig from a YAML file. Unknown keys and wrong value types
are reported with the path of the offending field.

Example liquid.yaml:

    strict_variables: true
    disabled_filters: [url_encode]
    disabled_tags: [capture]
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, List, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")

CONFIG_ENV = "PYLIQUID_CONFIG"


class ConfigLoadError(ValueError):
    """Typed configuration loading error with the field path."""
    pass


@dataclass
class EngineConfig:
    """
    Settings of one Environment.

    Attributes:
        strict_variables: A missing variable or key raises UndefinedError instead of rendering nil
        disabled_filters: Standard filters that are not registered
        disabled_tags: Standard tags that are not registered
    """
    strict_variables: bool = False
    disabled_filters: List[str] = field(default_factory=list)
    disabled_tags: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict, source: str = "<config>") -> EngineConfig:
        """
        Create from a parsed YAML dictionary.

        Raises:
            ConfigLoadError: Unknown key or wrong value type
        """
        known = {f.name for f in fields(cls)}
        for key in data:
            if key not in known:
                raise ConfigLoadError(f"{source}: unknown key '{key}'")

        strict = data.get("strict_variables", False)
        if not isinstance(strict, bool):
            raise ConfigLoadError(
                f"{source}.strict_variables: expected bool, got {type(strict).__name__}"
            )

        return cls(
            strict_variables=strict,
            disabled_filters=_string_list(data, "disabled_filters", source),
            disabled_tags=_string_list(data, "disabled_tags", source),
        )


def _string_list(data: dict, key: str, source: str) -> List[str]:
    value: Any = data.get(key, [])
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigLoadError(f"{source}.{key}: expected list of strings, got {value!r}")
    return list(value)


def load_config(path: Path) -> EngineConfig:
    """
    Load configuration from a YAML file.

    An empty file gives the default configuration.

    Raises:
        ConfigLoadError: File is missing, is not valid YAML or has invalid fields
    """
    if not path.is_file():
        raise ConfigLoadError(f"Config file not found: {path}")

    try:
        data = _yaml.load(path.read_text(encoding="utf-8"))
    except YAMLError as e:
        raise ConfigLoadError(f"Failed to parse {path}: {e}") from e

    if data is None:
        logger.debug("Empty config %s, using defaults", path)
        return EngineConfig()
    if not isinstance(data, dict):
        raise ConfigLoadError(f"{path}: expected a mapping at top level, got {type(data).__name__}")

    config = EngineConfig.from_dict(data, source=str(path))
    logger.debug("Loaded config from %s: %r", path, config)
    return config


def default_config_path() -> Optional[Path]:
    """Config file named by the PYLIQUID_CONFIG environment variable, if any."""
    value = os.environ.get(CONFIG_ENV)
    return Path(value) if value else None


__all__ = [
    "EngineConfig",
    "ConfigLoadError",
    "load_config",
    "default_config_path",
    "CONFIG_ENV",
]
