"""
Utilities for building environments and rendering templates in tests.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from pyliquid import EngineConfig, Environment


def make_env(
    strict_variables: bool = False,
    disabled_filters: Optional[Iterable[str]] = None,
    disabled_tags: Optional[Iterable[str]] = None,
) -> Environment:
    """Creates an isolated environment with the given settings."""
    config = EngineConfig(
        strict_variables=strict_variables,
        disabled_filters=list(disabled_filters or []),
        disabled_tags=list(disabled_tags or []),
    )
    return Environment(config)


def render(source: str, data: Any = None, env: Optional[Environment] = None) -> str:
    """
    Compiles and renders a template in one call.

    Args:
        source: Template source
        data: Data scope (dict, Value or None)
        env: Environment to use; a fresh default one if omitted
    """
    env = env or Environment()
    return env.parse(source).render(data)
