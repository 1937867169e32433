"""
Host binding: render a template string against a Python dict.

Example usage:

    >>> import pyliquid
    >>> pyliquid.render_template('{{ a | append: b }}', {'a': 1, 'b': 10})
    '110'
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .environment import Environment
from .errors import LiquidError, TemplateRenderError
from .values import Value

logger = logging.getLogger(__name__)

_default_environment: Optional[Environment] = None


def default_environment() -> Environment:
    """Shared environment with the standard filters and tags."""
    global _default_environment
    if _default_environment is None:
        _default_environment = Environment()
    return _default_environment


def render_template(
    template_text: str,
    params: Dict[str, Any],
    environment: Optional[Environment] = None,
) -> str:
    """
    Render a Liquid template using the provided template parameters.

    Args:
        template_text: Template source
        params: dict[str, object] with the parameters; an empty dict must be
                provided if no parameters are used
        environment: Environment to use instead of the shared default one

    Returns:
        Rendered text

    Raises:
        TypeError: params is not a dict, or a key/value has an unsupported type
        ValueError: An integer parameter exceeds the engine's range
        TemplateRenderError: Parsing or rendering failed
    """
    if not isinstance(template_text, str):
        raise TypeError(f"Template must be a str, got {type(template_text).__name__}")
    if not isinstance(params, dict):
        raise TypeError(f"Template parameters must be a dict, got {type(params).__name__}")

    # Unsupported values are rejected before anything is parsed or rendered
    scope = Value.from_native(params)

    env = environment or default_environment()
    try:
        return env.render(env.parse(template_text), scope)
    except LiquidError as e:
        logger.debug("Template failed: %s", e)
        raise TemplateRenderError(f"Unable to render template: {e}", cause=e) from e


__all__ = ["render_template", "default_environment"]
