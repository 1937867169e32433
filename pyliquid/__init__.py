"""
Движок шаблонов Liquid.

Компилирует шаблон ({{ ... }}, {% ... %}) в неизменяемое дерево узлов
и рендерит его относительно области данных.
"""

from __future__ import annotations

from .binding import render_template
from .config import ConfigLoadError, EngineConfig, load_config
from .context import Context
from .environment import Environment, Template
from .errors import (
    ArgumentError,
    LiquidError,
    ParseError,
    ScanError,
    TemplateRenderError,
    UnbalancedTagError,
    UndefinedError,
    UnknownFilterError,
    UnknownTagError,
    UnterminatedDelimiterError,
)
from .expression import Expression, ExpressionKind, FilterCall
from .nodes import BlockTagNode, Node, ObjectNode, TagNode, TextNode
from .values import Value, ValueKind

__all__ = [
    "Environment",
    "Template",
    "Context",
    "render_template",
    "EngineConfig",
    "ConfigLoadError",
    "load_config",
    "Value",
    "ValueKind",
    "Expression",
    "ExpressionKind",
    "FilterCall",
    "Node",
    "TextNode",
    "ObjectNode",
    "TagNode",
    "BlockTagNode",
    "LiquidError",
    "ParseError",
    "ScanError",
    "UnterminatedDelimiterError",
    "UnknownTagError",
    "UnbalancedTagError",
    "ArgumentError",
    "UnknownFilterError",
    "UndefinedError",
    "TemplateRenderError",
]
