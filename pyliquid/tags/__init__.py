"""
Теги: реестр и стандартный набор.
"""

from __future__ import annotations

from .assign import AssignTag
from .blocks import CaptureTag, CommentTag
from .counters import DecrementTag, IncrementTag
from .registry import TagConstructor, TagRegistry, TagSpec


def register_standard_tags(registry: TagRegistry) -> None:
    """Регистрирует стандартные теги в реестре."""
    registry.register("decrement", DecrementTag.parse, located=True)
    registry.register("increment", IncrementTag.parse, located=True)
    registry.register("assign", AssignTag.parse, located=True)
    registry.register("capture", CaptureTag.parse, block=True, located=True)
    registry.register("comment", CommentTag.parse, raw=True)


__all__ = [
    "TagRegistry",
    "TagSpec",
    "TagConstructor",
    "DecrementTag",
    "IncrementTag",
    "AssignTag",
    "CaptureTag",
    "CommentTag",
    "register_standard_tags",
]
