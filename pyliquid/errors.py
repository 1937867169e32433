"""
Exception hierarchy of the template engine.

Every error that a template author or a host application can fix
(bad markup, unknown filters, wrong argument counts, missing variables
in strict mode) inherits from LiquidError and is shown to the user
as a clean message.

Programming errors and bugs should NOT inherit from LiquidError —
they will propagate with full tracebacks.
"""

from __future__ import annotations

from typing import Optional, Tuple, Union


class LiquidError(Exception):
    """
    Base class for all user-facing errors of the engine.
    """
    pass


class ParseError(LiquidError):
    """
    Malformed template markup.

    Raised at parse time; no partial template is ever returned together
    with this error.
    """

    def __init__(
        self,
        message: str,
        fragment: str = "",
        line: int = 0,
        column: int = 0,
    ):
        location = f" at {line}:{column}" if line else ""
        near = f" (near {fragment!r})" if fragment else ""
        super().__init__(f"{message}{location}{near}")
        self.message = message
        self.fragment = fragment
        self.line = line
        self.column = column


class ScanError(ParseError):
    """Unterminated delimiter, quote or bracket."""
    pass


class UnterminatedDelimiterError(ScanError):
    """An opening '{{' or '{%' without its closing marker."""
    pass


class UnknownTagError(ParseError):
    """A tag name that is not registered in the environment."""

    def __init__(self, tag_name: str, line: int = 0, column: int = 0):
        super().__init__(f"Unknown tag '{tag_name}'", tag_name, line, column)
        self.tag_name = tag_name


class UnbalancedTagError(ParseError):
    """A closing tag without an opener, or an opener that is never closed."""
    pass


Arity = Union[int, Tuple[int, int]]


class ArgumentError(LiquidError):
    """
    A filter was called with a wrong number of arguments.

    `expected` is either an exact count or an inclusive (min, max) range.
    """

    def __init__(self, filter_name: str, expected: Arity, actual: int):
        if isinstance(expected, tuple):
            wanted = f"{expected[0]} or {expected[1]} arguments"
        elif expected == 0:
            wanted = "no arguments"
        else:
            wanted = f"{expected} argument{'s' if expected != 1 else ''}"
        super().__init__(f"{filter_name} takes {wanted}, but was passed {actual}.")
        self.filter_name = filter_name
        self.expected = expected
        self.actual = actual


class UnknownFilterError(LiquidError):
    """A filter name that is not registered in the environment."""

    def __init__(self, filter_name: str):
        super().__init__(f"Unknown filter '{filter_name}'")
        self.filter_name = filter_name


class UndefinedError(LiquidError):
    """Missing variable or key; raised only when strict_variables is enabled."""

    def __init__(self, name: str):
        super().__init__(f"Undefined variable '{name}'")
        self.name = name


class TemplateRenderError(LiquidError):
    """Failure surfaced by the host binding (render_template)."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause


__all__ = [
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
