"""
Теги-счётчики {% decrement name %} и {% increment name %}.

Счётчик хранится в области данных под своим именем, поэтому
повторный рендеринг с той же областью данных продолжает счёт,
а новая область данных начинает его с нуля.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..context import Context
from ..markup import MarkupParser
from ..nodes import TagNode
from ..values import Value


def _parse_counter_name(tag_name: str, markup: str, line: int, column: int) -> str:
    parser = MarkupParser(markup, line, column)
    name = parser.consume_identifier(f"Expected variable name after '{tag_name}'")
    parser.expect_end()
    return name.value


def _current(context: Context, name: str) -> int:
    value = context.get(name)
    return value.to_int() if value is not None else 0


@dataclass(frozen=True)
class DecrementTag(TagNode):
    """Уменьшает счётчик и выводит новое значение: -1, -2, -3, ..."""
    variable: str

    @classmethod
    def parse(cls, tag_name: str, markup: str, line: int = 1, column: int = 1) -> DecrementTag:
        return cls(tag_name=tag_name, variable=_parse_counter_name(tag_name, markup, line, column))

    def render(self, context: Context) -> str:
        value = _current(context, self.variable) - 1
        context.set(self.variable, Value.integer(value))
        return str(value)


@dataclass(frozen=True)
class IncrementTag(TagNode):
    """Выводит текущее значение счётчика и увеличивает его: 0, 1, 2, ..."""
    variable: str

    @classmethod
    def parse(cls, tag_name: str, markup: str, line: int = 1, column: int = 1) -> IncrementTag:
        return cls(tag_name=tag_name, variable=_parse_counter_name(tag_name, markup, line, column))

    def render(self, context: Context) -> str:
        value = _current(context, self.variable)
        context.set(self.variable, Value.integer(value + 1))
        return str(value)


__all__ = ["DecrementTag", "IncrementTag"]
