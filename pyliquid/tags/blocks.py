"""
Блочные теги {% capture %} и {% comment %}.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..context import Context
from ..markup import MarkupParser
from ..nodes import BlockTagNode
from ..values import Value


@dataclass(frozen=True)
class CaptureTag(BlockTagNode):
    """
    {% capture name %} ... {% endcapture %}

    Рендерит тело и сохраняет результат строкой в области данных.
    Сам ничего не выводит.
    """
    variable: str

    @classmethod
    def parse(cls, tag_name: str, markup: str, line: int = 1, column: int = 1) -> CaptureTag:
        parser = MarkupParser(markup, line, column)
        name = parser.consume_identifier(f"Expected variable name after '{tag_name}'")
        parser.expect_end()
        return cls(tag_name=tag_name, body=(), variable=name.value)

    def render(self, context: Context) -> str:
        context.set(self.variable, Value.string(self.render_body(context)))
        return ""


@dataclass(frozen=True)
class CommentTag(BlockTagNode):
    """
    {% comment %} ... {% endcomment %}

    Регистрируется как raw-блок: парсер пропускает тело, не разбирая его,
    поэтому тело всегда пустое.
    """

    @classmethod
    def parse(cls, tag_name: str, markup: str, line: int = 1, column: int = 1) -> CommentTag:
        return cls(tag_name=tag_name, body=())

    def render(self, context: Context) -> str:
        return ""


__all__ = ["CaptureTag", "CommentTag"]
