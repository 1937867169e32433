"""
Тег присваивания {% assign name = expression | filter %}.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..context import Context
from ..expression import Expression, FilterCall, apply_filters
from ..markup import MarkupParser
from ..nodes import TagNode


@dataclass(frozen=True)
class AssignTag(TagNode):
    """
    Записывает значение выражения (после фильтров) в область данных.

    Ничего не выводит; присвоенное значение видно последующим узлам
    того же рендеринга и следующим рендерингам с той же областью данных.
    """
    variable: str
    expression: Expression
    filters: Tuple[FilterCall, ...] = ()

    @classmethod
    def parse(cls, tag_name: str, markup: str, line: int = 1, column: int = 1) -> AssignTag:
        parser = MarkupParser(markup, line, column)
        name = parser.consume_identifier(f"Expected variable name after '{tag_name}'")
        parser.consume_symbol("=", f"Expected '=' after '{name.value}'")
        expression = parser.parse_expression()
        filters = parser.parse_filters()
        parser.expect_end()
        return cls(tag_name=tag_name, variable=name.value, expression=expression, filters=filters)

    def render(self, context: Context) -> str:
        value = apply_filters(self.expression.evaluate(context), self.filters, context)
        context.set(self.variable, value)
        return ""


__all__ = ["AssignTag"]
