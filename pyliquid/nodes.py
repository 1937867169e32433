"""
Узлы AST шаблона.

Неизменяемая иерархия узлов: текст, вывод объекта и теги.
Единственная обязательная возможность узла — render(context) -> str.
Узлы не хранят состояние рендеринга: всё состояние живёт в области
данных контекста.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Iterable, Tuple

from .context import Context
from .expression import Expression, FilterCall, apply_filters


@dataclass(frozen=True)
class Node(ABC):
    """Базовый класс для всех узлов AST шаблона."""

    @abstractmethod
    def render(self, context: Context) -> str:
        pass


@dataclass(frozen=True)
class TextNode(Node):
    """
    Обычный текстовый контент в шаблоне.

    Выводится в результат как есть.
    """
    text: str

    def render(self, context: Context) -> str:
        return self.text


@dataclass(frozen=True)
class ObjectNode(Node):
    """
    Вывод объекта {{ expression | filter: arg }}.

    Значение выражения последовательно проходит через фильтры,
    результат выводится через строковое преобразование.
    """
    expression: Expression
    filters: Tuple[FilterCall, ...] = ()

    def render(self, context: Context) -> str:
        value = self.expression.evaluate(context)
        return apply_filters(value, self.filters, context).to_string()


@dataclass(frozen=True)
class TagNode(Node):
    """
    Базовый класс тегов {% name markup %}.

    Конкретные теги создаются конструкторами из реестра тегов
    и сами разбирают свою разметку.
    """
    tag_name: str


@dataclass(frozen=True)
class BlockTagNode(TagNode):
    """
    Блочный тег: {% name %} ... {% endname %}.

    Тело заполняется парсером после разбора вложенных узлов.
    """
    body: Tuple[Node, ...]

    def with_body(self, nodes: Iterable[Node]) -> BlockTagNode:
        """Возвращает копию узла с заданным телом."""
        return replace(self, body=tuple(nodes))

    def render_body(self, context: Context) -> str:
        return render_nodes(self.body, context)


# Алиас для последовательности узлов (AST)
TemplateAST = Tuple[Node, ...]


def render_nodes(nodes: Iterable[Node], context: Context) -> str:
    """Рендерит последовательность узлов по порядку и склеивает вывод."""
    return "".join([node.render(context) for node in nodes])


__all__ = [
    "Node",
    "TextNode",
    "ObjectNode",
    "TagNode",
    "BlockTagNode",
    "TemplateAST",
    "render_nodes",
]
