"""
Выражения шаблона.

Expression — неизменяемый узел AST: литерал или цепочка поиска
(a.b[c.d]). Создаётся один раз при парсинге и вычисляется при каждом
рендеринге относительно области данных контекста.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Tuple

from .values import Value

if TYPE_CHECKING:
    from .context import Context


class ExpressionKind(enum.Enum):
    """Виды выражений."""
    NIL = "Nil"
    STRING = "String"
    INT = "NumberInt"
    FLOAT = "NumberFloat"
    TRUE = "BooleanTrue"
    FALSE = "BooleanFalse"
    LOOKUP = "Lookup"
    LOOKUP_KEY = "LookupKey"
    LOOKUP_BRACKET_KEY = "LookupBracketKey"


_LITERAL_KINDS = frozenset({
    ExpressionKind.NIL,
    ExpressionKind.STRING,
    ExpressionKind.INT,
    ExpressionKind.FLOAT,
    ExpressionKind.TRUE,
    ExpressionKind.FALSE,
})


@dataclass(frozen=True)
class Expression:
    """
    Выражение с структурным равенством (вид + литерал + сегменты).

    Attributes:
        kind: Вид выражения
        literal: Значение литерала или имя ключа для LOOKUP_KEY
        lookups: Сегменты цепочки поиска для LOOKUP
        key_expression: Вложенное выражение для LOOKUP_BRACKET_KEY
    """
    kind: ExpressionKind
    literal: Any = None
    lookups: Tuple[Expression, ...] = ()
    key_expression: Optional[Expression] = None

    # --- Конструкторы ---

    @classmethod
    def nil(cls) -> Expression:
        return cls(ExpressionKind.NIL)

    @classmethod
    def string(cls, text: str) -> Expression:
        return cls(ExpressionKind.STRING, text)

    @classmethod
    def integer(cls, number: int) -> Expression:
        return cls(ExpressionKind.INT, number)

    @classmethod
    def floating(cls, number: float) -> Expression:
        return cls(ExpressionKind.FLOAT, number)

    @classmethod
    def boolean(cls, flag: bool) -> Expression:
        return cls(ExpressionKind.TRUE if flag else ExpressionKind.FALSE)

    @classmethod
    def key(cls, name: str) -> Expression:
        return cls(ExpressionKind.LOOKUP_KEY, name)

    @classmethod
    def bracket_key(cls, inner: Expression) -> Expression:
        return cls(ExpressionKind.LOOKUP_BRACKET_KEY, key_expression=inner)

    @classmethod
    def lookup(cls, *segments: Expression) -> Expression:
        return cls(ExpressionKind.LOOKUP, lookups=tuple(segments))

    @classmethod
    def parse(cls, markup: str) -> Expression:
        """Разбирает ровно одно выражение из строки разметки."""
        from .markup import parse_expression
        return parse_expression(markup)

    # --- Свойства ---

    @property
    def is_literal(self) -> bool:
        return self.kind in _LITERAL_KINDS

    @property
    def is_lookup(self) -> bool:
        return self.kind is ExpressionKind.LOOKUP

    # --- Вычисление ---

    def literal_value(self) -> Value:
        """Значение литерала (без контекста)."""
        kind = self.kind
        if kind is ExpressionKind.NIL:
            return Value.nil()
        if kind is ExpressionKind.STRING:
            return Value.string(self.literal)
        if kind is ExpressionKind.INT:
            return Value.integer(self.literal)
        if kind is ExpressionKind.FLOAT:
            return Value.floating(self.literal)
        if kind is ExpressionKind.TRUE:
            return Value.boolean(True)
        if kind is ExpressionKind.FALSE:
            return Value.boolean(False)
        raise TypeError(f"{kind.value} expression has no literal value")

    def evaluate(self, context: Context) -> Value:
        """
        Вычисляет выражение относительно области данных контекста.

        Raises:
            UndefinedError: Отсутствующий ключ в строгом режиме
        """
        if self.kind is ExpressionKind.LOOKUP:
            return context.resolve(self)
        if self.kind is ExpressionKind.LOOKUP_KEY:
            return Value.string(self.literal)
        if self.kind is ExpressionKind.LOOKUP_BRACKET_KEY:
            return self.key_expression.evaluate(context)
        return self.literal_value()

    def __str__(self) -> str:
        kind = self.kind
        if kind is ExpressionKind.NIL:
            return "nil"
        if kind is ExpressionKind.STRING:
            quote = "'" if '"' in self.literal else '"'
            return f"{quote}{self.literal}{quote}"
        if kind in (ExpressionKind.INT, ExpressionKind.FLOAT):
            return repr(self.literal)
        if kind is ExpressionKind.TRUE:
            return "true"
        if kind is ExpressionKind.FALSE:
            return "false"
        if kind is ExpressionKind.LOOKUP_KEY:
            return self.literal
        if kind is ExpressionKind.LOOKUP_BRACKET_KEY:
            return f"[{self.key_expression}]"
        parts = []
        for i, segment in enumerate(self.lookups):
            if segment.kind is ExpressionKind.LOOKUP_KEY and i > 0:
                parts.append(".")
            parts.append(str(segment))
        return "".join(parts)


@dataclass(frozen=True)
class FilterCall:
    """
    Один шаг цепочки фильтров: | name: arg, arg
    """
    name: str
    args: Tuple[Expression, ...] = ()

    def apply(self, value: Value, context: Context) -> Value:
        """
        Применяет фильтр к значению.

        Raises:
            UnknownFilterError: Фильтр не зарегистрирован
            ArgumentError: Неверное число аргументов
        """
        args = [arg.evaluate(context) for arg in self.args]
        return context.filters.get(self.name)(value, args)

    def __str__(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name}: " + ", ".join(str(arg) for arg in self.args)


def apply_filters(value: Value, filters: Tuple[FilterCall, ...], context: Context) -> Value:
    """Применяет цепочку фильтров слева направо."""
    for call in filters:
        value = call.apply(value, context)
    return value


__all__ = ["ExpressionKind", "Expression", "FilterCall", "apply_filters"]
