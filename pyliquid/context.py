"""
Контекст рендеринга.

Связывает область данных (Value вида MAPPING) с реестром фильтров
окружения на время одного вызова render. Контекст ничем не владеет:
и данные, и реестр должны жить дольше рендеринга.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .errors import UndefinedError
from .expression import Expression, ExpressionKind
from .values import Value, ValueKind

if TYPE_CHECKING:
    from .filters.registry import FilterRegistry


class Context:
    """
    Контекст рендеринга шаблона.

    Stateful-теги изменяют элементы области данных напрямую, поэтому
    повторный рендеринг с той же областью данных видит их состояние.
    Контекст не синхронизирован: одновременные рендеринги с общей
    областью данных требуют внешней блокировки.
    """

    def __init__(self, data: Value, filters: FilterRegistry, strict_variables: bool = False):
        """
        Инициализирует контекст.

        Args:
            data: Корневая область данных (Value вида MAPPING)
            filters: Реестр фильтров окружения
            strict_variables: Отсутствующий ключ — ошибка, а не nil
        """
        if data.kind is not ValueKind.MAPPING:
            raise TypeError(f"Data scope must be a mapping, got {data.kind.value}")
        self.data = data
        self.filters = filters
        self.strict_variables = strict_variables

    # --- Доступ к области данных ---

    def get(self, name: str) -> Optional[Value]:
        """Возвращает элемент области данных или None."""
        return self.data.payload.get(name)

    def set(self, name: str, value: Value) -> None:
        """Записывает элемент области данных (используется stateful-тегами)."""
        self.data.payload[name] = value

    def resolve(self, expression: Expression) -> Value:
        """
        Вычисляет цепочку поиска.

        Сегменты LookupKey дают статический ключ, LookupBracketKey —
        ключ, вычисленный вложенным выражением. Отсутствующий ключ даёт nil,
        а в строгом режиме — UndefinedError.
        """
        current = self.data
        for index, segment in enumerate(expression.lookups):
            if segment.kind is ExpressionKind.LOOKUP_KEY:
                key = Value.string(segment.literal)
            else:
                key = segment.key_expression.evaluate(self)

            found = current.lookup(key)
            if found is None:
                if self.strict_variables:
                    raise UndefinedError(_describe_path(expression, index))
                return Value.nil()
            current = found
        return current


def _describe_path(expression: Expression, upto: int) -> str:
    partial = Expression.lookup(*expression.lookups[:upto + 1])
    return str(partial)


__all__ = ["Context"]
