"""
Реестр фильтров.

Отображает имя фильтра в функцию (input, args) -> Value. Реестр
принадлежит окружению: его заполняют при настройке и только читают
во время рендеринга.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List

from ..errors import UnknownFilterError
from ..values import Value

logger = logging.getLogger(__name__)

FilterFunction = Callable[[Value, List[Value]], Value]


class FilterRegistry:
    """
    Реестр именованных фильтров одного окружения.
    """

    def __init__(self):
        self._filters: Dict[str, FilterFunction] = {}

    def register(self, name: str, func: FilterFunction) -> None:
        """
        Регистрирует фильтр. Повторная регистрация заменяет прежнюю.

        Args:
            name: Имя фильтра в шаблоне
            func: Функция (input, args) -> Value
        """
        if name in self._filters:
            logger.warning(f"Filter '{name}' overwrites existing filter")
        self._filters[name] = func

    def unregister(self, name: str) -> None:
        """Удаляет фильтр; отсутствующее имя игнорируется."""
        self._filters.pop(name, None)

    def get(self, name: str) -> FilterFunction:
        """
        Возвращает функцию фильтра.

        Raises:
            UnknownFilterError: Фильтр не зарегистрирован
        """
        try:
            return self._filters[name]
        except KeyError:
            raise UnknownFilterError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._filters

    def names(self) -> List[str]:
        """Имена зарегистрированных фильтров в алфавитном порядке."""
        return sorted(self._filters)


__all__ = ["FilterRegistry", "FilterFunction"]
