"""
Реестр тегов.

Отображает имя тега в конструктор (tag_name, markup) -> TagNode.
Блочные теги дополнительно объявляют имя закрывающего тега, по которому
парсер сопоставляет открытия и закрытия.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from ..nodes import TagNode

logger = logging.getLogger(__name__)

TagConstructor = Callable[..., TagNode]


@dataclass(frozen=True)
class TagSpec:
    """
    Спецификация тега для регистрации в парсере.
    """
    name: str                          # Имя тега (например, "capture")
    constructor: TagConstructor        # (tag_name, markup[, line, column]) -> TagNode
    end_name: Optional[str] = None     # Имя закрывающего тега для блочных тегов
    located: bool = False              # Конструктор принимает line и column разметки
    raw: bool = False                  # Тело блока пропускается без разбора

    @property
    def is_block(self) -> bool:
        return self.end_name is not None


class TagRegistry:
    """
    Реестр тегов одного окружения.
    """

    def __init__(self):
        self._tags: Dict[str, TagSpec] = {}
        # Имя закрывающего тега -> имя открывающего
        self._end_names: Dict[str, str] = {}

    def register(
        self,
        name: str,
        constructor: TagConstructor,
        block: bool = False,
        end_name: Optional[str] = None,
        located: bool = False,
        raw: bool = False,
    ) -> None:
        """
        Регистрирует тег. Повторная регистрация заменяет прежнюю.

        Args:
            name: Имя тега в шаблоне
            constructor: Конструктор узла тега (tag_name, markup)
            block: Тег открывает блок; закрывающее имя по умолчанию "end" + name
            end_name: Явное имя закрывающего тега (подразумевает block)
            located: Передавать конструктору ещё и line, column начала разметки,
                     чтобы ошибки разбора указывали позицию в шаблоне
            raw: Тело блока не разбирается, а пропускается до закрывающего
                 тега (подразумевает block)
        """
        if end_name is None and (block or raw):
            end_name = f"end{name}"

        if name in self._tags:
            logger.warning(f"Tag '{name}' overwrites existing tag")
            self.unregister(name)

        self._tags[name] = TagSpec(
            name=name,
            constructor=constructor,
            end_name=end_name,
            located=located,
            raw=raw,
        )
        if end_name is not None:
            self._end_names[end_name] = name

    def unregister(self, name: str) -> None:
        """Удаляет тег; отсутствующее имя игнорируется."""
        spec = self._tags.pop(name, None)
        if spec is not None and spec.end_name is not None:
            self._end_names.pop(spec.end_name, None)

    def get(self, name: str) -> Optional[TagSpec]:
        return self._tags.get(name)

    def opener_for(self, end_name: str) -> Optional[str]:
        """Возвращает имя открывающего тега для закрывающего или None."""
        return self._end_names.get(end_name)

    def __contains__(self, name: object) -> bool:
        return name in self._tags

    def names(self) -> List[str]:
        """Имена зарегистрированных тегов в алфавитном порядке."""
        return sorted(self._tags)


__all__ = ["TagRegistry", "TagSpec", "TagConstructor"]
