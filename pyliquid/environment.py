"""
Окружение и шаблон.

Публичный API, объединяющий все компоненты движка: лексер, парсер,
реестры фильтров и тегов. Реестры принадлежат экземпляру Environment,
поэтому независимые окружения с разными фильтрами могут сосуществовать.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .config import EngineConfig, load_config
from .context import Context
from .filters import FilterFunction, FilterRegistry, register_standard_filters
from .lexer import TemplateLexer
from .nodes import TemplateAST, render_nodes
from .parser import TemplateParser
from .tags import TagConstructor, TagRegistry, register_standard_tags
from .values import Value, ValueKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Template:
    """
    Скомпилированный шаблон: неизменяемое дерево узлов.

    Шаблоны сравниваются структурно по дереву узлов.
    """
    nodes: TemplateAST
    environment: Environment = field(compare=False, repr=False)

    def render(self, data: Any = None) -> str:
        """
        Рендерит шаблон.

        Args:
            data: Область данных: Value вида MAPPING, dict или None.
                  Состояние stateful-тегов переносится между рендерингами
                  только при повторной передаче того же Value; dict
                  каждый раз преобразуется в новую область данных.

        Одно дерево можно рендерить параллельно из разных потоков, если
        у каждого рендеринга своя область данных. Общая область данных
        требует внешней блокировки.

        Raises:
            LiquidError: Ошибка рендеринга; частичный вывод не возвращается
        """
        return self.environment.render(self, data)


class Environment:
    """
    Окружение движка шаблонов.

    Создаётся один раз при настройке; во время рендеринга реестры
    только читаются.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """
        Инициализирует окружение со стандартными фильтрами и тегами.

        Args:
            config: Настройки; по умолчанию EngineConfig()
        """
        self.config = config or EngineConfig()

        self.filters = FilterRegistry()
        register_standard_filters(self.filters)
        for name in self.config.disabled_filters:
            self.filters.unregister(name)

        self.tags = TagRegistry()
        register_standard_tags(self.tags)
        for name in self.config.disabled_tags:
            self.tags.unregister(name)

    @classmethod
    def from_config_file(cls, path: Path) -> Environment:
        """Создаёт окружение из YAML-файла настроек."""
        return cls(load_config(path))

    # --- Регистрация ---

    def register_filter(self, name: str, func: FilterFunction) -> None:
        """Регистрирует фильтр; повторная регистрация заменяет прежнюю."""
        self.filters.register(name, func)

    def register_tag(
        self,
        name: str,
        constructor: TagConstructor,
        block: bool = False,
        end_name: Optional[str] = None,
        located: bool = False,
        raw: bool = False,
    ) -> None:
        """
        Регистрирует тег с конструктором (tag_name, markup) -> TagNode.

        Блочные теги закрываются тегом end_name ("end" + name). С located=True
        конструктор дополнительно получает line и column начала разметки;
        raw=True пропускает тело блока без разбора.
        """
        self.tags.register(
            name, constructor, block=block, end_name=end_name, located=located, raw=raw
        )

    # --- Парсинг и рендеринг ---

    def parse(self, source: str) -> Template:
        """
        Компилирует исходный текст в шаблон.

        Raises:
            ParseError: При ошибке разбора; частичное дерево не возвращается
        """
        tokens = TemplateLexer(source).tokens()
        nodes = TemplateParser(tokens, self.tags).parse()
        logger.debug("Compiled template (%d chars, %d nodes)", len(source), len(nodes))
        return Template(nodes=nodes, environment=self)

    def make_context(self, data: Any = None) -> Context:
        """
        Создаёт контекст рендеринга для области данных.

        Raises:
            TypeError: Область данных не является словарём
        """
        if data is None:
            scope = Value.mapping()
        elif isinstance(data, Value):
            scope = data
        else:
            scope = Value.from_native(data)
        if scope.kind is not ValueKind.MAPPING:
            raise TypeError(f"Data scope must be a mapping, got {scope.kind.value}")
        return Context(scope, self.filters, strict_variables=self.config.strict_variables)

    def render(self, template: Template, data: Any = None) -> str:
        """Рендерит шаблон в строку."""
        return render_nodes(template.nodes, self.make_context(data))

    def render_source(self, source: str, data: Any = None) -> str:
        """Компилирует и сразу рендерит исходный текст."""
        return self.render(self.parse(source), data)


__all__ = ["Environment", "Template"]
