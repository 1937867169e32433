"""
Парсер шаблонов.

Преобразует последовательность токенов в AST (кортеж узлов) рекурсивным
спуском: текст, объекты {{ ... }} с цепочками фильтров и теги {% ... %},
включая блочные теги с проверкой парности.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Iterator, List, Optional, Tuple

from .errors import ParseError, UnbalancedTagError, UnknownTagError
from .lexer import Token, TokenType
from .markup import MarkupParser, locate_offset, parse_output
from .nodes import BlockTagNode, Node, ObjectNode, TemplateAST, TextNode
from .tags.registry import TagRegistry, TagSpec

logger = logging.getLogger(__name__)

_TAG_NAME = re.compile(r"\s*([A-Za-z_]\w*)")

# Максимальная вложенность блочных тегов
MAX_BLOCK_DEPTH = 100


class TemplateParser:
    """
    Рекурсивный парсер для шаблонов.

    Потребляет токены лениво, по одному. Открытые блочные теги хранятся
    на стеке: закрывающий тег закрывает самый внутренний незакрытый
    блок своего семейства.
    """

    def __init__(self, tokens: Iterable[Token], tags: TagRegistry):
        self._tokens: Iterator[Token] = iter(tokens)
        self._current: Optional[Token] = None
        self.tags = tags
        # Стек открытых блоков: (спецификация тега, токен открытия)
        self._block_stack: List[Tuple[TagSpec, Token]] = []

    def parse(self) -> TemplateAST:
        """
        Парсит всю последовательность токенов в AST.

        Returns:
            Кортеж корневых узлов

        Raises:
            ParseError: При ошибке синтаксического анализа
        """
        self._current = next(self._tokens)
        nodes = self._parse_nodes()
        logger.debug("Parsed template into %d top-level nodes", len(nodes))
        return tuple(nodes)

    def _parse_nodes(self) -> List[Node]:
        """
        Парсит узлы до конца входа или до закрывающего тега текущего блока.
        """
        nodes: List[Node] = []

        while True:
            current = self._current_token()

            if current.type == TokenType.EOF:
                if self._block_stack:
                    spec, opener = self._block_stack[-1]
                    raise UnbalancedTagError(
                        f"'{spec.name}' tag was never closed (expected '{spec.end_name}')",
                        spec.name, opener.line, opener.column
                    )
                return nodes

            if current.type == TokenType.TEXT:
                self._advance()
                nodes.append(TextNode(text=current.value))
            elif current.type == TokenType.OBJECT_START:
                nodes.append(self._parse_object())
            elif current.type == TokenType.TAG_START:
                node = self._parse_tag()
                if node is None:
                    # Закрывающий тег текущего блока
                    return nodes
                nodes.append(node)
            else:
                raise ParseError(
                    f"Unexpected token: {current.type.name}",
                    current.value, current.line, current.column
                )

    def _parse_object(self) -> ObjectNode:
        """Парсит объект {{ expression | filter: arg }}."""
        self._consume(TokenType.OBJECT_START)
        content = self._consume(TokenType.TEXT)
        self._consume(TokenType.OBJECT_END)

        expression, filters = parse_output(content.value, content.line, content.column)
        return ObjectNode(expression=expression, filters=filters)

    def _parse_tag(self) -> Optional[Node]:
        """
        Парсит тег {% name markup %}.

        Returns:
            Узел тега или None, если это закрывающий тег текущего блока
        """
        start = self._consume(TokenType.TAG_START)
        content = self._consume(TokenType.TEXT)
        self._consume(TokenType.TAG_END)

        name, markup, markup_line, markup_column = self._split_tag(start, content)

        # Закрывающий тег блока
        opener_name = self.tags.opener_for(name)
        if opener_name is not None and name not in self.tags:
            self._close_block(name, start)
            MarkupParser(markup, markup_line, markup_column).expect_end()
            return None

        spec = self.tags.get(name)
        if spec is None:
            raise UnknownTagError(name, start.line, start.column)

        if spec.located:
            node = spec.constructor(name, markup, markup_line, markup_column)
        else:
            node = spec.constructor(name, markup)

        if spec.is_block:
            if not isinstance(node, BlockTagNode):
                raise TypeError(
                    f"Block tag '{name}' must build a BlockTagNode, got {type(node).__name__}"
                )
            if len(self._block_stack) >= MAX_BLOCK_DEPTH:
                raise ParseError("Nesting too deep", name, start.line, start.column)
            if spec.raw:
                self._skip_raw_body(spec, start)
                return node
            self._block_stack.append((spec, start))
            body = self._parse_nodes()
            self._block_stack.pop()
            node = node.with_body(body)

        return node

    def _split_tag(self, start: Token, content: Token) -> Tuple[str, str, int, int]:
        """Отделяет имя тега от разметки и вычисляет позицию разметки."""
        match = _TAG_NAME.match(content.value)
        if not match:
            fragment = content.value.strip()
            message = "Empty tag" if not fragment else "Expected tag name"
            raise ParseError(message, fragment, start.line, start.column)

        markup_line, markup_column = locate_offset(
            content.value, match.end(), content.line, content.column
        )
        return match.group(1), content.value[match.end():], markup_line, markup_column

    def _skip_raw_body(self, spec: TagSpec, opener: Token) -> None:
        """
        Пропускает тело блока до первого закрывающего тега без разбора:
        теги и объекты внутри не проверяются.
        """
        while True:
            current = self._current_token()
            if current.type == TokenType.EOF:
                raise UnbalancedTagError(
                    f"'{spec.name}' tag was never closed (expected '{spec.end_name}')",
                    spec.name, opener.line, opener.column
                )
            if current.type != TokenType.TAG_START:
                self._advance()
                continue

            self._consume(TokenType.TAG_START)
            content = self._consume(TokenType.TEXT)
            self._consume(TokenType.TAG_END)
            match = _TAG_NAME.match(content.value)
            if match and match.group(1) == spec.end_name:
                markup_line, markup_column = locate_offset(
                    content.value, match.end(), content.line, content.column
                )
                MarkupParser(content.value[match.end():], markup_line, markup_column).expect_end()
                return

    def _close_block(self, end_name: str, token: Token) -> None:
        """Проверяет, что закрывающий тег соответствует самому внутреннему блоку."""
        if not self._block_stack:
            raise UnbalancedTagError(
                f"Unexpected '{end_name}' with no matching opener",
                end_name, token.line, token.column
            )
        spec, _ = self._block_stack[-1]
        if spec.end_name != end_name:
            raise UnbalancedTagError(
                f"'{end_name}' does not close '{spec.name}' (expected '{spec.end_name}')",
                end_name, token.line, token.column
            )

    # --- Вспомогательные методы для работы с токенами ---

    def _current_token(self) -> Token:
        assert self._current is not None
        return self._current

    def _advance(self) -> Token:
        """Продвигается к следующему токену и возвращает предыдущий."""
        current = self._current_token()
        if current.type != TokenType.EOF:
            self._current = next(self._tokens)
        return current

    def _consume(self, expected_type: TokenType) -> Token:
        """
        Потребляет токен ожидаемого типа.

        Raises:
            ParseError: Если токен не соответствует ожидаемому типу
        """
        current = self._current_token()
        if current.type != expected_type:
            raise ParseError(
                f"Expected {expected_type.name}, got {current.type.name}",
                current.value, current.line, current.column
            )
        return self._advance()


def parse_tokens(tokens: Iterable[Token], tags: TagRegistry) -> TemplateAST:
    """
    Удобная функция для парсинга токенов.

    Raises:
        ParseError: При ошибке синтаксического анализа
    """
    return TemplateParser(tokens, tags).parse()


__all__ = ["TemplateParser", "parse_tokens"]
