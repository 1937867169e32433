"""
Грамматика содержимого разделителей.

Лексер разметки разбивает текст внутри {{ ... }} и {% ... %} на значимые
элементы, а парсер с рекурсивным спуском строит из них выражения
и цепочки фильтров.

Грамматика:
output       → expression filter*
filter       → "|" IDENTIFIER (":" expression ("," expression)*)?
expression   → STRING | INTEGER | FLOAT | keyword | lookup
keyword      → "true" | "false" | "nil" | "null"
lookup       → (IDENTIFIER | bracket) ("." IDENTIFIER | bracket)*
bracket      → "[" expression "]"
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Tuple

from .errors import ParseError, ScanError
from .expression import Expression, FilterCall


@dataclass(frozen=True)
class MarkupToken:
    """
    Токен разметки.

    Attributes:
        type: Тип токена (STRING, INTEGER, FLOAT, IDENTIFIER, SYMBOL, EOF)
        value: Значение токена
        position: Смещение в строке разметки
    """
    type: str
    value: str
    position: int

    def __repr__(self):
        return f"MarkupToken({self.type}, '{self.value}', pos={self.position})"


class MarkupLexer:
    """
    Лексер для разбиения разметки на токены.
    """

    # Спецификация токенов: (regex_pattern, token_type, ignore_flag)
    TOKEN_SPECS = [
        # Пробельные символы (игнорируем)
        (r'\s+', 'WHITESPACE', True),

        # Строки в двойных или одинарных кавычках, без escape-последовательностей
        (r'"[^"]*"|\'[^\']*\'', 'STRING', False),
        (r'["\']', 'UNTERMINATED', False),

        # Числа: наличие точки отличает FLOAT от INTEGER
        (r'-?\d+\.\d+', 'FLOAT', False),
        (r'-?\d+', 'INTEGER', False),

        (r'[A-Za-z_][\w-]*\??', 'IDENTIFIER', False),

        (r'[.\[\]|:,=]', 'SYMBOL', False),

        # Неизвестный символ (ошибка)
        (r'.', 'UNKNOWN', False),
    ]

    def __init__(self):
        self._compiled_patterns = [
            (re.compile(pattern, re.DOTALL), token_type, ignore)
            for pattern, token_type, ignore in self.TOKEN_SPECS
        ]

    def tokenize(self, text: str) -> List[MarkupToken]:
        """
        Разбивает разметку на токены, включая EOF в конце.

        Raises:
            ScanError: Незакрытая кавычка
            ParseError: Неизвестный символ
        """
        tokens: List[MarkupToken] = []
        position = 0

        while position < len(text):
            for pattern, token_type, ignore in self._compiled_patterns:
                match = pattern.match(text, position)
                if not match:
                    continue
                value = match.group(0)
                if token_type == 'UNTERMINATED':
                    raise _LocatedError(ScanError, "Unterminated string", text[position:], position)
                if token_type == 'UNKNOWN':
                    raise _LocatedError(ParseError, f"Unexpected character '{value}'", value, position)
                if not ignore:
                    tokens.append(MarkupToken(token_type, value, position))
                position = match.end()
                break

        tokens.append(MarkupToken('EOF', '', position))
        return tokens


class _LocatedError(Exception):
    """Ошибка лексера до привязки к позиции в шаблоне."""

    def __init__(self, error_class, message: str, fragment: str, position: int):
        super().__init__(message)
        self.error_class = error_class
        self.message = message
        self.fragment = fragment
        self.position = position


KEYWORDS = {
    "true": Expression.boolean(True),
    "false": Expression.boolean(False),
    "nil": Expression.nil(),
    "null": Expression.nil(),
}

_lexer = MarkupLexer()

# Максимальная вложенность скобочных ключей a[b[c]]
MAX_LOOKUP_DEPTH = 100


class MarkupParser:
    """
    Парсер разметки с рекурсивным спуском.

    Позиции ошибок пересчитываются в строку/колонку шаблона
    относительно начала разметки (line, column).
    """

    def __init__(self, markup: str, line: int = 1, column: int = 1):
        self.markup = markup
        self.line = line
        self.column = column
        try:
            self._tokens = _lexer.tokenize(markup)
        except _LocatedError as e:
            raise self._error(e.error_class, e.message, e.fragment, e.position) from None
        self._position = 0
        self._depth = 0

    # --- Грамматика ---

    def parse_expression(self) -> Expression:
        """Парсит одно выражение: литерал или цепочку поиска."""
        current = self._current_token()

        if current.type == 'STRING':
            self._advance()
            return Expression.string(current.value[1:-1])

        if current.type == 'INTEGER':
            self._advance()
            try:
                number = int(current.value)
            except ValueError:
                # Превышен предел длины при преобразовании строки в int
                raise self.error("Integer literal too long", current) from None
            return Expression.integer(number)

        if current.type == 'FLOAT':
            self._advance()
            return Expression.floating(float(current.value))

        if current.type == 'IDENTIFIER':
            keyword = KEYWORDS.get(current.value)
            if keyword is not None:
                self._advance()
                return keyword
            self._advance()
            return self._parse_lookup_tail([Expression.key(current.value)])

        if self._check_symbol("["):
            return self._parse_lookup_tail([])

        if current.type == 'EOF':
            raise self.error("Expected expression", current)
        raise self.error(f"Unexpected token '{current.value}'", current)

    def _parse_lookup_tail(self, segments: List[Expression]) -> Expression:
        """Парсит сегменты .key и [expr] после корня цепочки."""
        while True:
            if self._match_symbol("."):
                name = self.consume_identifier("Expected property name after '.'")
                segments.append(Expression.key(name.value))
            elif self._check_symbol("["):
                opening = self._advance()
                if self._depth >= MAX_LOOKUP_DEPTH:
                    raise self.error("Nesting too deep", opening)
                self._depth += 1
                inner = self.parse_expression()
                self._depth -= 1
                if not self._match_symbol("]"):
                    current = self._current_token()
                    if current.type == 'EOF':
                        raise self.error("Unterminated '['", opening, error_class=ScanError)
                    raise self.error(f"Expected ']', got '{current.value}'", current)
                segments.append(Expression.bracket_key(inner))
            else:
                return Expression.lookup(*segments)

    def parse_filters(self) -> Tuple[FilterCall, ...]:
        """Парсит цепочку | name: arg, arg ..."""
        filters: List[FilterCall] = []
        while self._match_symbol("|"):
            name = self.consume_identifier("Expected filter name after '|'")
            args: List[Expression] = []
            if self._match_symbol(":"):
                args.append(self.parse_expression())
                while self._match_symbol(","):
                    args.append(self.parse_expression())
            filters.append(FilterCall(name.value, tuple(args)))
        return tuple(filters)

    def parse_output(self) -> Tuple[Expression, Tuple[FilterCall, ...]]:
        """Парсит содержимое объекта: выражение и фильтры до конца разметки."""
        if self.is_at_end():
            raise self.error("Empty output expression", self._current_token())
        expression = self.parse_expression()
        filters = self.parse_filters()
        self.expect_end()
        return expression, filters

    # --- Вспомогательные методы для работы с токенами ---

    def expect_end(self) -> None:
        """Проверяет, что вся разметка разобрана."""
        if not self.is_at_end():
            current = self._current_token()
            raise self.error(f"Unexpected token '{current.value}'", current)

    def is_at_end(self) -> bool:
        return self._current_token().type == 'EOF'

    def consume_identifier(self, error_message: str) -> MarkupToken:
        """Потребляет идентификатор или выбрасывает ошибку."""
        current = self._current_token()
        if current.type == 'IDENTIFIER':
            return self._advance()
        raise self.error(error_message, current)

    def consume_symbol(self, symbol: str, error_message: str) -> MarkupToken:
        current = self._current_token()
        if self._check_symbol(symbol):
            return self._advance()
        raise self.error(error_message, current)

    def _current_token(self) -> MarkupToken:
        return self._tokens[self._position]

    def _advance(self) -> MarkupToken:
        current = self._tokens[self._position]
        if current.type != 'EOF':
            self._position += 1
        return current

    def _check_symbol(self, symbol: str) -> bool:
        current = self._current_token()
        return current.type == 'SYMBOL' and current.value == symbol

    def _match_symbol(self, symbol: str) -> bool:
        if self._check_symbol(symbol):
            self._advance()
            return True
        return False

    def error(self, message: str, token: MarkupToken, error_class=ParseError) -> ParseError:
        fragment = token.value or self.markup.strip()
        return self._error(error_class, message, fragment, token.position)

    def _error(self, error_class, message: str, fragment: str, offset: int) -> ParseError:
        line, column = locate_offset(self.markup, offset, self.line, self.column)
        return error_class(message, fragment, line, column)


def locate_offset(text: str, offset: int, line: int, column: int) -> Tuple[int, int]:
    """Пересчитывает смещение в разметке в строку/колонку шаблона."""
    before = text[:offset]
    newlines = before.count("\n")
    if newlines:
        return line + newlines, len(before) - before.rfind("\n")
    return line, column + offset


def parse_expression(markup: str, line: int = 1, column: int = 1) -> Expression:
    """
    Разбирает ровно одно выражение.

    Raises:
        ParseError: Разметка не является выражением
    """
    parser = MarkupParser(markup, line, column)
    expression = parser.parse_expression()
    parser.expect_end()
    return expression


def parse_output(
    markup: str, line: int = 1, column: int = 1
) -> Tuple[Expression, Tuple[FilterCall, ...]]:
    """Разбирает выражение с цепочкой фильтров."""
    return MarkupParser(markup, line, column).parse_output()


__all__ = [
    "MarkupToken",
    "MarkupLexer",
    "MarkupParser",
    "KEYWORDS",
    "parse_expression",
    "parse_output",
    "locate_offset",
]
