"""
Лексический анализатор шаблонов.

Разбивает исходный текст шаблона на последовательность токенов:
обычный текст, объекты {{ ... }} и теги {% ... %}.
Содержимое разделителей отдаётся как TEXT без изменений — его
разбирают грамматики парсера (см. markup.py).
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Iterator, List

from .errors import UnterminatedDelimiterError


class TokenType(enum.Enum):
    """Типы токенов в шаблоне."""

    # Текстовый контент (в том числе содержимое разделителей)
    TEXT = "TEXT"

    # Разделители объектов
    OBJECT_START = "OBJECT_START"  # {{
    OBJECT_END = "OBJECT_END"      # }}

    # Разделители тегов
    TAG_START = "TAG_START"        # {%
    TAG_END = "TAG_END"            # %}

    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """
    Токен с позиционной информацией для точной диагностики ошибок.
    """
    type: TokenType
    value: str
    position: int        # Позиция в исходном тексте
    line: int            # Номер строки (начиная с 1)
    column: int          # Номер колонки (начиная с 1)

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


# Открывающий разделитель -> (тип открытия, закрывающая последовательность, тип закрытия)
_DELIMITERS = {
    "{{": (TokenType.OBJECT_START, "}}", TokenType.OBJECT_END),
    "{%": (TokenType.TAG_START, "%}", TokenType.TAG_END),
}

_OPEN_PATTERN = re.compile(r"\{\{|\{%")


class TemplateLexer:
    """
    Лексический анализатор шаблонов.

    Один линейный проход слева направо без возвратов. Последовательность
    токенов ленивая: каждый вызов tokens() заново сканирует исходник,
    состояние сканирования не хранится в экземпляре.
    """

    def __init__(self, text: str):
        self.text = text
        self.length = len(text)

    def tokens(self) -> Iterator[Token]:
        """
        Лениво выдаёт токены шаблона, последним — EOF.

        Raises:
            UnterminatedDelimiterError: Открывающий разделитель без закрывающего
        """
        text = self.text
        position = 0
        line = 1
        column = 1

        def make(token_type: TokenType, value: str) -> Token:
            return Token(token_type, value, position, line, column)

        def advance(chunk: str) -> None:
            nonlocal position, line, column
            position += len(chunk)
            newlines = chunk.count("\n")
            if newlines:
                line += newlines
                column = len(chunk) - chunk.rfind("\n")
            else:
                column += len(chunk)

        while position < self.length:
            match = _OPEN_PATTERN.search(text, position)

            # Текст до следующего разделителя (или до конца)
            text_end = match.start() if match else self.length
            if text_end > position:
                chunk = text[position:text_end]
                yield make(TokenType.TEXT, chunk)
                advance(chunk)

            if match is None:
                break

            opener = match.group(0)
            start_type, closer, end_type = _DELIMITERS[opener]
            close_at = text.find(closer, match.end())
            if close_at < 0:
                snippet = text[match.start():match.start() + 20]
                raise UnterminatedDelimiterError(
                    f"Unterminated '{opener}': missing '{closer}'",
                    snippet, line, column
                )

            yield make(start_type, opener)
            advance(opener)

            inner = text[position:close_at]
            yield make(TokenType.TEXT, inner)
            advance(inner)

            yield make(end_type, closer)
            advance(closer)

        yield make(TokenType.EOF, "")

    def tokenize(self) -> List[Token]:
        """
        Токенизирует весь исходный текст и возвращает список токенов.
        """
        return list(self.tokens())


def tokenize_template(text: str) -> List[Token]:
    """
    Удобная функция для токенизации шаблона.

    Args:
        text: Исходный текст шаблона

    Returns:
        Список токенов

    Raises:
        UnterminatedDelimiterError: При незакрытом разделителе
    """
    return TemplateLexer(text).tokenize()


__all__ = ["TokenType", "Token", "TemplateLexer", "tokenize_template"]
