"""
Лексический анализатор шаблонов замены.

Разбивает исходный текст шаблона на токены для последующего
синтаксического анализа. Поддерживает два режима:
- обычный: всё, кроме $, \\, (, |, ), является литералом;
- расширенный (шаблон начинается с маркера (?x)): пробельные символы
  вне специальных конструкций игнорируются, # начинает комментарий до конца строки.
"""

from __future__ import annotations

import enum
import string
from dataclasses import dataclass
from typing import List, Optional, Union

from .errors import ParseErrorKind, TemplateParseError

EXTENDED_MODE_MARKER = "(?x)"

_DIGITS = "0123456789"
_HEX_DIGITS = frozenset(string.hexdigits)
_WHITESPACE = frozenset(" \t\n\r\f\v")
_SPECIAL = frozenset("$\\(|)")


class TokenType(enum.Enum):
    """Типы токенов в шаблоне."""
    LITERAL = "LITERAL"      # сырые байты
    INDEX = "INDEX"          # $N
    NAME = "NAME"            # $<name>
    LPAREN = "LPAREN"        # (
    PIPE = "PIPE"            # |
    RPAREN = "RPAREN"        # )
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """
    Токен с позиционной информацией для точной диагностики ошибок.
    """
    type: TokenType
    value: Union[bytes, int, str, None]
    position: int        # Позиция в исходном тексте
    line: int            # Номер строки (начиная с 1)
    column: int          # Номер колонки (начиная с 1)

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


class TemplateLexer:
    """
    Лексический анализатор шаблонов замены.

    Режим (обычный или расширенный) определяется один раз по началу текста
    и больше не меняется.
    """

    def __init__(self, text: str):
        self.text = text
        self.position = 0
        self.line = 1
        self.column = 1
        self.length = len(text)

        self.extended = text.startswith(EXTENDED_MODE_MARKER)
        if self.extended:
            self._advance(len(EXTENDED_MODE_MARKER))

    def tokenize(self) -> List[Token]:
        """
        Токенизирует весь исходный текст и возвращает список токенов.
        """
        tokens: List[Token] = []

        while True:
            token = self.next_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                break

        return tokens

    def next_token(self) -> Token:
        """
        Извлекает следующий токен из входного потока.
        """
        if self.extended:
            self._skip_ignored()

        if self.position >= self.length:
            return Token(TokenType.EOF, None, self.position, self.line, self.column)

        char = self.text[self.position]

        if char == "$":
            return self._read_dollar()
        if char == "\\":
            return self._read_escape()
        if char == "(":
            return self._single(TokenType.LPAREN)
        if char == "|":
            return self._single(TokenType.PIPE)
        if char == ")":
            return self._single(TokenType.RPAREN)

        return self._read_text()

    # Разбор отдельных конструкций

    def _read_dollar(self) -> Token:
        """Разбирает $$, $N и $<name>."""
        start = self._mark()
        following = self._peek(1)

        if following == "$":
            self._advance(2)
            return self._token(TokenType.LITERAL, b"$", start)

        if following is not None and following in _DIGITS:
            end = self.position + 1
            while end < self.length and self.text[end] in _DIGITS:
                end += 1
            digits = self.text[self.position + 1:end]
            self._advance(end - self.position)
            return self._token(TokenType.INDEX, int(digits), start)

        if following == "<":
            close = self.text.find(">", self.position + 2)
            if close < 0:
                raise self._error(ParseErrorKind.UNTERMINATED_NAMED_GROUP, start, "expected '>'")
            name = self.text[self.position + 2:close]
            self._advance(close + 1 - self.position)
            return self._token(TokenType.NAME, name, start)

        detail = "end of input" if following is None else f"unexpected {following!r}"
        raise self._error(ParseErrorKind.DANGLING_DOLLAR, start, detail)

    def _read_escape(self) -> Token:
        """Разбирает \\\\, \\<space> и \\xNN."""
        start = self._mark()
        following = self._peek(1)

        if following == "\\":
            self._advance(2)
            return self._token(TokenType.LITERAL, b"\\", start)

        if following == " ":
            self._advance(2)
            return self._token(TokenType.LITERAL, b" ", start)

        if following == "x":
            digits = self.text[self.position + 2:self.position + 4]
            if len(digits) != 2 or not all(c in _HEX_DIGITS for c in digits):
                raise self._error(
                    ParseErrorKind.INVALID_HEX_ESCAPE, start,
                    f"expected two hex digits, got {digits!r}",
                )
            self._advance(4)
            return self._token(TokenType.LITERAL, bytes([int(digits, 16)]), start)

        detail = "end of input" if following is None else f"unexpected {following!r}"
        raise self._error(ParseErrorKind.UNKNOWN_ESCAPE, start, detail)

    def _read_text(self) -> Token:
        """Читает максимальный отрезок обычного текста."""
        start = self._mark()
        end = self.position
        while end < self.length:
            char = self.text[end]
            if char in _SPECIAL:
                break
            if self.extended and (char in _WHITESPACE or char == "#"):
                break
            end += 1

        value = self.text[self.position:end]
        self._advance(len(value))
        return self._token(TokenType.LITERAL, value.encode("utf-8"), start)

    def _single(self, token_type: TokenType) -> Token:
        start = self._mark()
        value = self.text[self.position]
        self._advance(1)
        return self._token(token_type, value, start)

    def _skip_ignored(self) -> None:
        """Пропускает пробелы и комментарии (только в расширенном режиме)."""
        while self.position < self.length:
            char = self.text[self.position]
            if char in _WHITESPACE:
                self._advance(1)
            elif char == "#":
                newline = self.text.find("\n", self.position)
                end = self.length if newline < 0 else newline + 1
                self._advance(end - self.position)
            else:
                break

    # Вспомогательные методы

    def _peek(self, offset: int) -> Optional[str]:
        index = self.position + offset
        if index < self.length:
            return self.text[index]
        return None

    def _mark(self) -> tuple[int, int, int]:
        return self.position, self.line, self.column

    def _token(self, token_type: TokenType, value, start: tuple[int, int, int]) -> Token:
        position, line, column = start
        return Token(token_type, value, position, line, column)

    def _error(self, kind: ParseErrorKind, start: tuple[int, int, int], detail: str = "") -> TemplateParseError:
        position, line, column = start
        return TemplateParseError(kind, position, line, column, detail)

    def _advance(self, count: int) -> None:
        """
        Перемещает позицию на указанное количество символов,
        обновляя номера строк и колонок.
        """
        for _ in range(count):
            if self.position < self.length:
                if self.text[self.position] == "\n":
                    self.line += 1
                    self.column = 1
                else:
                    self.column += 1
                self.position += 1


def tokenize_template(text: str) -> List[Token]:
    """
    Удобная функция для токенизации шаблона.

    Args:
        text: Исходный текст шаблона

    Returns:
        Список токенов (последний — EOF)

    Raises:
        TemplateParseError: При лексической ошибке
    """
    lexer = TemplateLexer(text)
    return lexer.tokenize()


__all__ = [
    "EXTENDED_MODE_MARKER",
    "TokenType",
    "Token",
    "TemplateLexer",
    "tokenize_template",
]
