"""
Парсер шаблонов замены с рекурсивным спуском.

Преобразует последовательность токенов в скомпилированный шаблон (AST).
Сам парсер не откатывается: откат по альтернативам выполняет только вычислитель.

Грамматика:
template     → item*
item         → LITERAL | INDEX | NAME | alternation
alternation  → "(" template ("|" template)* ")"

Вне альтернативы токены "|" и ")" недопустимы.
"""

from __future__ import annotations

from typing import List

from .errors import ParseErrorKind, TemplateParseError
from .lexer import Token, TokenType, TemplateLexer
from .nodes import (
    TemplateNode,
    Template,
    Literal,
    IndexedGroup,
    NamedGroup,
    Alternation,
)

# Предел вложенности альтернатив (защита стека от патологических шаблонов)
DEFAULT_MAX_DEPTH = 64


class TemplateParser:
    """
    Рекурсивный парсер для шаблонов замены.

    Обрабатывает последовательность токенов и строит неизменяемый Template,
    сливая соседние литералы в один узел.
    """

    def __init__(self, tokens: List[Token], max_depth: int = DEFAULT_MAX_DEPTH):
        self.tokens = tokens
        self.position = 0
        self.max_depth = max_depth

    def parse(self) -> Template:
        """
        Парсит всю последовательность токенов в шаблон.

        Returns:
            Скомпилированный шаблон

        Raises:
            TemplateParseError: При ошибке синтаксического анализа
        """
        nodes = self._parse_sequence(depth=0)

        current = self._current_token()
        if current.type != TokenType.EOF:
            # Остановились на | или ) вне альтернативы
            raise self._error(
                ParseErrorKind.UNEXPECTED_DELIMITER, current,
                f"{current.value!r} is only allowed inside an alternation",
            )

        return Template(nodes)

    def _parse_sequence(self, depth: int) -> tuple[TemplateNode, ...]:
        """
        Парсит последовательность узлов до EOF, "|" или ")".

        Соседние литералы объединяются.
        """
        nodes: List[TemplateNode] = []
        pending = bytearray()

        while True:
            current = self._current_token()

            if current.type == TokenType.LITERAL:
                pending.extend(current.value)
                self._advance()
                continue

            if current.type in (TokenType.EOF, TokenType.PIPE, TokenType.RPAREN):
                break

            if pending:
                nodes.append(Literal(bytes(pending)))
                pending.clear()

            if current.type == TokenType.INDEX:
                self._advance()
                nodes.append(IndexedGroup(index=current.value))
            elif current.type == TokenType.NAME:
                self._advance()
                nodes.append(NamedGroup(name=current.value))
            elif current.type == TokenType.LPAREN:
                nodes.append(self._parse_alternation(depth + 1))
            else:
                raise self._error(
                    ParseErrorKind.UNEXPECTED_DELIMITER, current,
                    f"unexpected token {current.type.name}",
                )

        if pending:
            nodes.append(Literal(bytes(pending)))

        return tuple(nodes)

    def _parse_alternation(self, depth: int) -> Alternation:
        """Парсит альтернативу: (branch|branch|...)"""
        opening = self._advance()

        if depth > self.max_depth:
            raise self._error(
                ParseErrorKind.NESTING_TOO_DEEP, opening,
                f"more than {self.max_depth} nested alternations",
            )

        branches: List[Template] = []
        while True:
            branches.append(Template(self._parse_sequence(depth)))

            if self._match(TokenType.PIPE):
                continue
            if self._match(TokenType.RPAREN):
                break

            # Дошли до конца ввода, так и не встретив ")"
            raise self._error(ParseErrorKind.UNTERMINATED_ALTERNATION, opening, "expected ')'")

        return Alternation(branches=tuple(branches))

    # Вспомогательные методы для работы с токенами

    def _current_token(self) -> Token:
        """Возвращает текущий токен без продвижения позиции."""
        if self.position >= len(self.tokens):
            last = self.tokens[-1] if self.tokens else None
            if last is not None and last.type == TokenType.EOF:
                return last
            return Token(TokenType.EOF, None, 0, 1, 1)
        return self.tokens[self.position]

    def _advance(self) -> Token:
        """Продвигает позицию и возвращает поглощённый токен."""
        token = self._current_token()
        if token.type != TokenType.EOF:
            self.position += 1
        return token

    def _match(self, token_type: TokenType) -> bool:
        """Проверяет и потребляет токен указанного типа."""
        if self._current_token().type == token_type:
            self._advance()
            return True
        return False

    def _error(self, kind: ParseErrorKind, token: Token, detail: str = "") -> TemplateParseError:
        return TemplateParseError(kind, token.position, token.line, token.column, detail)


def parse_template(text: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Template:
    """
    Удобная функция для компиляции шаблона из строки.

    Args:
        text: Исходный текст шаблона
        max_depth: Предел вложенности альтернатив

    Returns:
        Скомпилированный шаблон

    Raises:
        TemplateParseError: При лексической или синтаксической ошибке
    """
    tokens = TemplateLexer(text).tokenize()
    return TemplateParser(tokens, max_depth=max_depth).parse()


__all__ = ["DEFAULT_MAX_DEPTH", "TemplateParser", "parse_template"]
