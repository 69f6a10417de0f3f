"""
Ошибки компиляции и вычисления шаблонов замены.

Две непересекающиеся таксономии:
- TemplateParseError — шаблон синтаксически некорректен, компиляция невозможна;
- MissingGroupError — в конкретном совпадении нет нужной группы захвата.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from ..errors import SewerUserError

if TYPE_CHECKING:
    from .evaluator import Missing


class ParseErrorKind(enum.Enum):
    """Виды ошибок разбора шаблона."""
    DANGLING_DOLLAR = "dangling '$'"
    UNTERMINATED_NAMED_GROUP = "unterminated named group reference"
    INVALID_HEX_ESCAPE = "invalid \\x escape"
    UNKNOWN_ESCAPE = "unknown escape"
    UNTERMINATED_ALTERNATION = "unterminated alternation"
    UNEXPECTED_DELIMITER = "unexpected delimiter outside alternation"
    NESTING_TOO_DEEP = "alternation nesting too deep"


class TemplateParseError(SewerUserError):
    """Ошибка разбора шаблона с позицией в исходном тексте."""

    def __init__(self, kind: ParseErrorKind, position: int, line: int, column: int, detail: str = ""):
        message = f"{kind.value} at {line}:{column}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.kind = kind
        self.position = position
        self.line = line
        self.column = column


class MissingGroupError(SewerUserError):
    """
    Вычисление шаблона не удалось: группа отсутствует в совпадении,
    и ни одна альтернатива не смогла это компенсировать.
    """

    def __init__(self, failure: Missing):
        super().__init__(failure.describe())
        self.failure = failure

    @property
    def reference(self):
        """Узел (группа или альтернатива), на котором окончательно упало вычисление."""
        return self.failure.reference


__all__ = [
    "ParseErrorKind",
    "TemplateParseError",
    "MissingGroupError",
]
