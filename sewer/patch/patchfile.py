"""
Разбор патч-файлов.

Формат:

    #имя правила
    -строка регулярного выражения
    -продолжение (строки склеиваются через \\n)
    +строка шаблона замены
    +продолжение

Правила разделяются произвольными пробелами и пустыми строками.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from .errors import PatchfileParseError
from .model import Rule, RuleSpec

_BLANK = " \t\r\n"


class PatchfileParser:
    """Посимвольный парсер патч-файла."""

    def __init__(self, text: str):
        self.text = text
        self.position = 0
        self.length = len(text)

    def parse(self) -> List[RuleSpec]:
        """
        Разбирает весь текст в список исходных правил.

        Raises:
            PatchfileParseError: При нарушении формата
        """
        specs: List[RuleSpec] = []

        self._skip_blank()
        while not self._is_at_end():
            specs.append(self._parse_rule())
            self._skip_blank()

        return specs

    def _parse_rule(self) -> RuleSpec:
        if self._peek() != "#":
            raise self._error("expected '#' rule header")
        self.position += 1
        name = self._rest_of_line()

        if self._peek() != "\n":
            raise self._error("rule header must be followed by a newline")
        self.position += 1

        self._skip_blank()
        find = self._prefixed("-", "expected '-' regex line")
        self._skip_blank()
        replace = self._prefixed("+", "expected '+' replacement line")

        return RuleSpec(name=name, find=find, replace=replace)

    def _prefixed(self, prefix: str, error_message: str) -> str:
        """Собирает подряд идущие строки с префиксом, склеивая их через \\n."""
        if self._peek() != prefix:
            raise self._error(error_message)

        lines = []
        while self._peek() == prefix:
            self.position += 1
            lines.append(self._rest_of_line())
            self._skip_blank()
        return "\n".join(lines)

    def _rest_of_line(self) -> str:
        end = self.text.find("\n", self.position)
        if end < 0:
            end = self.length
        value = self.text[self.position:end]
        self.position = end
        return value.removesuffix("\r")

    def _skip_blank(self) -> None:
        while self.position < self.length and self.text[self.position] in _BLANK:
            self.position += 1

    def _peek(self) -> Optional[str]:
        if self.position < self.length:
            return self.text[self.position]
        return None

    def _is_at_end(self) -> bool:
        return self.position >= self.length

    def _error(self, message: str) -> PatchfileParseError:
        line = self.text.count("\n", 0, self.position) + 1
        return PatchfileParseError(message, line)


def parse_patchfile(text: str) -> List[Rule]:
    """
    Разбирает и компилирует правила из текста патч-файла.

    Raises:
        PatchfileParseError: При нарушении формата
        RuleCompileError: При ошибке в регулярном выражении или шаблоне
    """
    return [spec.compile() for spec in PatchfileParser(text).parse()]


def load_patchfile(path: Path) -> List[Rule]:
    """Читает патч-файл с диска."""
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise PatchfileParseError(f"{path} is not valid UTF-8 ({e.reason} at byte {e.start})", 1) from e
    return parse_patchfile(text)


__all__ = ["PatchfileParser", "parse_patchfile", "load_patchfile"]
