"""
AST-узлы шаблона замены.

Определяет закрытый набор неизменяемых классов узлов для представления
скомпилированного шаблона. Шаблон создаётся парсером один раз и больше
не меняется, поэтому его можно безопасно разделять между потоками.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from .lexer import EXTENDED_MODE_MARKER

# Байты, которые нельзя вывести в исходник как есть
_SPECIAL_BYTES = {
    ord("$"): "$$",
    ord("\\"): "\\\\",
}
_DELIMITER_BYTES = frozenset(b"()|")


def _escape_byte(value: int) -> str:
    return f"\\x{value:02x}"


def _render_literal(data: bytes, after_index: bool) -> str:
    parts = []
    for i, value in enumerate(data):
        if value in _SPECIAL_BYTES:
            parts.append(_SPECIAL_BYTES[value])
        elif value in _DELIMITER_BYTES or not 0x20 <= value < 0x7F:
            parts.append(_escape_byte(value))
        elif i == 0 and after_index and chr(value).isdigit():
            # Цифра сразу после $N иначе продолжит номер группы
            parts.append(_escape_byte(value))
        else:
            parts.append(chr(value))
    return "".join(parts)


@dataclass(frozen=True)
class TemplateNode:
    """Базовый класс для всех узлов AST шаблона."""
    pass


@dataclass(frozen=True)
class Literal(TemplateNode):
    """
    Сырые байты, выводимые в результат как есть.

    Получаются из обычных символов и экранирований ($$, \\\\, \\ , \\xNN).
    Соседние литералы парсер всегда сливает в один узел.
    """
    data: bytes

    def __str__(self) -> str:
        return _render_literal(self.data, after_index=False)


@dataclass(frozen=True)
class IndexedGroup(TemplateNode):
    """Ссылка на группу захвата по номеру: $N (0 — всё совпадение)."""
    index: int

    def __str__(self) -> str:
        return f"${self.index}"


@dataclass(frozen=True)
class NamedGroup(TemplateNode):
    """Ссылка на именованную группу захвата: $<name>"""
    name: str

    def __str__(self) -> str:
        return f"$<{self.name}>"


@dataclass(frozen=True)
class Alternation(TemplateNode):
    """
    Альтернатива: (branch1|branch2|...)

    Каждая ветка — полноценный шаблон. При вычислении ветки пробуются
    слева направо, побеждает первая, вычисленная целиком без ошибок.
    """
    branches: Tuple["Template", ...]

    def __str__(self) -> str:
        return "(" + "|".join(str(branch) for branch in self.branches) + ")"


@dataclass(frozen=True)
class Template:
    """
    Скомпилированный шаблон: упорядоченная последовательность узлов.

    str(template) возвращает канонический исходник в обычном режиме;
    его повторная компиляция даёт структурно равный шаблон.
    """
    nodes: Tuple[TemplateNode, ...] = ()

    def __iter__(self):
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def __str__(self) -> str:
        parts = []
        previous: TemplateNode | None = None
        for node in self.nodes:
            if isinstance(node, Literal):
                parts.append(_render_literal(node.data, isinstance(previous, IndexedGroup)))
            else:
                parts.append(str(node))
            previous = node
        rendered = "".join(parts)
        if rendered.startswith(EXTENDED_MODE_MARKER):
            # Иначе первая ветка альтернативы прочитается как маркер (?x)
            rendered = "(\\x3f" + rendered[2:]
        return rendered


GroupReference = Union[IndexedGroup, NamedGroup]


__all__ = [
    "TemplateNode",
    "Literal",
    "IndexedGroup",
    "NamedGroup",
    "Alternation",
    "Template",
    "GroupReference",
]
