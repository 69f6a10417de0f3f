"""
Источники значений групп захвата для вычислителя шаблонов.

Вычислитель не зависит от конкретного движка регулярных выражений:
ему нужен только протокол CaptureProvider. None означает «группы нет»,
пустая строка — «группа участвовала и совпала с пустой строкой».
"""

from __future__ import annotations

import re
from typing import Mapping, Optional, Protocol, Sequence, Union

CaptureValue = Union[bytes, str]


class CaptureProvider(Protocol):
    """Протокол для чтения групп одного конкретного совпадения."""

    def by_index(self, index: int) -> Optional[CaptureValue]:
        ...

    def by_name(self, name: str) -> Optional[CaptureValue]:
        ...


class MatchCaptures:
    """
    Адаптер над re.Match (bytes- или str-шаблон).

    Несуществующий номер или имя группы, а также группа,
    не участвовавшая в совпадении, считаются отсутствующими.
    Группа 0 для настоящего совпадения присутствует всегда.
    """

    def __init__(self, match: re.Match):
        self.match = match

    def by_index(self, index: int) -> Optional[CaptureValue]:
        if index < 0 or index > self.match.re.groups:
            return None
        return self.match.group(index)

    def by_name(self, name: str) -> Optional[CaptureValue]:
        if name not in self.match.re.groupindex:
            return None
        return self.match.group(name)


class MappingCaptures:
    """
    Группы, заданные готовыми значениями: последовательность по номерам
    и словарь по именам. Элемент None в последовательности — неучаствовавшая группа.
    """

    def __init__(
        self,
        groups: Sequence[Optional[CaptureValue]] = (),
        named: Optional[Mapping[str, Optional[CaptureValue]]] = None,
    ):
        self.groups = tuple(groups)
        self.named = dict(named or {})

    def by_index(self, index: int) -> Optional[CaptureValue]:
        if 0 <= index < len(self.groups):
            return self.groups[index]
        return None

    def by_name(self, name: str) -> Optional[CaptureValue]:
        return self.named.get(name)


def as_bytes(value: CaptureValue) -> bytes:
    """Приводит значение группы к байтам (строки кодируются в UTF-8)."""
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


__all__ = [
    "CaptureValue",
    "CaptureProvider",
    "MatchCaptures",
    "MappingCaptures",
    "as_bytes",
]
