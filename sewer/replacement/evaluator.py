"""
Вычислитель шаблонов замены.

Проходит по узлам скомпилированного шаблона и собирает результат из литералов
и значений групп конкретного совпадения. Альтернативы вычисляются с откатом:
ветка, в которой не нашлась группа, отбрасывается целиком, и пробуется следующая.

Откат управляется обычными значениями-результатами (Built / Missing),
исключение MissingGroupError возникает только на внешней границе.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple, Union

from .captures import CaptureProvider, as_bytes
from .errors import MissingGroupError
from .nodes import (
    GroupReference,
    TemplateNode,
    Template,
    Literal,
    IndexedGroup,
    NamedGroup,
    Alternation,
)


@dataclass(frozen=True)
class Built:
    """Успешный результат вычисления последовательности узлов."""
    data: bytes


@dataclass(frozen=True)
class Missing:
    """
    Неудача вычисления: группа отсутствует в совпадении.

    Attributes:
        reference: Узел, на котором произошла неудача (группа или альтернатива)
        causes: Для альтернативы — неудачи каждой из веток по порядку
    """
    reference: TemplateNode
    causes: Tuple["Missing", ...] = ()

    def describe(self, indent: int = 0) -> str:
        """Человекочитаемое описание с раскрытием причин по веткам."""
        pad = "\t" * indent
        if isinstance(self.reference, Alternation):
            lines = [f"{pad}no alternative matched: {self.reference}"]
            lines.extend(cause.describe(indent + 1) for cause in self.causes)
            return "\n".join(lines)
        return f"{pad}missing group: {self.reference}"


BuildResult = Union[Built, Missing]


class TemplateEvaluator:
    """
    Вычислитель шаблонов.

    Принимает источник групп одного совпадения; не хранит состояния между
    вызовами и никогда не изменяет ни шаблон, ни источник.
    """

    def __init__(self, captures: CaptureProvider):
        """
        Args:
            captures: Источник значений групп для текущего совпадения
        """
        self.captures = captures

    def evaluate(self, template: Template) -> bytes:
        """
        Вычисляет шаблон целиком.

        Returns:
            Результирующие байты

        Raises:
            MissingGroupError: Если группа отсутствует и ни одна альтернатива не помогла
        """
        result = self.build(template)
        if isinstance(result, Missing):
            raise MissingGroupError(result)
        return result.data

    def build(self, template: Template) -> BuildResult:
        """Вычисляет шаблон, возвращая результат вместо исключения."""
        out = bytearray()
        for node in template.nodes:
            failure = self._emit(node, out)
            if failure is not None:
                return failure
        return Built(bytes(out))

    def _emit(self, node: TemplateNode, out: bytearray) -> Missing | None:
        """Дописывает результат одного узла в буфер; возвращает неудачу или None."""
        if isinstance(node, Literal):
            out.extend(node.data)
            return None
        elif isinstance(node, IndexedGroup):
            return self._emit_value(node, self.captures.by_index(node.index), out)
        elif isinstance(node, NamedGroup):
            return self._emit_value(node, self.captures.by_name(node.name), out)
        elif isinstance(node, Alternation):
            return self._emit_alternation(node, out)
        else:
            raise TypeError(f"Unknown template node: {type(node).__name__}")

    def _emit_value(self, node: GroupReference, value, out: bytearray) -> Missing | None:
        # Пустая строка — валидное значение, неудача только при None
        if value is None:
            return Missing(reference=node)
        out.extend(as_bytes(value))
        return None

    def _emit_alternation(self, node: Alternation, out: bytearray) -> Missing | None:
        """
        Пробует ветки слева направо, каждую в отдельный буфер.

        Частичный вывод упавшей ветки отбрасывается; байты, записанные
        до альтернативы, не затрагиваются.
        """
        causes: List[Missing] = []
        for branch in node.branches:
            result = self.build(branch)
            if isinstance(result, Built):
                out.extend(result.data)
                return None
            causes.append(result)
        return Missing(reference=node, causes=tuple(causes))


def evaluate(template: Template, captures: CaptureProvider) -> bytes:
    """
    Удобная функция для вычисления шаблона.

    Args:
        template: Скомпилированный шаблон
        captures: Источник групп конкретного совпадения

    Returns:
        Результирующие байты

    Raises:
        MissingGroupError: При отсутствии группы, не компенсированном альтернативой
    """
    return TemplateEvaluator(captures).evaluate(template)


__all__ = [
    "Built",
    "Missing",
    "BuildResult",
    "TemplateEvaluator",
    "evaluate",
]
