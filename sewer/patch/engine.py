"""
Применение правил патча к байтовому буферу.

Каждое правило должно совпасть ровно один раз, а результат замены
должен иметь ту же длину, что и исходное совпадение (патчится двоичный файл,
смещения в котором менять нельзя).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from ..errors import SewerUserError
from ..replacement import MatchCaptures, Template, evaluate
from .errors import (
    MismatchedLengthError,
    MultipleSourcesFoundError,
    SourcePatternNotFoundError,
)
from .model import Rule

logger = logging.getLogger(__name__)


def _hex(data: bytes) -> str:
    return "".join(f"\\x{b:02x}" for b in data)


def replace_single(data: bytes, find: re.Pattern, replace: Template) -> bytes:
    """
    Заменяет единственное вхождение find в data результатом шаблона.

    Returns:
        Новый буфер той же длины

    Raises:
        SourcePatternNotFoundError: Совпадений нет
        MultipleSourcesFoundError: Совпадений больше одного
        MissingGroupError: Шаблону не хватило групп
        MismatchedLengthError: Длина результата отличается от длины совпадения
    """
    match = find.search(data)
    if match is None:
        raise SourcePatternNotFoundError()

    if find.search(data, match.end()) is not None:
        raise MultipleSourcesFoundError()

    out = evaluate(replace, MatchCaptures(match))

    start, end = match.span()
    logger.info("@%d..%d", start, end)
    logger.info("-%s", _hex(match.group(0)))
    logger.info("+%s", _hex(out))

    if len(out) != end - start:
        raise MismatchedLengthError(end - start, len(out))

    return data[:start] + out + data[end:]


@dataclass
class PatchOutcome:
    """Итог применения набора правил."""
    data: bytes
    applied: List[str] = field(default_factory=list)
    failures: List[Tuple[str, SewerUserError]] = field(default_factory=list)


def apply_rules(data: bytes, rules: Iterable[Rule], partial: bool = False) -> PatchOutcome:
    """
    Применяет правила по порядку.

    Args:
        data: Исходный буфер
        rules: Скомпилированные правила
        partial: Продолжать после неудачного правила (ошибки собираются в failures)

    Raises:
        SewerUserError: Первая ошибка правила, если partial выключен
    """
    outcome = PatchOutcome(data=data)
    for rule in rules:
        logger.info("#%s", rule.name)
        try:
            outcome.data = replace_single(outcome.data, rule.find, rule.replace)
        except SewerUserError as e:
            if not partial:
                raise
            logger.warning("rule '%s' failed: %s", rule.name, e)
            outcome.failures.append((rule.name, e))
            continue
        outcome.applied.append(rule.name)
    return outcome


__all__ = ["replace_single", "apply_rules", "PatchOutcome"]
