"""
Шаблоны замены для совпадений регулярных выражений.

Публичный API:
- compile_template(text) — разбор шаблона в неизменяемый Template;
- compile_cached(text) — то же с кешированием по тексту;
- evaluate(template, captures) — вычисление шаблона для одного совпадения.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from .captures import CaptureProvider, MappingCaptures, MatchCaptures
from .errors import MissingGroupError, ParseErrorKind, TemplateParseError
from .evaluator import Built, Missing, TemplateEvaluator, evaluate
from .lexer import EXTENDED_MODE_MARKER
from .nodes import (
    Alternation,
    IndexedGroup,
    Literal,
    NamedGroup,
    Template,
    TemplateNode,
)
from .parser import DEFAULT_MAX_DEPTH, parse_template

logger = logging.getLogger(__name__)


def compile_template(text: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Template:
    """
    Компилирует текст шаблона.

    Raises:
        TemplateParseError: Если шаблон синтаксически некорректен
    """
    template = parse_template(text, max_depth=max_depth)
    logger.debug("Compiled replacement template %r into %d node(s)", text, len(template))
    return template


@lru_cache(maxsize=256)
def compile_cached(text: str) -> Template:
    """Компилирует шаблон с кешированием (шаблоны неизменяемы, кеш безопасен)."""
    return compile_template(text)


__all__ = [
    "EXTENDED_MODE_MARKER",
    "DEFAULT_MAX_DEPTH",
    "Template",
    "TemplateNode",
    "Literal",
    "IndexedGroup",
    "NamedGroup",
    "Alternation",
    "CaptureProvider",
    "MatchCaptures",
    "MappingCaptures",
    "TemplateEvaluator",
    "Built",
    "Missing",
    "ParseErrorKind",
    "TemplateParseError",
    "MissingGroupError",
    "compile_template",
    "compile_cached",
    "evaluate",
]
