"""
Модель правила патча: именованная пара «регулярное выражение → шаблон замены».
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict

from ..replacement import Template, TemplateParseError, compile_template
from .errors import RuleCompileError


@dataclass(frozen=True)
class Rule:
    """
    Правило патча.

    Регулярное выражение компилируется как bytes-шаблон: патчится
    произвольное двоичное содержимое, а не текст.
    """
    name: str
    find: re.Pattern
    replace: Template

    @classmethod
    def compile(cls, name: str, find: str, replace: str) -> "Rule":
        """
        Компилирует правило из исходных строк.

        Raises:
            RuleCompileError: При ошибке в регулярном выражении или шаблоне
        """
        try:
            pattern = re.compile(find.encode("utf-8"))
        except re.error as e:
            raise RuleCompileError(name, f"regex: {e}") from e
        try:
            template = compile_template(replace)
        except TemplateParseError as e:
            raise RuleCompileError(name, f"replacement: {e}") from e
        return cls(name=name, find=pattern, replace=template)


@dataclass
class RuleSpec:
    """Исходное (некомпилированное) описание правила из файла."""
    name: str
    find: str
    replace: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RuleSpec":
        """Создание экземпляра из словаря (из YAML)."""
        return cls(
            name=str(data.get("name") or ""),
            find=str(data["find"]),
            replace=str(data["replace"]),
        )

    def compile(self) -> Rule:
        return Rule.compile(self.name, self.find, self.replace)


__all__ = ["Rule", "RuleSpec"]
