"""
Загрузчик правил из YAML.

Формат файла:

    rules:
      - name: widen buffer
        find: '\\x10\\x00(\\x00)'
        replace: '\\x20\\x00$1'
"""

from __future__ import annotations

from pathlib import Path
from typing import List

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import RuleFileError
from .model import Rule, RuleSpec

_yaml = YAML(typ="safe")


def _read_yaml_map(path: Path) -> dict:
    """Читает YAML файл и возвращает словарь."""
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except UnicodeDecodeError as e:
        raise RuleFileError(f"{path} is not valid UTF-8 ({e.reason} at byte {e.start})") from e
    except YAMLError as e:
        raise RuleFileError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise RuleFileError(f"YAML must be a mapping: {path}")
    return raw


def _parse_rule_specs(raw: dict, source: Path) -> List[RuleSpec]:
    items = raw.get("rules", [])
    if not isinstance(items, list):
        raise RuleFileError(f"'rules' must be a list: {source}")

    specs: List[RuleSpec] = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise RuleFileError(f"rules[{i}] must be a mapping: {source}")
        missing = [key for key in ("find", "replace") if key not in item]
        if missing:
            raise RuleFileError(f"rules[{i}] is missing {', '.join(missing)}: {source}")
        spec = RuleSpec.from_dict(item)
        if not spec.name:
            spec.name = f"rule-{i + 1}"
        specs.append(spec)
    return specs


def load_yaml_rules(path: Path) -> List[Rule]:
    """
    Загружает и компилирует правила из YAML файла.

    Raises:
        RuleFileError: При неверной структуре файла
        RuleCompileError: При ошибке в регулярном выражении или шаблоне
    """
    raw = _read_yaml_map(path)
    return [spec.compile() for spec in _parse_rule_specs(raw, path)]


__all__ = ["load_yaml_rules"]
