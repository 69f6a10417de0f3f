from __future__ import annotations

from pathlib import Path
from typing import List

from .engine import PatchOutcome, apply_rules, replace_single
from .errors import (
    MismatchedLengthError,
    MultipleSourcesFoundError,
    OneOrMoreRulesFailedError,
    PatchfileParseError,
    RuleCompileError,
    RuleFileError,
    SourcePatternNotFoundError,
)
from .model import Rule, RuleSpec
from .patchfile import load_patchfile, parse_patchfile
from .rules_yaml import load_yaml_rules

_YAML_SUFFIXES = {".yaml", ".yml"}


def load_rules(path: Path) -> List[Rule]:
    """Loads rules from a YAML rule file or a native patch file, by extension."""
    if path.suffix.lower() in _YAML_SUFFIXES:
        return load_yaml_rules(path)
    return load_patchfile(path)


__all__ = [
    "Rule",
    "RuleSpec",
    "PatchOutcome",
    "replace_single",
    "apply_rules",
    "load_rules",
    "load_patchfile",
    "parse_patchfile",
    "load_yaml_rules",
    "SourcePatternNotFoundError",
    "MultipleSourcesFoundError",
    "MismatchedLengthError",
    "RuleCompileError",
    "PatchfileParseError",
    "RuleFileError",
    "OneOrMoreRulesFailedError",
]
