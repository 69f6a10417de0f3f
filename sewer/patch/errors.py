from __future__ import annotations

from ..errors import SewerUserError


class SourcePatternNotFoundError(SewerUserError):
    """Raised when the find regex does not match anywhere in the input."""
    def __init__(self):
        super().__init__("source pattern not found, file is already patched?")


class MultipleSourcesFoundError(SewerUserError):
    """Raised when the find regex matches more than once."""
    def __init__(self):
        super().__init__(
            "source pattern found multiple times, is this patch correct for this version of file?"
        )


class MismatchedLengthError(SewerUserError):
    """Raised when the replacement would change the length of the patched data."""
    def __init__(self, source_len: int, result_len: int):
        self.source_len = source_len
        self.result_len = result_len
        super().__init__(f"source match was {source_len} bytes, but result is {result_len}")


class RuleCompileError(SewerUserError):
    """Raised when a rule's regex or replacement template cannot be compiled."""
    def __init__(self, name: str, message: str):
        self.name = name
        super().__init__(f"rule '{name}': {message}")


class PatchfileParseError(SewerUserError):
    """Raised when a patch file does not follow the '#', '-', '+' line format."""
    def __init__(self, message: str, line: int):
        self.line = line
        super().__init__(f"patchfile: {message} at line {line}")


class RuleFileError(SewerUserError):
    """Raised when a YAML rule file has an unexpected shape."""
    pass


class OneOrMoreRulesFailedError(SewerUserError):
    """Raised after a partial run in which at least one rule failed."""
    def __init__(self, failed: int):
        self.failed = failed
        super().__init__("one or more rules failed")
