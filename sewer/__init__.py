"""
sewer — byte-level patching with regex find rules and replacement templates.
"""

from .replacement import (
    Template,
    compile_template,
    compile_cached,
    evaluate,
)

__all__ = ["Template", "compile_template", "compile_cached", "evaluate"]
