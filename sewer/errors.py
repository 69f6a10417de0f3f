"""
Root of the user-facing exception hierarchy.

Anything the person running sewer can fix themselves (a malformed template,
a regex that matches nothing, a broken rule file) derives from SewerUserError;
the CLI prints such errors as one clean line and exits with status 1.

Bugs must not derive from it, so they keep their tracebacks.
"""

from __future__ import annotations


class SewerUserError(Exception):
    """Base class for errors reported to the user without a traceback."""
    pass


__all__ = ["SewerUserError"]
