# clarity_organizer/core/path_guard.py
"""
Decides whether a directory may be organized at all.

The check is a plain string comparison on normalized paths: a candidate is
protected when it equals, starts with, or ends with any configured unsafe
path. It is not path-component aware, so `/etcetera` is protected by `/etc`
and a symlink or relative path can slip past it. Drive-style entries such as
`C:\\Windows` are compared as-is on every platform.

The configured safe paths are stored alongside but are not consulted here.
"""

import logging
import os
from pathlib import Path
from typing import Iterable

from .errors import ProtectedPathError

logger = logging.getLogger(__name__)


def _normalize(path) -> str:
    return os.path.normpath(str(path))


def is_protected(candidate: Path | str, unsafe_paths: Iterable[str]) -> bool:
    """Returns True if `candidate` matches any entry of `unsafe_paths`."""
    target = _normalize(candidate)
    for entry in unsafe_paths:
        # A blank rule would match every path.
        if not entry or not entry.strip():
            continue
        rule = _normalize(entry)
        if target == rule or target.startswith(rule) or target.endswith(rule):
            logger.debug(f"'{target}' matched protected path rule '{rule}'.")
            return True
    return False


def ensure_not_protected(candidate: Path | str, unsafe_paths: Iterable[str]):
    """Raises ProtectedPathError if `candidate` may not be touched."""
    if is_protected(candidate, unsafe_paths):
        logger.warning(f"Refusing to operate on protected path: {candidate}")
        raise ProtectedPathError(candidate)
