# clarity_organizer/core/classifier.py

from pathlib import Path
from typing import Iterable, Mapping


def extension_of(path: Path | str) -> str | None:
    """
    Returns the lower-cased extension of a file name, without the dot.

    Names without a suffix, dot files such as '.bashrc', and names ending in a
    dot have no extension.
    """
    suffix = Path(path).suffix
    if len(suffix) <= 1:
        return None
    return suffix[1:].lower()


def classify(extension: str | None, categories: Mapping[str, Iterable[str]]) -> str | None:
    """
    Maps an extension to the first category that lists it.

    Categories are tried in the mapping's insertion order. When an extension
    appears under several categories, which one wins depends on how the
    mapping was built; callers must not rely on it.
    """
    if not extension:
        return None
    ext = extension.lower()
    for category, extensions in categories.items():
        if ext in extensions:
            return category
    return None
