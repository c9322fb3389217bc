# clarity_organizer/core/file_operations.py

import logging
import os
import shutil
from pathlib import Path

from .errors import DirectoryCreateError, FileMoveError

# Set up a logger for this module. The application configures its handlers.
logger = logging.getLogger(__name__)


def ensure_category_dir(root: Path, category: str) -> Path:
    """
    Makes sure `root/category` exists and returns its path.

    Only the category folder itself is created, never missing parents. An
    existing entry with that name is left exactly as it is.
    """
    category_dir = root / category
    if os.path.lexists(category_dir):
        return category_dir

    try:
        category_dir.mkdir()
    except OSError as e:
        logger.error(f"Could not create category folder '{category_dir}': {e}")
        raise DirectoryCreateError(category, category_dir, cause=e) from e

    logger.debug(f"Created category folder: {category_dir}")
    return category_dir


def move_into(source_path: Path, destination_dir: Path) -> Path:
    """
    Moves a file into `destination_dir`, keeping its name.

    Existing files are never overwritten: a name clash is reported as a
    FileMoveError, like any other failure of the move itself.

    Returns:
        The final path of the moved file.
    """
    destination_path = destination_dir / source_path.name

    if os.path.lexists(destination_path):
        logger.error(f"Destination already exists: '{destination_path}'")
        clash = FileExistsError(f"'{destination_path}' already exists")
        raise FileMoveError(source_path, destination_path, cause=clash) from clash

    try:
        # On the same drive this is a plain rename; across drives shutil
        # falls back to copy-then-delete.
        shutil.move(str(source_path), str(destination_path))
    except OSError as e:
        logger.error(f"Failed to move '{source_path}' to '{destination_path}': {e}")
        raise FileMoveError(source_path, destination_path, cause=e) from e

    logger.debug(f"Moved '{source_path}' to '{destination_path}'")
    return destination_path
