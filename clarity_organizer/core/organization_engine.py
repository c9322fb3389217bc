# clarity_organizer/core/organization_engine.py

import logging
import os
from pathlib import Path
from typing import Callable, Dict, List, Tuple

from .classifier import classify, extension_of
from .config_manager import Configuration, normalize_extensions
from .errors import DirectoryAccessError, EntryReadError
from .file_operations import ensure_category_dir, move_into
from .path_guard import ensure_not_protected

logger = logging.getLogger(__name__)

PreviewResult = List[Tuple[str, int]]
MoveCallback = Callable[[Path, Path], None]


class OrganizationEngine:
    """
    Sorts the files directly inside a directory into per-category folders.

    The engine works on a private snapshot of the configuration taken when it
    is created, so a configuration saved while an operation runs never leaks
    into it. Only the direct children of the root are considered; nothing is
    ever deleted, and an error stops the operation on the spot without
    undoing earlier moves.
    """

    def __init__(self, config: Configuration):
        snapshot = config.copy()
        self.categories: Dict[str, frozenset] = {
            name: frozenset(normalize_extensions(exts))
            for name, exts in snapshot.categories.items()
        }
        self.unsafe_paths: List[str] = list(snapshot.unsafe_paths)

    def check_root(self, root: Path | str) -> Path:
        """Refuses protected roots before anything touches the filesystem."""
        root = Path(root)
        ensure_not_protected(root, self.unsafe_paths)
        return root

    def _list_files(self, root: Path) -> List[Path]:
        """
        Returns the regular files directly under `root`.

        The listing is fully read before it is returned, so moving files out
        of the directory afterwards cannot disturb it.
        """
        try:
            iterator = os.scandir(root)
        except OSError as e:
            logger.error(f"Could not list directory '{root}': {e}")
            raise DirectoryAccessError(root, cause=e) from e

        files: List[Path] = []
        with iterator:
            while True:
                try:
                    entry = next(iterator)
                except StopIteration:
                    break
                except OSError as e:
                    logger.error(f"Could not read an entry of '{root}': {e}")
                    raise EntryReadError(root, cause=e) from e

                try:
                    # Follows symlinks, so a link to a file counts as a file.
                    is_file = entry.is_file()
                except OSError as e:
                    logger.error(f"Could not read metadata of '{entry.path}': {e}")
                    raise EntryReadError(entry.path, cause=e) from e

                if is_file:
                    files.append(Path(entry.path))
        return files

    def category_for(self, file_path: Path) -> str | None:
        return classify(extension_of(file_path.name), self.categories)

    def preview(self, root: Path | str) -> PreviewResult:
        """
        Counts how many files of each category `root` holds.

        Categories without files are left out. Nothing on disk is changed.
        """
        root = self.check_root(root)
        logger.info(f"Previewing organization of: {root}")

        counts: Dict[str, int] = {}
        for file_path in self._list_files(root):
            category = self.category_for(file_path)
            if category is None:
                logger.debug(f"No category for '{file_path.name}'. Skipping.")
                continue
            counts[category] = counts.get(category, 0) + 1

        # Report in configuration order.
        result = [(name, counts[name]) for name in self.categories if name in counts]
        logger.info(f"Preview found {sum(counts.values())} files in {len(result)} categories.")
        return result

    def commit(self, root: Path | str, on_move: MoveCallback | None = None):
        """
        Creates every category folder in `root` and moves each classified file
        into its folder.

        Args:
            root: The directory to organize.
            on_move: Optional callback, called with (source, destination)
                     after each successful move.
        """
        root = self.check_root(root)
        logger.info(f"Organizing files in: {root}")

        for category in self.categories:
            ensure_category_dir(root, category)

        moved = 0
        for file_path in self._list_files(root):
            category = self.category_for(file_path)
            if category is None:
                continue

            destination = move_into(file_path, root / category)
            moved += 1
            if on_move:
                on_move(file_path, destination)

        logger.info(f"Organization of '{root}' complete. Moved {moved} files.")
