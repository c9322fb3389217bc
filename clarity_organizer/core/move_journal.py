# clarity_organizer/core/move_journal.py

import json
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List

from .config_manager import write_json_atomically
from .errors import FileMoveError
from .file_operations import move_into

logger = logging.getLogger(__name__)

JOURNAL_FILE_NAME = "last_operation.json"

# Called with (items_processed, total_items, message).
UndoProgressCallback = Callable[[int, int, str], None]


@dataclass
class UndoReport:
    reverted: int = 0
    skipped: List[str] = field(default_factory=list)


class MoveJournal:
    """
    Keeps a log of the moves made by the last organize operation.

    An organize run never rolls itself back, even when it fails half-way. The
    journal lets the user revert whatever was moved, on request.
    """

    def __init__(self, journal_path: Path):
        self.journal_path = Path(journal_path)
        self._lock = threading.Lock()
        self._entries: List[Dict[str, str]] = []

    def begin(self):
        """Starts a fresh journal for a new operation."""
        with self._lock:
            self._entries = []
            self._flush()
        logger.info("Move journal cleared and ready for new operation.")

    def record(self, source_path: Path, dest_path: Path):
        """Appends one completed move. Safe to call from worker threads."""
        entry = {
            "source": str(Path(source_path).absolute()),
            "destination": str(Path(dest_path).absolute()),
        }
        with self._lock:
            self._entries.append(entry)
            self._flush()

    def _flush(self):
        # The journal is a convenience; losing it must not abort an organize.
        try:
            write_json_atomically(self.journal_path, self._entries)
        except OSError as e:
            logger.error(f"Failed to write move journal '{self.journal_path}': {e}")

    def entries(self) -> List[Dict[str, str]]:
        """Reads the journal from disk. A missing or corrupt journal is empty."""
        if not self.journal_path.exists():
            return []
        try:
            with open(self.journal_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read move journal: {e}")
            return []
        if not isinstance(data, list):
            logger.warning("Move journal has an unexpected format. Ignoring it.")
            return []
        return [item for item in data
                if isinstance(item, dict) and "source" in item and "destination" in item]

    def has_entries(self) -> bool:
        return bool(self.entries())

    def undo_last_operation(self, progress_callback: UndoProgressCallback | None = None) -> UndoReport:
        """
        Moves every journaled file back to where it came from, newest first.

        Files that are gone, or whose original location is occupied again, are
        skipped and reported; the rest are still restored.
        """
        report = UndoReport()
        moves_to_undo = self.entries()
        total_moves = len(moves_to_undo)

        if not moves_to_undo:
            logger.warning("No journaled moves found. Nothing to undo.")
            if progress_callback:
                progress_callback(0, 0, "No previous operation found to undo.")
            return report

        logger.info(f"Starting undo for {total_moves} files...")
        for processed, move in enumerate(reversed(moves_to_undo), start=1):
            moved_file = Path(move["destination"])
            original_path = Path(move["source"])

            if not moved_file.exists():
                logger.warning(f"File '{moved_file}' not found. Cannot undo this move.")
                report.skipped.append(str(moved_file))
                message = f"[SKIPPED] File not found: {moved_file.name}"
            else:
                # move_into keeps the file name, so restore via the original parent.
                if moved_file.name != original_path.name:
                    logger.warning(f"Journal entry for '{moved_file}' renamed the file. Skipping.")
                    report.skipped.append(str(moved_file))
                    message = f"[SKIPPED] Name mismatch: {moved_file.name}"
                else:
                    try:
                        move_into(moved_file, original_path.parent)
                        report.reverted += 1
                        message = f"Reverted: {moved_file.name}"
                    except FileMoveError as e:
                        logger.warning(f"Could not revert '{moved_file}': {e}")
                        report.skipped.append(str(moved_file))
                        message = f"[SKIPPED] {moved_file.name}: {e.cause}"

            if progress_callback:
                progress_callback(processed, total_moves, message)

        with self._lock:
            self._entries = []
            self.journal_path.unlink(missing_ok=True)

        logger.info(f"Undo complete. Reverted {report.reverted} files, skipped {len(report.skipped)}.")
        return report
