# clarity_organizer/core/app_state.py

import logging
import threading
from pathlib import Path

from .config_manager import ConfigStore, Configuration
from .move_journal import JOURNAL_FILE_NAME, MoveJournal, UndoProgressCallback, UndoReport
from .organization_engine import MoveCallback, OrganizationEngine, PreviewResult

logger = logging.getLogger(__name__)


class AppState:
    """
    The single entry point a front end uses to talk to the organizer core.

    Holds the current configuration behind one lock. Operations copy out what
    they need while holding it and do their slow filesystem work afterwards,
    so a configuration saved mid-operation never changes a running preview or
    organize, and a slow directory listing never blocks configuration reads.
    """

    def __init__(self, store: ConfigStore, config: Configuration, journal: MoveJournal | None = None):
        self.store = store
        self._config = config
        self._lock = threading.Lock()
        self.journal = journal or MoveJournal(store.config_dir / JOURNAL_FILE_NAME)

    @classmethod
    def startup(cls, store: ConfigStore | None = None) -> "AppState":
        """
        Loads the configuration and builds the application state.

        A ConfigIOError raised here means the organizer cannot run at all.
        """
        store = store or ConfigStore()
        config = store.load()
        logger.info("Application state initialised.")
        return cls(store, config)

    def _snapshot(self) -> Configuration:
        with self._lock:
            return self._config.copy()

    def get_current_config(self) -> Configuration:
        """Returns an independent copy of the in-memory configuration."""
        return self._snapshot()

    def save_config(self, new_config: Configuration):
        """
        Persists `new_config` and makes it the current configuration.

        The in-memory value only changes once the file has been written.
        """
        with self._lock:
            self._config = self.store.save(new_config.copy())
        logger.info("Configuration replaced.")

    def preview_organization(self, path: str | Path) -> PreviewResult:
        engine = OrganizationEngine(self._snapshot())
        return engine.preview(Path(path))

    def organize_files(self, path: str | Path, on_move: MoveCallback | None = None):
        engine = OrganizationEngine(self._snapshot())
        root = engine.check_root(path)

        # The previous journal is only replaced once the root has passed the
        # protection gate.
        self.journal.begin()

        def _record(source: Path, destination: Path):
            self.journal.record(source, destination)
            if on_move:
                on_move(source, destination)

        engine.commit(root, on_move=_record)

    def undo_last_operation(self, progress_callback: UndoProgressCallback | None = None) -> UndoReport:
        return self.journal.undo_last_operation(progress_callback)
