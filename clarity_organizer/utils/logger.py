# clarity_organizer/utils/logger.py

import logging
import logging.handlers
from pathlib import Path

LOG_FILE_NAME = "clarity.log"


class LoggerManager:
    """
    Configures the application-wide logging system.

    Two handlers are attached to the root logger:
    1. Console handler: real-time feedback, INFO and above (DEBUG when verbose).
    2. Rotating file handler: DEBUG and above, rotated at 5 MB with five
       backups, written next to the application's configuration.
    """

    def __init__(self, log_dir: Path, verbose: bool = False, log_level=logging.DEBUG):
        self.log_file_path = Path(log_dir) / LOG_FILE_NAME
        self.console_level = logging.DEBUG if verbose else logging.INFO
        self.log_level = log_level
        self.root_logger = logging.getLogger()

    def setup(self):
        """Attaches the handlers to the root logger."""
        # Do nothing if logging was already configured, so repeated calls
        # never stack duplicate handlers.
        if self.root_logger.hasHandlers():
            return

        self.root_logger.setLevel(self.log_level)
        self.root_logger.addHandler(self._create_console_handler())

        try:
            self.root_logger.addHandler(self._create_file_handler())
        except OSError as e:
            logging.warning(f"File logging disabled, could not open '{self.log_file_path}': {e}")

        logging.debug("Logging configured successfully.")

    def _create_console_handler(self) -> logging.StreamHandler:
        handler = logging.StreamHandler()
        handler.setLevel(self.console_level)
        formatter = logging.Formatter(
            '%(asctime)s - [%(levelname)s] - %(message)s',
            datefmt='%H:%M:%S'
        )
        handler.setFormatter(formatter)
        return handler

    def _create_file_handler(self) -> logging.handlers.RotatingFileHandler:
        self.log_file_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            self.log_file_path, maxBytes=5*1024*1024, backupCount=5, encoding='utf-8'
        )
        handler.setLevel(logging.DEBUG)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - [%(levelname)s] - %(filename)s:%(lineno)d - %(message)s'
        )
        handler.setFormatter(formatter)
        return handler


def setup_logging(log_dir: Path, verbose: bool = False):
    """Initializes and configures the application-wide logging system."""
    manager = LoggerManager(log_dir, verbose=verbose)
    manager.setup()
