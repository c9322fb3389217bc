# clarity_organizer/core/config_manager.py

import copy
import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List

from platformdirs import user_config_dir

from .errors import ConfigIOError

# A dedicated logger for the module that owns the application's configuration.
logger = logging.getLogger(__name__)

APP_NAME = "clarity-organizer"
CONFIG_FILE_NAME = "config.json"

DEFAULT_CATEGORIES: Dict[str, List[str]] = {
    "Images": ["jpg", "jpeg", "png", "gif", "bmp", "svg"],
    "Documents": ["pdf", "docx", "doc", "txt", "xlsx", "pptx"],
    "Videos": ["mp4", "mov", "avi", "mkv"],
    "Audio": ["mp3", "wav", "flac"],
    "Archives": ["zip", "rar", "7z"],
}

DEFAULT_UNSAFE_PATHS: List[str] = [
    "C:\\Windows",
    "C:\\Program Files",
    "/etc",
    "/bin",
]

NEW_CATEGORY_PREFIX = "New Category"


def default_config_dir() -> Path:
    """Returns the per-user, application-owned configuration directory."""
    return Path(user_config_dir(APP_NAME, appauthor=False))


def normalize_extensions(extensions: Iterable[str] | str) -> List[str]:
    """
    Cleans a user-supplied extension list.

    Accepts either an iterable of strings or a single comma-separated string
    such as "jpg, .PNG,gif". Every entry is stripped, loses its leading dot and
    is lower-cased. Blank entries and repeats are dropped; the first
    occurrence keeps its position.
    """
    if isinstance(extensions, str):
        extensions = extensions.split(",")

    cleaned: List[str] = []
    for ext in extensions:
        if not isinstance(ext, str):
            raise ValueError(f"Extension must be a string, got {type(ext).__name__}.")
        ext = ext.strip().lstrip(".").lower()
        if ext and ext not in cleaned:
            cleaned.append(ext)
    return cleaned


def validate_category_name(name: str) -> str:
    """
    Checks that a category name can double as a single directory name.

    Returns the stripped name, or raises ValueError.
    """
    if not isinstance(name, str):
        raise ValueError(f"Category name must be a string, got {type(name).__name__}.")
    stripped = name.strip()
    if not stripped:
        raise ValueError("Category name cannot be empty.")
    if stripped in (".", ".."):
        raise ValueError(f"'{stripped}' is not a valid category name.")
    if any(ch in stripped for ch in ("/", "\\", "\0")):
        raise ValueError(f"Category name '{stripped}' must not contain path separators.")
    return stripped


def _string_list(value: Any, field_name: str) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"'{field_name}' must be an array of strings.")
    return list(value)


@dataclass
class Configuration:
    """
    The complete, user-editable organizer configuration.

    Category names map to their extension lists. The lists are treated as sets
    when classifying; they stay lists so the persisted JSON is stable.
    """
    categories: Dict[str, List[str]] = field(default_factory=dict)
    safe_paths: List[str] = field(default_factory=list)
    unsafe_paths: List[str] = field(default_factory=list)

    @classmethod
    def default(cls) -> "Configuration":
        """Builds the first-run configuration."""
        return cls(
            categories={name: list(exts) for name, exts in DEFAULT_CATEGORIES.items()},
            safe_paths=[],
            unsafe_paths=list(DEFAULT_UNSAFE_PATHS),
        )

    @classmethod
    def from_dict(cls, data: Any) -> "Configuration":
        """
        Builds a Configuration from the decoded JSON document.

        All three top-level fields are required; unknown extra fields are
        ignored. Raises ValueError on any structural problem.
        """
        if not isinstance(data, dict):
            raise ValueError("Configuration document must be a JSON object.")

        for key in ("categories", "safe_paths", "unsafe_paths"):
            if key not in data:
                raise ValueError(f"Configuration is missing the '{key}' field.")

        raw_categories = data["categories"]
        if not isinstance(raw_categories, dict):
            raise ValueError("'categories' must be an object mapping names to extension arrays.")

        categories: Dict[str, List[str]] = {}
        for name, extensions in raw_categories.items():
            clean_name = validate_category_name(name)
            if clean_name in categories:
                raise ValueError(f"Category '{clean_name}' is defined more than once.")
            categories[clean_name] = normalize_extensions(
                _string_list(extensions, f"categories.{name}")
            )

        return cls(
            categories=categories,
            safe_paths=_string_list(data["safe_paths"], "safe_paths"),
            unsafe_paths=_string_list(data["unsafe_paths"], "unsafe_paths"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "categories": {name: list(exts) for name, exts in self.categories.items()},
            "safe_paths": list(self.safe_paths),
            "unsafe_paths": list(self.unsafe_paths),
        }

    def copy(self) -> "Configuration":
        """Returns an independent snapshot of this configuration."""
        return copy.deepcopy(self)

    def normalized(self) -> "Configuration":
        """
        Returns a checked copy with every extension list cleaned.

        Raises ValueError if a hand-edited configuration broke an invariant.
        """
        return Configuration.from_dict(self.to_dict())

    # --- Editing helpers ---
    # These operate on a caller-owned draft. The draft is persisted wholesale
    # through ConfigStore.save / AppState.save_config.

    def add_category(self, name: str | None = None) -> str:
        """Adds an empty category and returns its name."""
        if name is None:
            index = len(self.categories) + 1
            name = f"{NEW_CATEGORY_PREFIX} {index}"
            while name in self.categories:
                index += 1
                name = f"{NEW_CATEGORY_PREFIX} {index}"
        name = validate_category_name(name)
        if name in self.categories:
            raise ValueError(f"Category '{name}' already exists.")
        self.categories[name] = []
        logger.debug(f"Added category '{name}'.")
        return name

    def remove_category(self, name: str):
        if name not in self.categories:
            raise KeyError(name)
        del self.categories[name]
        logger.debug(f"Removed category '{name}'.")

    def rename_category(self, old_name: str, new_name: str):
        """
        Renames a category, keeping its extensions.

        A blank new name, or one equal to the old name, leaves the
        configuration unchanged.
        """
        if old_name not in self.categories:
            raise KeyError(old_name)
        if not new_name.strip() or new_name.strip() == old_name:
            return
        new_name = validate_category_name(new_name)
        if new_name in self.categories:
            raise ValueError(f"Category '{new_name}' already exists.")

        # Rebuild the mapping so the renamed category keeps its position.
        self.categories = {
            (new_name if name == old_name else name): exts
            for name, exts in self.categories.items()
        }
        logger.debug(f"Renamed category '{old_name}' to '{new_name}'.")

    def set_extensions(self, name: str, extensions: Iterable[str] | str):
        if name not in self.categories:
            raise KeyError(name)
        self.categories[name] = normalize_extensions(extensions)

    def add_safe_paths(self, *paths: str):
        for path in paths:
            if path not in self.safe_paths:
                self.safe_paths.append(path)

    def remove_safe_path(self, path: str):
        self.safe_paths = [p for p in self.safe_paths if p != path]

    def add_unsafe_path(self, path: str):
        if path not in self.unsafe_paths:
            self.unsafe_paths.append(path)

    def remove_unsafe_path(self, path: str):
        self.unsafe_paths = [p for p in self.unsafe_paths if p != path]


def write_json_atomically(target: Path, data: Any):
    """
    Serializes `data` fully in memory, then swaps it into place.

    The document is written to a temporary file in the target's directory and
    renamed over the target, so readers see either the old or the new file.
    """
    payload = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    target.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp_name, target)
    except BaseException:
        # Never leave a stray temp file next to the real one.
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


class ConfigStore:
    """
    Loads and persists the Configuration as a single JSON document.
    """

    def __init__(self, config_dir: Path | None = None):
        self.config_dir = Path(config_dir) if config_dir is not None else default_config_dir()
        self.config_path = self.config_dir / CONFIG_FILE_NAME

    def load(self) -> Configuration:
        """
        Reads the persisted configuration, creating it with defaults on first run.
        """
        if not self.config_path.exists():
            logger.info(f"No configuration found at '{self.config_path}'. Writing defaults.")
            config = Configuration.default()
            self.save(config)
            return config

        logger.info(f"Loading configuration from: {self.config_path}")
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            logger.error(f"Failed to read configuration file: {e}")
            raise ConfigIOError("Could not read the configuration file.",
                                config_path=self.config_path, cause=e) from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Configuration file is not valid JSON: {e}")
            raise ConfigIOError("Could not decode the configuration file.",
                                config_path=self.config_path, cause=e) from e

        try:
            config = Configuration.from_dict(data)
        except ValueError as e:
            logger.error(f"Configuration file has an invalid structure: {e}")
            raise ConfigIOError(f"Invalid configuration: {e}",
                                config_path=self.config_path, cause=e) from e

        logger.info(f"Loaded {len(config.categories)} categories and "
                    f"{len(config.unsafe_paths)} protected paths.")
        return config

    def save(self, config: Configuration) -> Configuration:
        """
        Replaces the persisted configuration with `config` as a whole.

        Returns the normalized configuration that was written.
        """
        try:
            config = config.normalized()
        except ValueError as e:
            raise ConfigIOError(f"Refusing to save an invalid configuration: {e}",
                                config_path=self.config_path, cause=e) from e

        try:
            write_json_atomically(self.config_path, config.to_dict())
        except OSError as e:
            logger.error(f"Failed to save configuration file: {e}", exc_info=True)
            raise ConfigIOError("Could not save the configuration file.",
                                config_path=self.config_path, cause=e) from e
        logger.info(f"Configuration saved to: {self.config_path}")
        return config
