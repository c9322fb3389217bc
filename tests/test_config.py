# tests/test_config.py

import json

import pytest

from clarity_organizer.core.config_manager import (
    CONFIG_FILE_NAME,
    ConfigStore,
    Configuration,
    normalize_extensions,
)
from clarity_organizer.core.errors import ConfigIOError, ErrorKind


EXPECTED_DEFAULT_DOCUMENT = {
    "categories": {
        "Images": ["jpg", "jpeg", "png", "gif", "bmp", "svg"],
        "Documents": ["pdf", "docx", "doc", "txt", "xlsx", "pptx"],
        "Videos": ["mp4", "mov", "avi", "mkv"],
        "Audio": ["mp3", "wav", "flac"],
        "Archives": ["zip", "rar", "7z"],
    },
    "safe_paths": [],
    "unsafe_paths": ["C:\\Windows", "C:\\Program Files", "/etc", "/bin"],
}


# --- ConfigStore.load ---

def test_first_load_writes_defaults(store):
    config = store.load()

    assert store.config_path.name == CONFIG_FILE_NAME
    assert config == Configuration.default()
    data = json.loads(store.config_path.read_text(encoding="utf-8"))
    assert data == EXPECTED_DEFAULT_DOCUMENT
    assert list(data) == ["categories", "safe_paths", "unsafe_paths"]


def test_first_load_creates_nested_config_dir(tmp_path):
    store = ConfigStore(tmp_path / "a" / "b" / "c")

    store.load()

    assert store.config_path.is_file()


def test_load_reads_persisted_file(store):
    store.config_dir.mkdir(parents=True)
    store.config_path.write_text(json.dumps({
        "categories": {"Code": ["py", "rs"]},
        "safe_paths": ["/home/me/Downloads"],
        "unsafe_paths": ["/boot"],
        "comment": "unknown keys are ignored",
    }), encoding="utf-8")

    config = store.load()

    assert config.categories == {"Code": ["py", "rs"]}
    assert config.safe_paths == ["/home/me/Downloads"]
    assert config.unsafe_paths == ["/boot"]


def test_malformed_file_is_config_io_error(store):
    store.config_dir.mkdir(parents=True)
    store.config_path.write_text("{ not json", encoding="utf-8")

    with pytest.raises(ConfigIOError) as exc_info:
        store.load()

    assert exc_info.value.kind is ErrorKind.CONFIG_IO
    assert isinstance(exc_info.value.cause, json.JSONDecodeError)


def test_non_utf8_file_is_config_io_error(store):
    store.config_dir.mkdir(parents=True)
    store.config_path.write_bytes(
        b'{"categories": {"\xff\xfe": []}, "safe_paths": [], "unsafe_paths": []}'
    )

    with pytest.raises(ConfigIOError) as exc_info:
        store.load()

    assert exc_info.value.kind is ErrorKind.CONFIG_IO
    assert isinstance(exc_info.value.cause, UnicodeDecodeError)


@pytest.mark.parametrize("document", [
    [],
    {"categories": {}, "safe_paths": []},
    {"categories": [], "safe_paths": [], "unsafe_paths": []},
    {"categories": {"Images": "jpg"}, "safe_paths": [], "unsafe_paths": []},
    {"categories": {"Images": ["jpg", 3]}, "safe_paths": [], "unsafe_paths": []},
    {"categories": {}, "safe_paths": "nope", "unsafe_paths": []},
    {"categories": {"../up": ["jpg"]}, "safe_paths": [], "unsafe_paths": []},
])
def test_structurally_wrong_file_is_config_io_error(store, document):
    store.config_dir.mkdir(parents=True)
    store.config_path.write_text(json.dumps(document), encoding="utf-8")

    with pytest.raises(ConfigIOError):
        store.load()


def test_unreachable_config_dir_is_config_io_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file where the directory should be")

    with pytest.raises(ConfigIOError):
        ConfigStore(blocker).load()


# --- ConfigStore.save ---

def test_save_replaces_everything(store):
    store.load()
    replacement = Configuration(categories={"Books": ["epub"]}, safe_paths=["/srv"], unsafe_paths=[])

    store.save(replacement)

    assert store.load() == replacement


def test_save_leaves_no_temporary_files(store):
    store.save(Configuration.default())
    store.save(Configuration.default())

    assert [p.name for p in store.config_dir.iterdir()] == [CONFIG_FILE_NAME]


def test_save_normalizes_extensions(store):
    saved = store.save(Configuration(categories={"Images": [".JPG", " png ", "jpg", ""]}))

    assert saved.categories == {"Images": ["jpg", "png"]}
    assert store.load().categories == {"Images": ["jpg", "png"]}


def test_save_refuses_invalid_category_name(store):
    store.load()
    before = store.config_path.read_text(encoding="utf-8")

    with pytest.raises(ConfigIOError):
        store.save(Configuration(categories={"a/b": ["jpg"]}))

    assert store.config_path.read_text(encoding="utf-8") == before


# --- Extension normalization ---

@pytest.mark.parametrize("raw, expected", [
    ("jpg, png", ["jpg", "png"]),
    (" .JPG ,jpeg,, ", ["jpg", "jpeg"]),
    (["Mp3", "mp3", ".WAV"], ["mp3", "wav"]),
    ("", []),
])
def test_normalize_extensions(raw, expected):
    assert normalize_extensions(raw) == expected


# --- Editing helpers ---

def test_add_category_picks_a_free_name(default_config):
    first = default_config.add_category()
    second = default_config.add_category()

    assert first == "New Category 6"
    assert second == "New Category 7"
    assert default_config.categories[first] == []


def test_add_category_rejects_duplicates_and_bad_names(default_config):
    with pytest.raises(ValueError):
        default_config.add_category("Images")
    with pytest.raises(ValueError):
        default_config.add_category("  ")
    with pytest.raises(ValueError):
        default_config.add_category("..")


def test_rename_category_keeps_extensions_and_position(default_config):
    default_config.rename_category("Videos", "Movies")

    assert list(default_config.categories)[2] == "Movies"
    assert default_config.categories["Movies"] == ["mp4", "mov", "avi", "mkv"]
    assert "Videos" not in default_config.categories


def test_rename_category_edge_cases(default_config):
    before = default_config.copy()

    default_config.rename_category("Audio", "   ")
    default_config.rename_category("Audio", "Audio")
    assert default_config == before

    with pytest.raises(ValueError):
        default_config.rename_category("Audio", "Images")
    with pytest.raises(KeyError):
        default_config.rename_category("Nope", "Other")


def test_remove_category(default_config):
    default_config.remove_category("Archives")

    assert "Archives" not in default_config.categories
    with pytest.raises(KeyError):
        default_config.remove_category("Archives")


def test_set_extensions_from_comma_separated_text(default_config):
    default_config.set_extensions("Audio", "mp3, OGG, .m4a")

    assert default_config.categories["Audio"] == ["mp3", "ogg", "m4a"]


def test_safe_and_unsafe_path_lists(default_config):
    default_config.add_safe_paths("/home/me/Downloads", "/home/me/Desktop", "/home/me/Downloads")
    default_config.remove_safe_path("/home/me/Desktop")
    default_config.add_unsafe_path("/usr")
    default_config.remove_unsafe_path("/bin")

    assert default_config.safe_paths == ["/home/me/Downloads"]
    assert default_config.unsafe_paths == ["C:\\Windows", "C:\\Program Files", "/etc", "/usr"]


def test_copy_is_independent(default_config):
    snapshot = default_config.copy()
    default_config.categories["Images"].append("webp")

    assert "webp" not in snapshot.categories["Images"]
