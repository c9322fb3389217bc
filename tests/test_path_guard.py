# tests/test_path_guard.py

from pathlib import Path

import pytest

from clarity_organizer.core.config_manager import DEFAULT_UNSAFE_PATHS
from clarity_organizer.core.errors import ProtectedPathError
from clarity_organizer.core.path_guard import ensure_not_protected, is_protected


@pytest.mark.parametrize("candidate", [
    "/etc",
    "/etc/",
    "/etc/nginx",
    "/bin/extra",
    "/home/me/etc",
    "C:\\Windows",
    "C:\\Windows\\System32",
    "C:\\Program Files\\App",
    Path("/etc/ssl"),
])
def test_default_rules_protect(candidate):
    assert is_protected(candidate, DEFAULT_UNSAFE_PATHS)


@pytest.mark.parametrize("candidate", [
    "/home/me/Downloads",
    "/tmp/work",
    "/usr/local/bin/tools",
    "D:\\Windows",
])
def test_unrelated_paths_are_allowed(candidate):
    assert not is_protected(candidate, DEFAULT_UNSAFE_PATHS)


def test_matching_is_by_string_not_by_component():
    """'/etcetera' starts with '/etc', so it is protected too."""
    assert is_protected("/etcetera", ["/etc"])
    assert is_protected("/data/cabinet", ["net"])


def test_trailing_separator_in_rule_is_ignored():
    assert is_protected("/srv/media", ["/srv/media/"])


def test_blank_rules_protect_nothing():
    assert not is_protected("/home/me", ["", "   "])


def test_empty_rule_list_protects_nothing():
    assert not is_protected("/etc", [])


def test_ensure_not_protected_names_the_path():
    with pytest.raises(ProtectedPathError) as exc_info:
        ensure_not_protected("/etc/nginx", ["/etc"])

    assert exc_info.value.path == "/etc/nginx"
    assert "/etc/nginx" in str(exc_info.value)


def test_ensure_not_protected_passes_safe_paths():
    ensure_not_protected("/home/me/Downloads", DEFAULT_UNSAFE_PATHS)
