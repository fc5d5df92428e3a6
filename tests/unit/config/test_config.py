"""Unit tests for config.py — AppConfig and load_config()."""

import os
from unittest.mock import patch

import pytest

from drive_differ.config import AppConfig, _parse_extensions, load_config

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

# Minimal set of required environment variables for load_config()
_REQUIRED_ENV = {
    "DD_CLIENT_ID": "test-client-id",
    "DD_CLIENT_SECRET": "test-secret",
    "DD_TENANT_ID": "test-tenant-id",
    "DD_DRIVE_USER": "user@contoso.onmicrosoft.com",
    "DD_OLD_FOLDER_ID": "old-folder-id",
    "DD_NEW_FOLDER_ID": "new-folder-id",
}


def _config(**overrides: object) -> AppConfig:
    return AppConfig(
        client_id="cid",
        client_secret="cs",
        tenant_id="tid",
        drive_user="u",
        old_folder_id="old",
        new_folder_id="new",
        **overrides,  # type: ignore[arg-type]
    )


# ---------------------------------------------------------------------------
# AppConfig tests
# ---------------------------------------------------------------------------


class TestAppConfig:
    def test_diff_settings_have_defaults(self) -> None:
        config = _config()
        assert config.page_size == 20
        assert config.identity_selector == "name"
        assert config.include_extensions == ()

    def test_diff_settings_can_be_overridden(self) -> None:
        config = _config(page_size=50, identity_selector="id", include_extensions=(".mkv",))
        assert config.page_size == 50
        assert config.identity_selector == "id"
        assert config.include_extensions == (".mkv",)


# ---------------------------------------------------------------------------
# _parse_extensions tests
# ---------------------------------------------------------------------------


class TestParseExtensions:
    def test_empty_string_gives_no_extensions(self) -> None:
        assert _parse_extensions("") == ()

    def test_entries_are_lower_cased_and_dot_prefixed(self) -> None:
        assert _parse_extensions("MKV, .mp4 ,avi") == (".mkv", ".mp4", ".avi")

    def test_blank_entries_are_skipped(self) -> None:
        assert _parse_extensions("mkv,, ,") == (".mkv",)


# ---------------------------------------------------------------------------
# load_config tests
# ---------------------------------------------------------------------------


class TestLoadConfig:
    def test_reads_required_values_from_env(self) -> None:
        with patch.dict(os.environ, _REQUIRED_ENV, clear=True):
            config = load_config()
        assert config.client_id == "test-client-id"
        assert config.drive_user == "user@contoso.onmicrosoft.com"
        assert config.old_folder_id == "old-folder-id"
        assert config.new_folder_id == "new-folder-id"

    def test_optional_values_fall_back_to_defaults(self) -> None:
        with patch.dict(os.environ, _REQUIRED_ENV, clear=True):
            config = load_config()
        assert config.page_size == 20
        assert config.identity_selector == "name"
        assert config.include_extensions == ()

    def test_reads_optional_values_from_env_when_set(self) -> None:
        env = {
            **_REQUIRED_ENV,
            "DD_PAGE_SIZE": "100",
            "DD_IDENTITY_SELECTOR": "id",
            "DD_INCLUDE_EXTENSIONS": "mkv,mp4",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_config()
        assert config.page_size == 100
        assert config.identity_selector == "id"
        assert config.include_extensions == (".mkv", ".mp4")

    def test_raises_key_error_when_folder_id_missing(self) -> None:
        env = {k: v for k, v in _REQUIRED_ENV.items() if k != "DD_NEW_FOLDER_ID"}
        with patch.dict(os.environ, env, clear=True), pytest.raises(KeyError):
            load_config()

    def test_non_numeric_page_size_raises(self) -> None:
        env = {**_REQUIRED_ENV, "DD_PAGE_SIZE": "lots"}
        with patch.dict(os.environ, env, clear=True), pytest.raises(ValueError):
            load_config()
