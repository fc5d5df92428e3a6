"""Application configuration loaded from environment variables."""

import os
from dataclasses import dataclass, field


@dataclass(frozen=True)
class AppConfig:
    """Centralized application configuration.

    Required fields have no defaults and will cause a KeyError at startup
    if the corresponding environment variable is missing. Diff settings
    have sensible defaults but can be overridden via environment variables.
    """

    # Required: no defaults, KeyError at startup if missing
    client_id: str
    client_secret: str
    tenant_id: str
    drive_user: str
    old_folder_id: str
    new_folder_id: str

    # Diff settings: defaults provided, overridable via env
    page_size: int = 20
    identity_selector: str = "name"
    include_extensions: tuple[str, ...] = field(default_factory=tuple)


def _parse_extensions(raw: str) -> tuple[str, ...]:
    """Split a comma-separated extension list into lower-cased, dot-prefixed entries."""
    extensions = []
    for part in raw.split(","):
        ext = part.strip().lower()
        if not ext:
            continue
        extensions.append(ext if ext.startswith(".") else f".{ext}")
    return tuple(extensions)


def load_config() -> AppConfig:
    """Construct an AppConfig from environment variables.

    Required environment variables:
        DD_CLIENT_ID: Azure AD application (client) ID.
        DD_CLIENT_SECRET: Azure AD application client secret.
        DD_TENANT_ID: Azure AD tenant ID.
        DD_DRIVE_USER: UPN or object ID of the OneDrive user that owns both folders.
        DD_OLD_FOLDER_ID: Item ID of the reference (old) folder.
        DD_NEW_FOLDER_ID: Item ID of the current (new) folder.

    Optional environment variables (with defaults):
        DD_PAGE_SIZE: Children requested per listing page (default: 20).
        DD_IDENTITY_SELECTOR: "id" or "name", the field that identifies an
            item across both trees (default: name).
        DD_INCLUDE_EXTENSIONS: Comma-separated file extensions taking part in
            the diff, e.g. "mkv,mp4" (default: empty, every file).

    Returns:
        Configured AppConfig instance.
    """
    return AppConfig(
        client_id=os.environ["DD_CLIENT_ID"],
        client_secret=os.environ["DD_CLIENT_SECRET"],
        tenant_id=os.environ["DD_TENANT_ID"],
        drive_user=os.environ["DD_DRIVE_USER"],
        old_folder_id=os.environ["DD_OLD_FOLDER_ID"],
        new_folder_id=os.environ["DD_NEW_FOLDER_ID"],
        page_size=int(os.environ.get("DD_PAGE_SIZE", "20")),
        identity_selector=os.environ.get("DD_IDENTITY_SELECTOR", "name"),
        include_extensions=_parse_extensions(os.environ.get("DD_INCLUDE_EXTENSIONS", "")),
    )
