"""Persist the author profile as a small JSON record."""

from __future__ import annotations

import base64
import json
import logging
import mimetypes
import os
from pathlib import Path

from .cleaning import normalize_whitespace
from .constants import DEFAULT_PROFILE_PATH, PROFILE_PATH_ENV
from .errors import ProfileStoreError
from .models import UserProfile

logger = logging.getLogger(__name__)


def default_profile_path() -> Path:
    """Return the profile file location, honouring ``REDNOTE_PROFILE_PATH``."""

    return Path(os.getenv(PROFILE_PATH_ENV) or DEFAULT_PROFILE_PATH).expanduser()


def load_profile(path: Path | None = None) -> UserProfile | None:
    """Read the stored profile.

    Args:
        path: Profile file; defaults to ``default_profile_path()``.
    Returns:
        The stored profile, or None when nothing usable is stored.
    """

    target = path or default_profile_path()
    if not target.exists():
        return None
    try:
        data = json.loads(target.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise TypeError("profile must be a JSON object")
        return UserProfile.from_dict(data)
    except (OSError, ValueError, TypeError) as exc:
        logger.error("Failed to load profile from %s: %s", target, exc)
        return None


def save_profile(profile: UserProfile, path: Path | None = None) -> Path:
    """Write ``profile`` to disk, replacing any previous record.

    Args:
        profile: Profile to store.
        path: Profile file; defaults to ``default_profile_path()``.
    Returns:
        The path written.
    Raises:
        ProfileStoreError: When the file cannot be written.
    """

    target = path or default_profile_path()
    payload = json.dumps(profile.to_dict(), ensure_ascii=False, indent=2)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(payload, encoding="utf-8")
    except OSError as exc:
        raise ProfileStoreError(f"Failed to save profile to {target}: {exc}") from exc
    return target


def avatar_data_url(image_path: Path) -> str:
    """Return ``image_path`` encoded as a ``data:`` URL.

    Args:
        image_path: Image file chosen as the avatar.
    Returns:
        ``data:<mime>;base64,<payload>`` string.
    """

    mime = mimetypes.guess_type(image_path.name)[0] or "application/octet-stream"
    payload = base64.b64encode(image_path.read_bytes()).decode("ascii")
    return f"data:{mime};base64,{payload}"


def update_profile(
    profile: UserProfile,
    *,
    username: str | None = None,
    avatar_path: Path | None = None,
) -> UserProfile:
    """Return a copy of ``profile`` with the edited fields applied.

    Example:
        >>> update_profile(UserProfile("Old"), username="  New  Name ")
        UserProfile(username='New Name', avatar_url=None)
    """

    new_username = profile.username
    if username is not None and normalize_whitespace(username):
        new_username = normalize_whitespace(username)
    avatar = profile.avatar_url
    if avatar_path is not None:
        avatar = avatar_data_url(avatar_path)
    return UserProfile(username=new_username, avatar_url=avatar)
