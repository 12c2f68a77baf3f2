"""Environment-driven flags and fixed names."""

from __future__ import annotations

import os

DEBUG_PAGINATION = os.getenv("DEBUG_PAGINATION", "0") not in {
    "",
    "0",
    "false",
    "False",
}
PROFILE_PATH_ENV = "REDNOTE_PROFILE_PATH"
DEFAULT_PROFILE_PATH = "~/.config/rednote-slides/profile.json"
DEFAULT_USERNAME = "你的名字"
SLIDE_FILENAME = "rednote-slide-{number}.{ext}"
LINE_BREAKS = ("\r\n", "\r", "\\n")
