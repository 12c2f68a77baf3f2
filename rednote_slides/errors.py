"""Exception types raised around the slide pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence


class SlideError(Exception):
    """Base class for rednote-slides failures."""


class SettingsError(SlideError, ValueError):
    """Card settings could not be loaded or contain unknown fields."""


class PolishError(SlideError):
    """The rewrite service failed or returned an unusable result."""


class CaptureError(SlideError):
    """A slide could not be rasterised even at the lowest fidelity.

    Args:
        message: Error description.
        written: Images that were written before the failure was reported.
    """

    def __init__(self, message: str, *, written: Sequence[Path] = ()) -> None:
        super().__init__(message)
        self.written: List[Path] = list(written)


class ProfileStoreError(SlideError):
    """The stored profile could not be written."""
