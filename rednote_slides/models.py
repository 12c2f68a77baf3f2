"""
Typed containers for card content and the author profile.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

from .constants import DEFAULT_USERNAME

Page = List[str]


@dataclass(slots=True)
class UserProfile:
    """Author details drawn in the first card's header.

    Attributes:
        username: Display name next to the avatar.
        avatar_url: ``data:`` URL, ``http(s)`` URL, or local path; ``None``
            draws the initial placeholder instead.
    """

    username: str = DEFAULT_USERNAME
    avatar_url: str | None = None

    def initial(self) -> str:
        """Return the placeholder text shown when there is no avatar.

        Example:
            >>> UserProfile("Mia").initial()
            'M'
            >>> UserProfile("").initial()
            'User'
        """

        return self.username[0] if self.username else "User"

    def to_dict(self) -> Dict[str, Any]:
        return {"username": self.username, "avatarUrl": self.avatar_url}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserProfile":
        """Build a profile from its stored JSON form.

        Example:
            >>> UserProfile.from_dict({"username": "Mia", "avatarUrl": None})
            UserProfile(username='Mia', avatar_url=None)
        """

        username = data.get("username")
        avatar = data.get("avatarUrl")
        if not isinstance(username, str):
            raise TypeError("profile username must be a string")
        if avatar is not None and not isinstance(avatar, str):
            raise TypeError("profile avatarUrl must be a string or null")
        return cls(username=username, avatar_url=avatar)


@dataclass(slots=True)
class ContentData:
    """Title and body of one post."""

    title: str = ""
    body: str = ""

    def is_empty(self) -> bool:
        return not self.title and not self.body

    def combined_text(self) -> str:
        """Return the single block of text sent to the rewrite service."""
        return f"{self.title}\n{self.body}"
