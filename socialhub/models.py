from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass(frozen=True)
class Viewer:
    """The signed-in user a page is rendered for."""

    user_id: str
    email: Optional[str] = None
    is_admin: bool = False

    @classmethod
    def from_user(cls, user: Any, is_admin: bool = False) -> "Viewer":
        return cls(user_id=str(user.id), email=getattr(user, "email", None), is_admin=is_admin)


@dataclass(frozen=True)
class PostCard:
    post_id: Any
    author_id: str
    html: str
    likes_count: int
    liked: bool
    can_like: bool
    can_delete: bool
    created_at: Any = None


@dataclass
class FeedView:
    cards: List[PostCard] = field(default_factory=list)
    empty_title: Optional[str] = None
    empty_hint: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.error is None and not self.cards


@dataclass(frozen=True)
class Stats:
    users: int = 0
    posts: int = 0
    likes: int = 0
    comments: int = 0
