from __future__ import annotations

# HTML fragments for post cards. Everything user-supplied goes through
# escape_html before it is placed into markup.

import html
import math
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from urllib.parse import quote

import pandas as pd

AVATAR_BASE_URL = "https://ui-avatars.com/api/"

# Largest unit first
TIME_UNITS = (
    ("year", 31536000),
    ("month", 2592000),
    ("week", 604800),
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
)


def escape_html(text: Optional[str]) -> str:
    if text is None:
        return ""
    return html.escape(str(text), quote=True)


def default_avatar_url(full_name: str, styled: bool = True) -> str:
    """
    Generated placeholder avatar. The styled variant (brand colour, 200px) is
    what gets stored on profiles; the plain one is the fallback on post cards.
    """
    url = f"{AVATAR_BASE_URL}?name={quote(full_name or '', safe='')}"
    if styled:
        url += "&background=667eea&color=fff&size=200"
    return url


def parse_timestamp(value: Any) -> datetime:
    """Parse a backend timestamp (ISO string or datetime) into an aware UTC datetime."""
    ts = pd.to_datetime(value, utc=True)
    return ts.to_pydatetime()


def time_since(created_at: Any, now: Optional[datetime] = None) -> str:
    then = parse_timestamp(created_at)
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    seconds = math.floor((now - then).total_seconds())
    for unit, unit_seconds in TIME_UNITS:
        interval = seconds // unit_seconds
        if interval >= 1:
            return f"{interval} {unit}{'s' if interval > 1 else ''} ago"
    return "just now"


def format_joined_date(created_at: Any) -> str:
    """e.g. 'March 4, 2025'"""
    dt = parse_timestamp(created_at)
    return f"{dt.strftime('%B')} {dt.day}, {dt.year}"


def post_card_html(post: Dict[str, Any], now: Optional[datetime] = None) -> str:
    """
    The static part of a post card: header, content and optional image.
    Like/delete controls are drawn as widgets next to it.
    """
    author = post.get("profiles") or {}
    full_name = author.get("full_name") or ""
    avatar = author.get("avatar_url") or default_avatar_url(full_name, styled=False)
    image_url = post.get("image_url")

    image_html = ""
    if image_url:
        image_html = f'<img src="{escape_html(image_url)}" alt="Post image" class="post-image">'

    return (
        '<div class="post-card">'
        '<div class="post-header">'
        f'<img src="{escape_html(avatar)}" alt="Avatar" class="avatar-medium">'
        '<div class="post-author-info">'
        f'<div class="post-author-name">{escape_html(full_name)}</div>'
        f'<div class="post-username">@{escape_html(author.get("username"))}</div>'
        "</div>"
        f'<div class="post-time">{time_since(post["created_at"], now=now)}</div>'
        "</div>"
        f'<div class="post-content">{escape_html(post.get("content"))}</div>'
        f"{image_html}"
        "</div>"
    )


def like_label(liked: bool, likes_count: Optional[int]) -> str:
    return f"{'❤️' if liked else '🤍'} {likes_count or 0}"


def empty_state_html(title: str, hint: Optional[str] = None) -> str:
    hint_html = f"<p>{escape_html(hint)}</p>" if hint else ""
    return f'<div class="empty-state"><h3>{escape_html(title)}</h3>{hint_html}</div>'


def error_html(message: str) -> str:
    return f'<div class="error-message show">{escape_html(message)}</div>'


FEED_CSS = """
<style>
.post-card { border: 1px solid rgba(49, 51, 63, 0.2); border-radius: 12px; padding: 1rem; margin-bottom: 0.5rem; }
.post-header { display: flex; align-items: center; gap: 0.75rem; }
.avatar-medium { width: 44px; height: 44px; border-radius: 50%; object-fit: cover; }
.post-author-info { flex: 1; }
.post-author-name { font-weight: 600; }
.post-username, .post-time { color: rgba(49, 51, 63, 0.6); font-size: 0.85rem; }
.post-content { margin-top: 0.75rem; white-space: pre-wrap; }
.post-image { margin-top: 0.75rem; max-width: 100%; border-radius: 8px; }
.empty-state { text-align: center; padding: 2rem 0; color: rgba(49, 51, 63, 0.6); }
.error-message.show { color: #b00020; padding: 0.75rem; }
</style>
"""
