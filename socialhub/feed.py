from __future__ import annotations

# Post feed loading and the like/delete/create handlers bound to it.
#
# Every handler only talks to the backend; the page performs a full rerun
# afterwards so the feed (including like state) is always re-fetched rather
# than patched locally.

import logging
from datetime import datetime
from typing import Any, Optional, Set

from supabase import Client

from socialhub import db
from socialhub.errors import MutationError, error_message
from socialhub.models import FeedView, PostCard, Viewer
from socialhub.render import post_card_html

logger = logging.getLogger(__name__)

EMPTY_TITLE = "No posts yet"
FEED_EMPTY_HINT = "Be the first to share something!"
PROFILE_EMPTY_HINT = "Share your first moment!"
LOAD_ERROR = "Error loading posts"


def load_feed(
    client: Client,
    viewer: Viewer,
    *,
    author_id: Optional[str] = None,
    admin_view: bool = False,
    empty_hint: Optional[str] = FEED_EMPTY_HINT,
    now: Optional[datetime] = None,
) -> FeedView:
    """
    Fetch posts (newest first) and build their cards for `viewer`.

    author_id limits the feed to one author (profile page). admin_view skips
    the viewer's like state and offers delete on every post. Fetch failures
    come back as FeedView.error; this function does not raise for them.
    """
    try:
        posts = db.list_posts(client, author_id=author_id)
    except Exception as e:
        logger.error("Error loading posts: %s", error_message(e))
        return FeedView(error=LOAD_ERROR)

    if not posts:
        return FeedView(empty_title=EMPTY_TITLE, empty_hint=empty_hint)

    liked_ids: Set[Any] = set()
    if not admin_view:
        try:
            liked_ids = db.list_liked_post_ids(client, viewer.user_id)
        except Exception as e:
            logger.warning("Could not load likes for %s: %s", viewer.user_id, error_message(e))

    cards = []
    for post in posts:
        author_id_of_post = str(post.get("user_id"))
        cards.append(
            PostCard(
                post_id=post["id"],
                author_id=author_id_of_post,
                html=post_card_html(post, now=now),
                likes_count=int(post.get("likes_count") or 0),
                liked=post["id"] in liked_ids,
                can_like=not admin_view,
                can_delete=admin_view or author_id_of_post == viewer.user_id,
                created_at=post.get("created_at"),
            )
        )

    return FeedView(cards=cards)


def toggle_like(client: Client, viewer: Viewer, post_id: Any, currently_liked: bool) -> Optional[bool]:
    """
    Remove the viewer's like if present, otherwise add one.

    Returns the new like state, or None when the backend rejected the change
    (logged; the caller leaves the UI as it is).
    """
    try:
        if currently_liked:
            db.delete_like(client, post_id, viewer.user_id)
        else:
            db.insert_like(client, post_id, viewer.user_id)
    except Exception as e:
        action = "removing" if currently_liked else "adding"
        logger.error("Error %s like on post %s: %s", action, post_id, error_message(e))
        return None

    return not currently_liked


def delete_post(client: Client, post_id: Any) -> None:
    try:
        db.delete_post(client, post_id)
    except Exception as e:
        logger.error("Error deleting post %s: %s", post_id, error_message(e))
        raise MutationError(f"Error deleting post: {error_message(e)}") from e
    logger.info("Deleted post %s", post_id)


def create_post(client: Client, viewer: Viewer, content: str, image_url: Optional[str] = None) -> None:
    content = (content or "").strip()
    image_url = (image_url or "").strip() or None
    if not content:
        raise MutationError("Post content cannot be empty.")

    try:
        db.insert_post(client, viewer.user_id, content, image_url)
    except Exception as e:
        logger.error("Error creating post for %s: %s", viewer.user_id, error_message(e))
        raise MutationError(f"Error creating post: {error_message(e)}") from e
