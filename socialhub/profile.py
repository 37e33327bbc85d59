from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from supabase import Client

from socialhub import db
from socialhub.errors import MutationError, error_message
from socialhub.models import Viewer
from socialhub.render import default_avatar_url

logger = logging.getLogger(__name__)


def load_profile(client: Client, viewer: Viewer) -> Optional[Dict[str, Any]]:
    """The viewer's profile row, or None if it is missing or could not be read."""
    try:
        return db.get_profile(client, viewer.user_id)
    except Exception as e:
        logger.error("Error loading profile %s: %s", viewer.user_id, e)
        return None


def save_profile(client: Client, viewer: Viewer, full_name: str, bio: str, avatar_url: str) -> None:
    """
    Update the viewer's editable fields. An empty avatar URL falls back to the
    generated placeholder for the (new) full name.
    """
    full_name = (full_name or "").strip()
    if not full_name:
        raise MutationError("Full name is required.")

    avatar_url = (avatar_url or "").strip() or default_avatar_url(full_name)

    try:
        db.update_profile(client, viewer.user_id, full_name, (bio or "").strip(), avatar_url)
    except Exception as e:
        logger.error("Error updating profile %s: %s", viewer.user_id, e)
        raise MutationError(f"Error updating profile: {error_message(e)}") from e

    logger.info("Updated profile %s", viewer.user_id)
