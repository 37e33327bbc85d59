from __future__ import annotations

# Admin dashboard data: aggregate counts and the users table.

import logging
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd
from supabase import Client

from socialhub import db
from socialhub.models import Stats

logger = logging.getLogger(__name__)

COUNTED_TABLES = ("profiles", "posts", "likes", "comments")
USERS_LOAD_ERROR = "Error loading users"
NO_USERS = "No users found"
MISSING_EMAIL = "N/A"

USER_COLUMNS = ["Username", "Full name", "Email", "Admin", "Joined"]


def _count_or_zero(client: Client, table: str) -> int:
    try:
        return db.count_rows(client, table)
    except Exception as e:
        logger.warning("Count on %s failed: %s", table, e)
        return 0


def load_stats(client: Client) -> Stats:
    """One count-only query per table; anything missing counts as 0."""
    counts = {table: _count_or_zero(client, table) for table in COUNTED_TABLES}
    return Stats(
        users=counts["profiles"],
        posts=counts["posts"],
        likes=counts["likes"],
        comments=counts["comments"],
    )


def list_auth_emails(client: Optional[Client]) -> Dict[str, str]:
    """
    Map auth user id -> email via the auth admin API.
    Returns an empty map (and logs) when the listing is not permitted.
    """
    if client is None:
        logger.error("Error loading auth users: no service-role client configured")
        return {}

    try:
        users = client.auth.admin.list_users()
    except Exception as e:
        logger.error("Error loading auth users: %s", e)
        return {}

    # Older clients wrapped the list in a response object
    users = getattr(users, "users", users) or []
    return {str(u.id): u.email for u in users if getattr(u, "email", None)}


def load_users(client: Client, admin_client: Optional[Client]) -> Tuple[List[Dict[str, Any]], Optional[str]]:
    """
    Profiles (newest first) joined with their auth emails.

    Returns (rows, message). message is set when there is nothing to show:
    a fetch error or an empty table.
    """
    try:
        profiles = db.list_profiles(client)
    except Exception as e:
        logger.error("Error loading profiles: %s", e)
        return [], USERS_LOAD_ERROR

    emails = list_auth_emails(admin_client if admin_client is not None else client)

    if not profiles:
        return [], NO_USERS

    rows = []
    for p in profiles:
        rows.append(
            {
                "id": str(p.get("id")),
                "username": p.get("username") or "",
                "full_name": p.get("full_name") or "",
                "email": emails.get(str(p.get("id"))) or MISSING_EMAIL,
                "is_admin": bool(p.get("is_admin")),
                "created_at": p.get("created_at"),
            }
        )
    return rows, None


def users_frame(rows: List[Dict[str, Any]]) -> pd.DataFrame:
    """Table shown on the dashboard. Joined dates are formatted DD Mon YYYY."""
    if not rows:
        return pd.DataFrame(columns=USER_COLUMNS)

    df = pd.DataFrame(rows)
    out = pd.DataFrame(
        {
            "Username": "@" + df["username"].astype(str),
            "Full name": df["full_name"],
            "Email": df["email"],
            "Admin": df["is_admin"].map(lambda v: "ADMIN" if v else "-"),
            "Joined": pd.to_datetime(df["created_at"], errors="coerce", utc=True).dt.strftime("%d %b %Y"),
        }
    )
    return out[USER_COLUMNS]
