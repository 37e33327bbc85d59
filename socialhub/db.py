from __future__ import annotations

# Table helpers over the Supabase data API. Row-level security on the backend
# decides what each session may read or write; these helpers only shape queries.

from typing import Any, Dict, List, Optional, Set

from supabase import Client

POST_SELECT = "*, profiles:user_id (username, full_name, avatar_url)"


def _maybe_single_data(res) -> Optional[Dict[str, Any]]:
    # Newer postgrest clients return None instead of an empty response
    if res is None:
        return None
    return res.data or None


# -----------------------------
# Profiles
# -----------------------------
def get_profile(client: Client, user_id: str) -> Optional[Dict[str, Any]]:
    res = client.table("profiles").select("*").eq("id", user_id).maybe_single().execute()
    return _maybe_single_data(res)


def get_admin_flag(client: Client, user_id: str) -> Optional[bool]:
    """Return the profile's is_admin flag, or None when there is no profile."""
    res = client.table("profiles").select("is_admin").eq("id", user_id).maybe_single().execute()
    row = _maybe_single_data(res)
    if row is None:
        return None
    return bool(row.get("is_admin"))


def username_exists(client: Client, username: str) -> bool:
    res = client.table("profiles").select("username").eq("username", username).maybe_single().execute()
    return _maybe_single_data(res) is not None


def insert_profile(
    client: Client,
    user_id: str,
    username: str,
    full_name: str,
    bio: str,
    avatar_url: str,
) -> None:
    client.table("profiles").insert(
        [
            {
                "id": user_id,
                "username": username,
                "full_name": full_name,
                "bio": bio,
                "avatar_url": avatar_url,
            }
        ]
    ).execute()


def update_profile(client: Client, user_id: str, full_name: str, bio: str, avatar_url: str) -> None:
    client.table("profiles").update(
        {"full_name": full_name, "bio": bio, "avatar_url": avatar_url}
    ).eq("id", user_id).execute()


def list_profiles(client: Client) -> List[Dict[str, Any]]:
    res = client.table("profiles").select("*").order("created_at", desc=True).execute()
    return res.data or []


# -----------------------------
# Posts
# -----------------------------
def list_posts(client: Client, author_id: Optional[str] = None) -> List[Dict[str, Any]]:
    """Posts newest first, each carrying its author's fields under 'profiles'."""
    query = client.table("posts").select(POST_SELECT)
    if author_id is not None:
        query = query.eq("user_id", author_id)
    res = query.order("created_at", desc=True).execute()
    return res.data or []


def insert_post(client: Client, user_id: str, content: str, image_url: Optional[str]) -> None:
    client.table("posts").insert(
        [{"user_id": user_id, "content": content, "image_url": image_url}]
    ).execute()


def delete_post(client: Client, post_id: Any) -> None:
    client.table("posts").delete().eq("id", post_id).execute()


# -----------------------------
# Likes
# -----------------------------
def list_liked_post_ids(client: Client, user_id: str) -> Set[Any]:
    res = client.table("likes").select("post_id").eq("user_id", user_id).execute()
    return {row["post_id"] for row in (res.data or [])}


def insert_like(client: Client, post_id: Any, user_id: str) -> None:
    client.table("likes").insert([{"post_id": post_id, "user_id": user_id}]).execute()


def delete_like(client: Client, post_id: Any, user_id: str) -> None:
    client.table("likes").delete().eq("post_id", post_id).eq("user_id", user_id).execute()


# -----------------------------
# Counts
# -----------------------------
def count_rows(client: Client, table: str) -> int:
    res = client.table(table).select("*", count="exact", head=True).execute()
    return int(res.count or 0)
