from __future__ import annotations

import logging
from typing import Any, Optional

from supabase import Client

from socialhub import db
from socialhub.errors import AuthError, ForbiddenError, UsernameTakenError, error_message
from socialhub.render import default_avatar_url

logger = logging.getLogger(__name__)

ACCESS_DENIED_MESSAGE = "Access denied. Admin privileges required."


def sign_in(client: Client, email: str, password: str) -> Any:
    """Sign in with email + password and return the authenticated user."""
    email = (email or "").strip()
    if not email or not password:
        raise AuthError("Email and password are required.")

    try:
        res = client.auth.sign_in_with_password({"email": email, "password": password})
    except Exception as e:
        logger.info("Sign-in failed for %s: %s", email, error_message(e))
        raise AuthError(error_message(e)) from e

    if res is None or res.user is None:
        raise AuthError("Invalid login credentials")

    logger.info("Signed in user %s", res.user.id)
    return res.user


def sign_in_admin(client: Client, email: str, password: str) -> Any:
    """
    Sign in, then require the profile's is_admin flag. A non-admin is signed
    straight back out so no half-authenticated session is left behind.
    """
    user = sign_in(client, email, password)

    try:
        is_admin = db.get_admin_flag(client, user.id)
    except Exception as e:
        raise AuthError(error_message(e)) from e

    if not is_admin:
        logger.warning("Non-admin user %s attempted admin login", user.id)
        sign_out(client)
        raise ForbiddenError(ACCESS_DENIED_MESSAGE)

    return user


def sign_up(
    client: Client,
    full_name: str,
    username: str,
    email: str,
    password: str,
    bio: Optional[str] = None,
) -> Any:
    """
    Create an auth account plus its profile row.

    The username is checked before the account is created so a taken username
    never leaves an orphaned auth user behind.
    """
    full_name = (full_name or "").strip()
    username = (username or "").strip()
    email = (email or "").strip()
    bio = (bio or "").strip()

    if not full_name or not username or not email or not password:
        raise AuthError("Full name, username, email and password are required.")

    try:
        taken = db.username_exists(client, username)
    except Exception as e:
        raise AuthError(error_message(e)) from e
    if taken:
        raise UsernameTakenError(username)

    try:
        res = client.auth.sign_up({"email": email, "password": password})
    except Exception as e:
        raise AuthError(error_message(e)) from e

    if res is None or res.user is None:
        raise AuthError("Sign-up did not return a user.")

    try:
        db.insert_profile(
            client,
            user_id=res.user.id,
            username=username,
            full_name=full_name,
            bio=bio,
            avatar_url=default_avatar_url(full_name),
        )
    except Exception as e:
        logger.error("Profile insert failed for new user %s: %s", res.user.id, error_message(e))
        raise AuthError(error_message(e)) from e

    logger.info("Created account %s (@%s)", res.user.id, username)
    return res.user


def sign_out(client: Client) -> None:
    client.auth.sign_out()
    logger.info("Signed out")
