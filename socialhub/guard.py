import logging

import streamlit as st

from socialhub import db
from socialhub.auth import ACCESS_DENIED_MESSAGE, sign_out
from socialhub.backend import get_client
from socialhub.config import APP_TITLE
from socialhub.errors import ForbiddenError, NotAuthenticatedError, error_message
from socialhub.models import Viewer
from socialhub.render import default_avatar_url, escape_html

logger = logging.getLogger(__name__)

LOGIN_PAGE = "app.py"
FEED_PAGE = "pages/1_Feed.py"
ADMIN_PAGE = "pages/99_Admin.py"

# Views of the login page (app.py)
VIEW_LOGIN = "login"
VIEW_SIGNUP = "signup"
VIEW_ADMIN_LOGIN = "admin_login"


# -----------------------------
# Session checks
# -----------------------------
def current_user(client):
    """Return the session's user, or None when nobody is signed in."""
    session = client.auth.get_session()
    if session is None or session.user is None:
        return None
    return session.user


def is_admin_user(client, user_id) -> bool:
    """
    True when the user's profile is flagged admin. A failed profile read is
    logged and treated like a missing profile.
    """
    try:
        return bool(db.get_admin_flag(client, user_id))
    except Exception as e:
        logger.error("Error reading admin flag for %s: %s", user_id, error_message(e))
        return False


def check_admin(client):
    """
    Return the signed-in admin user.

    Raises NotAuthenticatedError without a session. Raises ForbiddenError when
    the profile is missing, unreadable or not flagged admin, after signing the
    user out.
    """
    user = current_user(client)
    if user is None:
        raise NotAuthenticatedError("Not signed in.")

    if not is_admin_user(client, user.id):
        logger.warning("User %s is not an admin; signing out", user.id)
        sign_out(client)
        raise ForbiddenError(ACCESS_DENIED_MESSAGE)

    return user


# -----------------------------
# Page guards
# -----------------------------
def hide_sidebar():
    st.markdown(
        """
        <style>
        [data-testid="stSidebar"] { display: none; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def go_to_login(view: str = VIEW_LOGIN):
    st.session_state["home_view"] = view
    hide_sidebar()
    st.switch_page(LOGIN_PAGE)
    st.stop()


def require_login() -> Viewer:
    """Require a session. If there is none, redirect to app.py."""
    user = current_user(get_client())
    if user is None:
        go_to_login(VIEW_LOGIN)
    return Viewer.from_user(user)


def require_admin() -> Viewer:
    """Requires a session whose profile is flagged admin."""
    try:
        user = check_admin(get_client())
    except NotAuthenticatedError:
        go_to_login(VIEW_ADMIN_LOGIN)
    except ForbiddenError as e:
        st.session_state["login_flash"] = str(e)
        go_to_login(VIEW_ADMIN_LOGIN)
    return Viewer.from_user(user, is_admin=True)


# -----------------------------
# Sidebar
# -----------------------------
def hide_login_page_when_logged_in():
    """
    Hides the login entry (app.py) from the multipage sidebar list.
    """
    st.markdown(
        """
        <style>
        section[data-testid="stSidebar"] ul li:first-child {
            display: none !important;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )


def hide_admin_page_for_non_admins(profile):
    """
    Hides the Admin page from the sidebar for non-admin users.
    Assumes Admin is the LAST page in the multipage list.
    """
    if profile and profile.get("is_admin"):
        return

    st.markdown(
        """
        <style>
        section[data-testid="stSidebar"] ul li:last-child {
            display: none !important;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )


def sidebar_divider_compact():
    """A tighter divider than st.sidebar.markdown('---') to reduce vertical whitespace."""
    st.sidebar.markdown(
        '<hr style="margin: 0.25rem 0; border: 0; border-top: 1px solid rgba(49, 51, 63, 0.2);" />',
        unsafe_allow_html=True,
    )


def render_sidebar_header(profile):
    """Sidebar avatar, name and bio for the signed-in user."""
    if not profile:
        return

    full_name = profile.get("full_name") or ""
    avatar = profile.get("avatar_url") or default_avatar_url(full_name)
    st.sidebar.markdown(
        f'<img src="{escape_html(avatar)}" alt="Avatar" '
        'style="width: 64px; height: 64px; border-radius: 50%; object-fit: cover;" />',
        unsafe_allow_html=True,
    )
    st.sidebar.write(f"**{full_name}**")
    st.sidebar.caption(profile.get("bio") or "No bio yet")

    if profile.get("is_admin"):
        st.sidebar.caption("Role: admin")

    sidebar_divider_compact()


def render_logout_button(view_after: str = VIEW_LOGIN):
    """Logout button in sidebar (separate from pages list)."""
    sidebar_divider_compact()
    if st.sidebar.button("Logout", width="stretch"):
        sign_out(get_client())
        go_to_login(view_after)


def page_setup(page_name: str):
    st.set_page_config(page_title=f"{APP_TITLE} - {page_name}", layout="wide")
