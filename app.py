import logging

import streamlit as st

from socialhub.auth import sign_in, sign_in_admin, sign_up
from socialhub.backend import get_client
from socialhub.config import APP_TITLE, load_settings
from socialhub.errors import AuthError, ForbiddenError
from socialhub.guard import (
    ADMIN_PAGE,
    FEED_PAGE,
    VIEW_ADMIN_LOGIN,
    VIEW_LOGIN,
    VIEW_SIGNUP,
    current_user,
    hide_sidebar,
    is_admin_user,
)
from socialhub.logging_config import setup_logging

st.set_page_config(page_title=APP_TITLE, layout="centered")

logger = logging.getLogger("socialhub.app")


def ensure_session_state():
    if "home_view" not in st.session_state:
        st.session_state["home_view"] = VIEW_LOGIN
    if "login_flash" not in st.session_state:
        st.session_state["login_flash"] = ""


def _set_view(view: str):
    st.session_state["home_view"] = view
    st.rerun()


def redirect_if_signed_in(client, view: str):
    """
    A visitor who already has a session skips the form: regular views go to
    the feed, the admin view goes to the dashboard only for admins.
    """
    user = current_user(client)
    if user is None:
        return

    if view == VIEW_ADMIN_LOGIN:
        if is_admin_user(client, user.id):
            st.switch_page(ADMIN_PAGE)
        return

    st.switch_page(FEED_PAGE)


def show_flash():
    msg = st.session_state.get("login_flash")
    if msg:
        st.error(msg)
        st.session_state["login_flash"] = ""


def home_login(client):
    st.title(APP_TITLE)
    st.write("Share moments with friends. Log in to see what's new.")
    show_flash()

    with st.form("login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Login")

    if submitted:
        try:
            sign_in(client, email, password)
            st.switch_page(FEED_PAGE)
        except AuthError as e:
            st.error(str(e))

    st.markdown("---")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("Create an account", width="stretch"):
            _set_view(VIEW_SIGNUP)
    with col2:
        if st.button("Admin login", width="stretch"):
            _set_view(VIEW_ADMIN_LOGIN)


def home_signup(client):
    st.title("Sign up")

    with st.form("signup_form"):
        full_name = st.text_input("Full name")
        username = st.text_input("Username")
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        password2 = st.text_input("Confirm password", type="password")
        bio = st.text_area("Bio (optional)")
        submitted = st.form_submit_button("Sign Up")

    if submitted:
        if password != password2:
            st.error("Passwords do not match.")
        else:
            try:
                sign_up(client, full_name, username, email, password, bio)
                st.switch_page(FEED_PAGE)
            except AuthError as e:
                st.error(str(e))

    if st.button("Back to Login"):
        _set_view(VIEW_LOGIN)


def home_admin_login(client):
    st.title("Admin login")
    show_flash()

    with st.form("admin_login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Login as Admin")

    if submitted:
        try:
            sign_in_admin(client, email, password)
            st.switch_page(ADMIN_PAGE)
        except ForbiddenError as e:
            # The non-admin has already been signed back out
            logger.info("Admin login refused: %s", e)
            st.error(str(e))
        except AuthError as e:
            st.error(str(e))

    if st.button("Back to Login"):
        _set_view(VIEW_LOGIN)


def main():
    setup_logging(load_settings().log_level)
    ensure_session_state()
    hide_sidebar()

    client = get_client()
    view = st.session_state["home_view"]
    redirect_if_signed_in(client, view)

    if view == VIEW_SIGNUP:
        home_signup(client)
    elif view == VIEW_ADMIN_LOGIN:
        home_admin_login(client)
    else:
        home_login(client)


if __name__ == "__main__":
    main()
