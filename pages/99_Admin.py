import streamlit as st

from socialhub.admin import load_stats, load_users
from socialhub.backend import get_admin_client, get_client
from socialhub.config import load_settings
from socialhub.feed import load_feed
from socialhub.guard import (
    VIEW_ADMIN_LOGIN,
    hide_login_page_when_logged_in,
    page_setup,
    render_logout_button,
    require_admin,
)
from socialhub.logging_config import setup_logging
from socialhub.ui import draw_feed, draw_stats, draw_users, watch_for_changes

page_setup("Admin")
setup_logging(load_settings().log_level)

viewer = require_admin()
client = get_client()

hide_login_page_when_logged_in()
st.sidebar.caption("Role: admin")
render_logout_button(view_after=VIEW_ADMIN_LOGIN)

st.title("Admin Dashboard")

# Counts are fetched fresh on every run, so a rerun after a delete refreshes them too
draw_stats(load_stats(client))

tab_users, tab_posts = st.tabs(["Users", "Posts"])

with tab_users:
    st.subheader("Users")
    rows, message = load_users(client, get_admin_client())
    draw_users(rows, message)

with tab_posts:
    st.subheader("All posts")
    view = load_feed(client, viewer, admin_view=True, empty_hint=None)
    draw_feed(client, viewer, view, key_prefix="admin")

watch_for_changes("admin", ["posts", "profiles"])
