import streamlit as st

from socialhub.backend import get_client
from socialhub.config import load_settings
from socialhub.feed import FEED_EMPTY_HINT, load_feed
from socialhub.guard import (
    hide_admin_page_for_non_admins,
    hide_login_page_when_logged_in,
    page_setup,
    render_logout_button,
    render_sidebar_header,
    require_login,
)
from socialhub.logging_config import setup_logging
from socialhub.profile import load_profile
from socialhub.ui import draw_feed, draw_post_form, watch_for_changes

page_setup("Feed")
setup_logging(load_settings().log_level)

viewer = require_login()
client = get_client()
profile = load_profile(client, viewer)

hide_login_page_when_logged_in()
hide_admin_page_for_non_admins(profile)
render_sidebar_header(profile)
render_logout_button()

st.title("Feed")

# -----------------------------
# New post
# -----------------------------
draw_post_form(client, viewer)

st.markdown("---")

# -----------------------------
# Posts
# -----------------------------
view = load_feed(client, viewer, empty_hint=FEED_EMPTY_HINT)
draw_feed(client, viewer, view, key_prefix="feed")

watch_for_changes("posts", ["posts"])
