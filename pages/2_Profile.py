import streamlit as st

from socialhub.backend import get_client
from socialhub.config import load_settings
from socialhub.errors import MutationError
from socialhub.feed import PROFILE_EMPTY_HINT, load_feed
from socialhub.guard import (
    hide_admin_page_for_non_admins,
    hide_login_page_when_logged_in,
    page_setup,
    render_logout_button,
    require_login,
)
from socialhub.logging_config import setup_logging
from socialhub.profile import load_profile, save_profile
from socialhub.render import default_avatar_url, escape_html, format_joined_date
from socialhub.ui import draw_feed

page_setup("Profile")
setup_logging(load_settings().log_level)

viewer = require_login()
client = get_client()

profile = load_profile(client, viewer)

hide_login_page_when_logged_in()
hide_admin_page_for_non_admins(profile)
render_logout_button()

# -----------------------------
# Header
# -----------------------------
if profile:
    full_name = profile.get("full_name") or ""
    avatar = profile.get("avatar_url") or default_avatar_url(full_name)

    col_avatar, col_info = st.columns([1, 4])
    with col_avatar:
        st.markdown(
            f'<img src="{escape_html(avatar)}" alt="Avatar" '
            'style="width: 120px; height: 120px; border-radius: 50%; object-fit: cover;" />',
            unsafe_allow_html=True,
        )
    with col_info:
        st.title(full_name)
        st.caption(f"@{profile.get('username') or ''}")
        st.write(profile.get("bio") or "No bio yet")
        if profile.get("created_at"):
            st.caption(f"Joined {format_joined_date(profile['created_at'])}")

    # -----------------------------
    # Editor
    # -----------------------------
    with st.expander("Edit profile", expanded=False):
        with st.form("edit_profile_form"):
            new_full_name = st.text_input("Full name", value=full_name)
            new_bio = st.text_area("Bio", value=profile.get("bio") or "")
            new_avatar = st.text_input("Avatar URL", value=profile.get("avatar_url") or "")
            saved = st.form_submit_button("Save Changes")

        if saved:
            try:
                save_profile(client, viewer, new_full_name, new_bio, new_avatar)
            except MutationError as e:
                st.error(str(e))
            else:
                st.rerun()
else:
    st.title("Profile")
    st.warning("Your profile could not be loaded.")

st.markdown("---")
st.subheader("My posts")

view = load_feed(client, viewer, author_id=viewer.user_id, empty_hint=PROFILE_EMPTY_HINT)
draw_feed(client, viewer, view, key_prefix="profile")
