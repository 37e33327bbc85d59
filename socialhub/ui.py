from __future__ import annotations

# Streamlit widgets shared by the feed, profile and admin pages.

import logging
from typing import Iterable, Tuple

import streamlit as st

from socialhub import feed
from socialhub.admin import NO_USERS, users_frame
from socialhub.config import load_settings
from socialhub.errors import MutationError
from socialhub.models import FeedView, Stats, Viewer
from socialhub.realtime import RealtimeBridge, bridge_key, supabase_client_factory
from socialhub.render import FEED_CSS, empty_state_html, error_html, like_label

logger = logging.getLogger(__name__)

POST_CONTENT_KEY = "post_content"
POST_IMAGE_KEY = "post_image"
POST_ERROR_KEY = "post_error"


# -----------------------------
# New post
# -----------------------------
def _submit_post(client, viewer: Viewer):
    try:
        feed.create_post(
            client,
            viewer,
            st.session_state.get(POST_CONTENT_KEY),
            st.session_state.get(POST_IMAGE_KEY),
        )
    except MutationError as e:
        st.session_state[POST_ERROR_KEY] = str(e)
        return
    st.session_state[POST_CONTENT_KEY] = ""
    st.session_state[POST_IMAGE_KEY] = ""


def draw_post_form(client, viewer: Viewer):
    """
    New-post form. The submit callback runs before the page is drawn again,
    so the feed below already includes a stored post. Inputs are cleared only
    after a successful insert.
    """
    with st.form("create_post_form"):
        st.text_area("What's on your mind?", key=POST_CONTENT_KEY)
        st.text_input("Image URL (optional)", key=POST_IMAGE_KEY)
        st.form_submit_button("Post", on_click=_submit_post, args=(client, viewer))

    error = st.session_state.pop(POST_ERROR_KEY, None)
    if error:
        st.error(error)


# -----------------------------
# Feed
# -----------------------------
def draw_feed(client, viewer: Viewer, view: FeedView, key_prefix: str):
    """
    Draw a FeedView and bind its like/delete controls.

    Every successful mutation ends in st.rerun(), so the whole page (feed,
    like state, counts) is fetched again.
    """
    st.markdown(FEED_CSS, unsafe_allow_html=True)

    if view.error:
        st.markdown(error_html(view.error), unsafe_allow_html=True)
        return
    if view.is_empty:
        st.markdown(empty_state_html(view.empty_title, view.empty_hint), unsafe_allow_html=True)
        return

    for card in view.cards:
        with st.container():
            st.markdown(card.html, unsafe_allow_html=True)
            col_like, col_delete, _ = st.columns([1, 1, 6])

            with col_like:
                if card.can_like:
                    if st.button(
                        like_label(card.liked, card.likes_count),
                        key=f"{key_prefix}_like_{card.post_id}",
                        type="primary" if card.liked else "secondary",
                    ):
                        # None means the backend refused; leave the page as drawn
                        if feed.toggle_like(client, viewer, card.post_id, card.liked) is not None:
                            st.rerun()
                else:
                    st.button(
                        like_label(False, card.likes_count),
                        key=f"{key_prefix}_likes_{card.post_id}",
                        disabled=True,
                    )

            if card.can_delete:
                with col_delete:
                    _draw_delete_control(client, card.post_id, key_prefix)


def _draw_delete_control(client, post_id, key_prefix: str):
    with st.popover("🗑️ Delete"):
        confirm = st.checkbox(
            "Are you sure you want to delete this post?",
            key=f"{key_prefix}_delete_confirm_{post_id}",
        )
        if st.button(
            "Delete post",
            type="primary",
            width="stretch",
            disabled=not confirm,
            key=f"{key_prefix}_delete_btn_{post_id}",
        ):
            try:
                feed.delete_post(client, post_id)
            except MutationError as e:
                st.error(str(e))
                return
            st.rerun()


# -----------------------------
# Admin
# -----------------------------
def draw_stats(stats: Stats):
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total users", stats.users)
    c2.metric("Total posts", stats.posts)
    c3.metric("Total likes", stats.likes)
    c4.metric("Total comments", stats.comments)


def draw_users(rows, message):
    if message == NO_USERS:
        st.markdown(empty_state_html(message), unsafe_allow_html=True)
        return
    if message:
        st.markdown(error_html(message), unsafe_allow_html=True)
        return
    st.dataframe(users_frame(rows), hide_index=True, width="stretch")


# -----------------------------
# Realtime
# -----------------------------
@st.cache_resource(show_spinner=False)
def get_bridge(channel_prefix: str, tables: Tuple[str, ...]) -> RealtimeBridge:
    """One bridge per (prefix, tables) for the whole server process."""
    settings = load_settings()
    factory = supabase_client_factory(settings.supabase_url, bridge_key(settings))
    return RealtimeBridge(tables, factory, channel_prefix=channel_prefix).start()


def watch_for_changes(channel_prefix: str, tables: Iterable[str]):
    """
    Poll the realtime bridge and rerun the whole page when any watched table
    changed since this session last looked.
    """
    tables = tuple(tables)
    settings = load_settings()
    bridge = get_bridge(channel_prefix, tables)
    state_key = f"realtime_seen_{channel_prefix}"

    @st.fragment(run_every=settings.realtime_poll_seconds)
    def _poll():
        changed, current = bridge.changed_since(st.session_state.get(state_key), tables)
        st.session_state[state_key] = current
        if changed:
            logger.debug("Reloading %s after changes on %s", channel_prefix, ", ".join(sorted(changed)))
            st.rerun(scope="app")

    _poll()
