from __future__ import annotations

# Supabase clients. The anon client carries the signed-in user's session, so it
# lives in st.session_state (one per browser session). The service-role client
# is shared by the process and only used for the admin user listing.

import logging
from typing import Optional

import streamlit as st
from supabase import Client, create_client

from socialhub.config import Settings, load_settings

logger = logging.getLogger(__name__)

CLIENT_STATE_KEY = "supabase_client"


def create_backend_client(settings: Settings) -> Client:
    return create_client(settings.supabase_url, settings.supabase_anon_key)


def get_client() -> Client:
    """Return this browser session's Supabase client, creating it on first use."""
    client = st.session_state.get(CLIENT_STATE_KEY)
    if client is None:
        client = create_backend_client(load_settings())
        st.session_state[CLIENT_STATE_KEY] = client
    return client


@st.cache_resource(show_spinner=False)
def _service_client(url: str, service_role_key: str) -> Client:
    logger.info("Creating service-role client for admin user listing")
    return create_client(url, service_role_key)


def get_admin_client() -> Optional[Client]:
    """
    Client allowed to call auth.admin.* endpoints, or None when no
    SUPABASE_SERVICE_ROLE_KEY is configured.
    """
    settings = load_settings()
    if not settings.supabase_service_role_key:
        return None
    return _service_client(settings.supabase_url, settings.supabase_service_role_key)
