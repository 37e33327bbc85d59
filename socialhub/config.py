from __future__ import annotations

# Settings are read from Streamlit secrets first, then from the environment.

import os
from dataclasses import dataclass
from typing import Optional

import streamlit as st
from streamlit.errors import StreamlitAPIException

APP_TITLE = "SocialHub"

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_REALTIME_POLL_SECONDS = 3.0


def _read_streamlit_secret(name: str) -> Optional[str]:
    try:
        val = st.secrets.get(name)
    except (FileNotFoundError, StreamlitAPIException):
        # No secrets.toml for this deployment
        return None
    return str(val) if val else None


def get_setting(name: str, default: Optional[str] = None) -> Optional[str]:
    val = _read_streamlit_secret(name)
    if val:
        return val
    return os.environ.get(name) or default


def require_setting(name: str) -> str:
    val = get_setting(name)
    if not val:
        raise RuntimeError(f"Missing setting: {name}")
    return val


@dataclass(frozen=True)
class Settings:
    supabase_url: str
    supabase_anon_key: str
    supabase_service_role_key: Optional[str] = None
    log_level: str = DEFAULT_LOG_LEVEL
    realtime_poll_seconds: float = DEFAULT_REALTIME_POLL_SECONDS


def load_settings() -> Settings:
    poll_raw = get_setting("SOCIALHUB_REALTIME_POLL_SECONDS")
    try:
        poll = float(poll_raw) if poll_raw else DEFAULT_REALTIME_POLL_SECONDS
    except ValueError as err:
        raise RuntimeError(f"SOCIALHUB_REALTIME_POLL_SECONDS must be a number, got {poll_raw!r}") from err

    return Settings(
        supabase_url=require_setting("SUPABASE_URL"),
        supabase_anon_key=require_setting("SUPABASE_ANON_KEY"),
        supabase_service_role_key=get_setting("SUPABASE_SERVICE_ROLE_KEY"),
        log_level=(get_setting("SOCIALHUB_LOG_LEVEL", DEFAULT_LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper(),
        realtime_poll_seconds=poll,
    )
