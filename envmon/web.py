"""Streamlit glue shared by the dashboard pages."""

from typing import Callable, Optional, TypeVar

import streamlit as st
from streamlit_autorefresh import st_autorefresh

from envmon.api import ApiClient
from envmon.config import Settings, configure_logging, load_settings
from envmon.metrics import MetricSpec, color_for, format_value
from envmon.polling import TickCounter
from envmon.session import ApiSession

TOKEN_KEY = "token"
DEVICE_PARAM = "device"

T = TypeVar("T")


def _secrets() -> dict:
    try:
        return dict(st.secrets)
    except Exception:
        # no secrets.toml; fall back to environment variables
        return {}


@st.cache_resource(show_spinner=False)
def get_settings() -> Settings:
    settings = load_settings(secrets=_secrets())
    configure_logging(settings)
    return settings


def current_token() -> str:
    token = st.session_state.get(TOKEN_KEY)
    if not token and not st.session_state.get("signed_out"):
        token = get_settings().api_token
        if token:
            st.session_state[TOKEN_KEY] = token
    return token or ""


def store_token(token: str):
    st.session_state[TOKEN_KEY] = token.strip()
    st.session_state.pop("signed_out", None)
    st.session_state.pop("api_client", None)


def clear_token():
    for key in (TOKEN_KEY, "api_client", "dashboard", "analytics"):
        st.session_state.pop(key, None)
    st.session_state["signed_out"] = True


def get_client() -> ApiClient:
    """Per-session API client, rebuilt whenever the token changes."""
    token = current_token()
    client = st.session_state.get("api_client")
    if client is None or client.session.token != token:
        if client is not None:
            client.session.close()
        client = ApiClient(ApiSession.from_settings(get_settings(), token))
        st.session_state["api_client"] = client
    return client


def get_controller(key: str, factory: Callable[[ApiClient], T]) -> T:
    client = get_client()
    controller = st.session_state.get(key)
    if controller is None or controller.client is not client:
        controller = factory(client)
        st.session_state[key] = controller
    return controller


def poll_due(key: str, enabled: bool, period_seconds: int) -> bool:
    """Mount the refresh timer while ``enabled``; True on the rerun it triggers."""
    ticks = st.session_state.setdefault(f"{key}_ticks", TickCounter())
    if not enabled:
        ticks.reset()
        return False
    count = st_autorefresh(interval=period_seconds * 1000, key=key)
    return ticks.consume(count)


def device_param() -> Optional[str]:
    return st.query_params.get(DEVICE_PARAM)


def set_device_param(device_id: str):
    if st.query_params.get(DEVICE_PARAM) != device_id:
        st.query_params[DEVICE_PARAM] = device_id


def status_dot(online: bool) -> str:
    return "🟢" if online else "🔴"


def metric_card(spec: MetricSpec, value: float):
    color = color_for(spec.key, value)
    with st.container(border=True):
        st.caption(spec.title)
        st.markdown(
            f"<div style='font-size:1.6rem;font-weight:700;color:{color}'>{format_value(spec, value)}</div>",
            unsafe_allow_html=True,
        )
        st.caption(spec.hint)


def empty_panel(title: str, body: str, icon: str = "⚠️"):
    with st.container(border=True):
        st.markdown(f"### {icon} {title}")
        st.write(body)
