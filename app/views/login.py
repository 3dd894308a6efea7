import streamlit as st

from envmon.web import get_settings, store_token

st.title("Sign in")
st.caption(f"API: `{get_settings().api_base_url}`")

with st.form("login"):
    token = st.text_input("API token", type="password", help="Bearer token issued by the readings API")
    submitted = st.form_submit_button("Continue")
    if submitted:
        if token.strip():
            store_token(token)
            st.rerun()
        else:
            st.error("Token is required")
