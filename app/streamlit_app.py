from pathlib import Path

import streamlit as st

from envmon.web import clear_token, current_token, get_settings

st.set_page_config(page_title="Environmental Monitor", layout="wide")

# styles (resolve relative to this file so it works from any CWD)
_style_path = Path(__file__).resolve().parent / "styles.html"
if _style_path.exists():
    st.markdown(_style_path.read_text(encoding="utf-8"), unsafe_allow_html=True)

get_settings()

login = st.Page("views/login.py", title="Sign in", icon="🔑")
dashboard = st.Page("views/dashboard.py", title="Dashboard", icon="📟", default=True)
analytics = st.Page("views/analytics.py", title="Analytics", icon="📈")

# without a token the only reachable page is the login screen
if current_token():
    page = st.navigation([dashboard, analytics])
    if st.sidebar.button("Sign out"):
        clear_token()
        st.rerun()
else:
    page = st.navigation([login])
page.run()
