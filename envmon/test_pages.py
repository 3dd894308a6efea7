import time
from unittest.mock import patch

import pytest
from streamlit.testing.v1 import AppTest

from envmon.dashboard import MSG_NO_DATA
from envmon.testing import BASE_TS, DeviceFactory, FakeApiClient, ReadingFactory
from envmon.web import get_settings

# first run imports pandas and plotly
TIMEOUT = 30


def _fresh(device_id):
    return ReadingFactory(device_id=device_id, recorded_at=str(int(time.time())))


def _markdown(at):
    return [m.value for m in at.markdown]


def _button(at, label):
    return next(b for b in at.button if b.label == label)


@pytest.fixture(autouse=True)
def plain_settings(monkeypatch, tmp_path):
    for key in ("API_BASE_URL", "API_TOKEN", "REQUEST_TIMEOUT", "LOG_LEVEL", "DISPLAY_TZ"):
        monkeypatch.delenv(f"ENVMON_{key}", raising=False)
    # no secrets.toml or .env
    monkeypatch.chdir(tmp_path)
    get_settings.clear()
    yield monkeypatch
    get_settings.clear()


@pytest.fixture
def client():
    return FakeApiClient(
        devices=[DeviceFactory(device_id="d1", device_name="Lab"), DeviceFactory(device_id="d2", device_name="Hall")],
        readings={"d1": _fresh("d1"), "d2": _fresh("d2")},
    )


@pytest.fixture
def app(client):
    def _load(script):
        return AppTest.from_file(f"../app/{script}", default_timeout=TIMEOUT)

    with patch("envmon.web.get_client", return_value=client):
        yield _load


def test_dashboard_shows_online_device_with_metric_cards(app):
    at = app("views/dashboard.py").run()

    assert not at.exception
    assert at.title[0].value == "Dashboard"
    md = _markdown(at)
    cards = [v for v in md if "font-size:1.6rem" in v]
    assert len(cards) == 11
    assert "22.0 °C" in cards[0]
    assert "Status: :green[Online]" in md
    assert at.query_params["device"] == "d1"
    assert at.selectbox[0].value == "d1"


def test_dashboard_without_latest_reading_shows_no_data(app, client):
    del client.readings["d1"]

    at = app("views/dashboard.py").run()

    assert [e.value for e in at.error] == [MSG_NO_DATA]
    md = _markdown(at)
    assert "### ⚠️ No Data Available" in md
    assert "Status: :red[Offline] (d1)" in md
    assert not [v for v in md if "font-size:1.6rem" in v]


def test_dashboard_device_choice_updates_url(app, client):
    at = app("views/dashboard.py").run()

    at.selectbox[0].select("d2").run()

    assert at.query_params["device"] == "d2"
    assert ("latest", "d2") in client.calls
    assert "Device ID: `d2`" in _markdown(at)


def test_dashboard_follows_device_url_parameter(app):
    at = app("views/dashboard.py")
    at.query_params["device"] = "d2"
    at.run()

    assert at.selectbox[0].value == "d2"
    assert "Device ID: `d2`" in _markdown(at)


def test_dashboard_refresh_redraws_status(app, client):
    client.readings["d1"] = ReadingFactory(device_id="d1", recorded_at=str(int(time.time()) - 3600))
    at = app("views/dashboard.py").run()
    assert at.selectbox[0].options[0].startswith("🔴")
    assert "Status: :red[Offline]" in _markdown(at)

    client.readings["d1"] = _fresh("d1")
    _button(at, "Refresh").click().run()

    assert at.selectbox[0].options[0].startswith("🟢")
    assert "Status: :green[Online]" in _markdown(at)


def test_dashboard_last_updated_uses_display_zone(app, client, plain_settings):
    plain_settings.setenv("ENVMON_DISPLAY_TZ", "Asia/Tokyo")
    client.readings["d1"] = ReadingFactory(device_id="d1", recorded_at=str(BASE_TS))

    at = app("views/dashboard.py").run()

    assert "Last Updated: 2023-11-15 07:13:20 JST" in _markdown(at)


def test_dashboard_without_devices(app, client):
    client.devices = []

    at = app("views/dashboard.py").run()

    assert "### ⚡ No Devices Found" in _markdown(at)
    assert "device" not in at.query_params


def test_export_is_enabled_by_the_fetch_that_loaded_data(app, client):
    client.ranges = [ReadingFactory(device_id="d1", recorded_at=str(BASE_TS + 60 * i), temperature=t)
                     for i, t in enumerate((20.0, 22.0, 24.0))]
    at = app("views/analytics.py").run()
    assert at.get("download_button")[0].proto.disabled
    assert "### 📈 No Data" in _markdown(at)

    _button(at, "Fetch Data").click().run()

    assert not at.exception
    assert not at.get("download_button")[0].proto.disabled
    assert [m.value for m in at.metric][:3] == ["20.0", "22.0", "24.0"]
    assert [c for c in client.calls if c[0] == "range"][0][1] == "d1"


def test_without_token_only_login_is_reachable(app):
    at = app("streamlit_app.py").run()

    assert at.title[0].value == "Sign in"
    assert not [b for b in at.button if b.label == "Sign out"]


def test_blank_token_is_rejected(app):
    at = app("streamlit_app.py").run()

    at.text_input[0].input("   ")
    _button(at, "Continue").click().run()

    assert [e.value for e in at.error] == ["Token is required"]
    assert at.title[0].value == "Sign in"


def test_login_stores_token_and_opens_dashboard(app):
    at = app("streamlit_app.py").run()

    at.text_input[0].input(" tok-1 ")
    _button(at, "Continue").click().run()

    assert at.session_state["token"] == "tok-1"
    assert at.title[0].value == "Dashboard"


def test_sign_out_returns_to_login(app):
    at = app("streamlit_app.py")
    at.session_state["token"] = "tok-1"
    at.run()
    assert at.title[0].value == "Dashboard"

    _button(at, "Sign out").click().run()

    assert at.title[0].value == "Sign in"
    assert at.session_state["signed_out"] is True
    assert "token" not in at.session_state


def test_configured_token_skips_login(app, plain_settings):
    plain_settings.setenv("ENVMON_API_TOKEN", "from-env")

    at = app("streamlit_app.py").run()

    assert at.title[0].value == "Dashboard"
    assert at.session_state["token"] == "from-env"
