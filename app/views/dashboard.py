from zoneinfo import ZoneInfo

import streamlit as st

from envmon.dashboard import DashboardController
from envmon.metrics import METRICS
from envmon.polling import DASHBOARD_POLL_SECONDS
from envmon.web import (device_param, empty_panel, get_controller, get_settings, metric_card,
                        poll_due, set_device_param, status_dot)

ctl = get_controller("dashboard", DashboardController)
state = ctl.state
requested = device_param()

if state.loading:
    with st.spinner("Loading devices..."):
        ctl.load_devices(requested_device=requested)
ctl.follow_location(requested)

if poll_due("dashboard_poll", state.auto_refresh and bool(state.selected_device), DASHBOARD_POLL_SECONDS):
    ctl.poll()

if state.selected_device:
    set_device_param(state.selected_device)

# header + controls
head, pick, auto, refresh = st.columns([4, 2, 1, 1], vertical_alignment="bottom")
head.title("Dashboard")
head.caption("Real-time environmental monitoring")

ids = [d.device_id for d in state.devices]
labels = {d.device_id: f"{status_dot(state.is_online(d.device_id))} {d.label}" for d in state.devices}
choice = pick.selectbox(
    "Device",
    ids,
    index=ids.index(state.selected_device) if state.selected_device in ids else None,
    format_func=lambda device_id: labels.get(device_id, device_id),
    placeholder="Select device",
)
if choice and choice != state.selected_device:
    ctl.select_device(choice)
    set_device_param(choice)

if auto.button("Auto ON" if state.auto_refresh else "Auto OFF",
               type="primary" if state.auto_refresh else "secondary", width="stretch"):
    ctl.toggle_auto_refresh()
    st.rerun()
if refresh.button("Refresh", disabled=state.data_loading, width="stretch"):
    with st.spinner("Fetching latest environmental readings..."):
        ctl.refresh()
    st.rerun()

if state.error:
    st.error(state.error, icon="⚠️")

if not state.devices:
    empty_panel("No Devices Found",
                "You haven't added any devices yet. Add a device to start monitoring.", icon="⚡")
elif state.reading is not None:
    reading = state.reading
    cols = st.columns(4)
    for idx, spec in enumerate(METRICS):
        with cols[idx % 4]:
            metric_card(spec, reading.value(spec.key))

    online = state.is_online(state.selected_device)
    with st.container(border=True):
        st.markdown("**Device Information**")
        info1, info2, info3 = st.columns(3)
        info1.write(f"Device ID: `{reading.device_id}`")
        updated = reading.recorded_at_utc.astimezone(ZoneInfo(get_settings().display_tz))
        info2.write(f"Last Updated: {updated:%Y-%m-%d %H:%M:%S %Z}")
        info3.markdown(f"Status: :{'green' if online else 'red'}[{'Online' if online else 'Offline'}]")
elif not state.data_loading:
    empty_panel("No Data Available", "No recent data found for the selected device.")
    if state.selected_device:
        st.markdown(f"Status: :red[Offline] ({state.selected_device})")
