from datetime import datetime, time
from zoneinfo import ZoneInfo

import streamlit as st

from envmon.analytics import QUICK_RANGES, AnalyticsController
from envmon.charts import metric_figure
from envmon.metrics import METRICS, format_value, readings_frame, summarize
from envmon.polling import ANALYTICS_POLL_SECONDS
from envmon.web import empty_panel, get_controller, get_settings, poll_due

settings = get_settings()
ctl = get_controller("analytics", AnalyticsController)
state = ctl.state

if state.loading:
    with st.spinner("Loading devices..."):
        ctl.load_devices()

if poll_due("analytics_poll", state.auto_refresh and state.can_fetch, ANALYTICS_POLL_SECONDS):
    ctl.poll()

head, auto, export = st.columns([5, 1, 1], vertical_alignment="bottom")
head.title("Analytics")
head.caption("Historical environmental data analysis")

if auto.button("Auto-refresh ON" if state.auto_refresh else "Auto-refresh OFF",
               type="primary" if state.auto_refresh else "secondary", width="stretch"):
    ctl.toggle_auto_refresh()
    st.rerun()

payload = ctl.export_csv()
export.download_button(
    "Export CSV",
    data=payload.data if payload else b"",
    file_name=payload.filename if payload else "environmental_data.csv",
    mime="text/csv",
    disabled=payload is None,
    width="stretch",
)

# controls
with st.container(border=True):
    c_dev, c_start, c_end, c_quick, c_go = st.columns([2, 2, 2, 2, 1], vertical_alignment="bottom")
    names = {d.device_id: d.label for d in state.devices}
    ids = list(names)
    choice = c_dev.selectbox(
        "Device", ids,
        index=ids.index(state.selected_device) if state.selected_device in ids else None,
        format_func=lambda device_id: names.get(device_id, device_id),
        placeholder="Select device",
    )
    if choice and choice != state.selected_device:
        ctl.select_device(choice)

    tz = ZoneInfo(settings.display_tz)
    shown_start = state.start.astimezone(tz).replace(second=0, microsecond=0) if state.start else None
    shown_end = state.end.astimezone(tz).replace(second=0, microsecond=0) if state.end else None
    start_day = c_start.date_input("Start date", value=shown_start.date() if shown_start else None)
    start_time = c_start.time_input("Start time", value=shown_start.time() if shown_start else time(0, 0),
                                    label_visibility="collapsed")
    end_day = c_end.date_input("End date", value=shown_end.date() if shown_end else None)
    end_time = c_end.time_input("End time", value=shown_end.time() if shown_end else time(23, 59),
                                label_visibility="collapsed")
    start = datetime.combine(start_day, start_time, tzinfo=tz) if start_day else None
    end = datetime.combine(end_day, end_time, tzinfo=tz) if end_day else None
    if (start, end) != (shown_start, shown_end):
        ctl.set_range(start, end)

    quick = c_quick.selectbox("Quick select", list(QUICK_RANGES), index=None, placeholder="Quick select")
    if quick and st.session_state.get("analytics_quick") != quick:
        st.session_state["analytics_quick"] = quick
        ctl.set_quick_range(QUICK_RANGES[quick])
        st.rerun()

    if c_go.button("Loading..." if state.data_loading else "Fetch Data", type="primary",
                   disabled=state.data_loading or not state.can_fetch, width="stretch"):
        with st.spinner("Fetching readings..."):
            ctl.fetch_range()
        st.rerun()

if state.error:
    st.error(state.error, icon="⚠️")

if state.readings:
    df = readings_frame(state.readings, tz=settings.display_tz)
    cols = st.columns(2)
    for idx, spec in enumerate(METRICS):
        stats = summarize(df[spec.key])
        with cols[idx % 2], st.container(border=True):
            title, current = st.columns([3, 1])
            title.markdown(f"**{spec.title}**")
            title.caption(spec.description)
            current.markdown(f"**{format_value(spec, stats.current)}**")
            st.plotly_chart(metric_figure(df, spec), width="stretch")
            s_min, s_avg, s_max = st.columns(3)
            s_min.metric("Min", f"{stats.minimum:.1f}")
            s_avg.metric("Avg", f"{stats.average:.1f}")
            s_max.metric("Max", f"{stats.maximum:.1f}")
elif not state.data_loading:
    empty_panel("No Data",
                'Select a device and date range, then click "Fetch Data" to view the dashboard.', icon="📈")
