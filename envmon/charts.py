import pandas as pd
import plotly.graph_objects as go

from envmon.metrics import MetricSpec

SAFE_MIN_COLOR = "#10b981"
SAFE_MAX_COLOR = "#ef4444"
Y_PADDING = 5


def metric_figure(df: pd.DataFrame, spec: MetricSpec) -> go.Figure:
    """Line chart of one metric over ``readings_frame`` output, with safe-range guides."""
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=df["recorded_at"],
        y=df[spec.key],
        name=spec.title,
        mode="lines+markers",
        line=dict(color=spec.chart_color, width=2),
        marker=dict(size=2, color=spec.chart_color),
        hovertemplate=f"%{{y}} {spec.unit}<extra>{spec.title}</extra>",
    ))

    if spec.safe_min is not None:
        fig.add_hline(y=spec.safe_min, line_dash="dash", line_color=SAFE_MIN_COLOR,
                      annotation_text="Min Safe", annotation_position="top right")
    if spec.safe_max is not None:
        fig.add_hline(y=spec.safe_max, line_dash="dash", line_color=SAFE_MAX_COLOR,
                      annotation_text="Max Safe", annotation_position="top right")

    if not df.empty:
        values = df[spec.key].astype(float)
        fig.update_yaxes(range=[values.min() - Y_PADDING, values.max() + Y_PADDING])

    fig.update_layout(
        margin=dict(l=0, r=0, t=24, b=0),
        hovermode="x unified",
        height=260,
        showlegend=False,
        yaxis_title=spec.unit,
    )
    return fig
