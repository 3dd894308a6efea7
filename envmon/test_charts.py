from envmon.charts import SAFE_MAX_COLOR, SAFE_MIN_COLOR, Y_PADDING, metric_figure
from envmon.metrics import METRICS_BY_KEY, readings_frame
from envmon.testing import BASE_TS, ReadingFactory


def _frame(*temperatures):
    return readings_frame([ReadingFactory(recorded_at=str(BASE_TS + 60 * i), temperature=t, noise=t)
                           for i, t in enumerate(temperatures)])


def test_trace_follows_metric():
    fig = metric_figure(_frame(20, 22, 24), METRICS_BY_KEY["temperature"])

    (trace,) = fig.data
    assert trace.name == "Temperature"
    assert list(trace.y) == [20, 22, 24]
    assert trace.line.color == METRICS_BY_KEY["temperature"].chart_color


def test_safe_range_reference_lines():
    fig = metric_figure(_frame(20, 22, 24), METRICS_BY_KEY["temperature"])

    lines = {shape.y0: shape.line.color for shape in fig.layout.shapes}
    assert lines == {18: SAFE_MIN_COLOR, 26: SAFE_MAX_COLOR}
    labels = {a.text for a in fig.layout.annotations}
    assert labels == {"Min Safe", "Max Safe"}


def test_no_reference_lines_without_safe_range():
    fig = metric_figure(_frame(40, 50), METRICS_BY_KEY["noise"])
    assert len(fig.layout.shapes) == 0


def test_y_axis_padded_around_data():
    fig = metric_figure(_frame(20, 22, 24), METRICS_BY_KEY["temperature"])
    assert list(fig.layout.yaxis.range) == [20 - Y_PADDING, 24 + Y_PADDING]


def test_empty_frame_still_renders():
    fig = metric_figure(_frame(), METRICS_BY_KEY["temperature"])
    assert len(fig.data) == 1
    assert fig.layout.yaxis.range is None
