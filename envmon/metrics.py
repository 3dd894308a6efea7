"""Metric catalogue, threshold colouring and summary statistics.

The tables here are plain data. Colour classification walks a metric's
threshold rows in order and reports the first one the value violates.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from envmon.models import READING_FIELDS, Reading


class Level(str, Enum):
    OK = "ok"
    WARNING = "warning"
    ALERT = "alert"
    NEUTRAL = "neutral"


LEVEL_COLORS = {
    Level.OK: "#16a34a",
    Level.WARNING: "#ca8a04",
    Level.ALERT: "#dc2626",
}


@dataclass(frozen=True)
class Threshold:
    """Values below ``low`` or above ``high`` are flagged with ``level``."""

    level: Level
    low: Optional[float] = None
    high: Optional[float] = None

    def violated_by(self, value: float) -> bool:
        if self.low is not None and value < self.low:
            return True
        if self.high is not None and value > self.high:
            return True
        return False


@dataclass(frozen=True)
class MetricSpec:
    key: str
    title: str
    unit: str
    decimals: int
    hint: str
    description: str
    chart_color: str
    accent_color: str
    safe_min: Optional[float] = None
    safe_max: Optional[float] = None
    thresholds: Tuple[Threshold, ...] = ()


METRICS: Tuple[MetricSpec, ...] = (
    MetricSpec(
        "temperature", "Temperature", "°C", 1, "Optimal: 18-26°C",
        "Ambient temperature monitoring", "#ef4444", "#4b5563",
        safe_min=18, safe_max=26,
        thresholds=(Threshold(Level.ALERT, low=18, high=26),),
    ),
    MetricSpec(
        "humidity", "Humidity", "%", 1, "Optimal: 30-70%",
        "Relative humidity levels", "#3b82f6", "#4b5563",
        safe_min=30, safe_max=70,
        thresholds=(Threshold(Level.WARNING, low=30, high=70),),
    ),
    MetricSpec(
        "pressure", "Atmospheric Pressure", "hPa", 1, "Atmospheric pressure",
        "Barometric pressure readings", "#8b5cf6", "#2563eb",
    ),
    MetricSpec(
        "co", "Carbon Monoxide", "ppm", 2, "Safe: < 3 ppm",
        "CO concentration levels", "#f59e0b", "#4b5563",
        safe_max=3,
        thresholds=(Threshold(Level.ALERT, high=3),),
    ),
    MetricSpec(
        "co2", "Carbon Dioxide", "ppm", 2, "Safe: < 800 ppm",
        "CO2 concentration levels", "#888f6d", "#4b5563",
        safe_max=800,
    ),
    MetricSpec(
        "methane", "Methane", "ppm", 1, "Gas concentration",
        "Methane gas concentration", "#10b981", "#ea580c",
    ),
    MetricSpec(
        "lpg", "LPG", "ppm", 1, "Liquefied petroleum gas",
        "Liquefied petroleum gas", "#f97316", "#9333ea",
    ),
    MetricSpec(
        "pm25", "PM2.5", "μg/m³", 1, "Fine particles",
        "Fine particulate matter", "#ec4899", "#4b5563",
        safe_max=150,
        thresholds=(Threshold(Level.ALERT, high=300), Threshold(Level.WARNING, high=150)),
    ),
    MetricSpec(
        "pm10", "PM10", "μg/m³", 1, "Coarse particles",
        "Coarse particulate matter", "#6366f1", "#4b5563",
        safe_max=300,
    ),
    MetricSpec(
        "noise", "Noise Level", "dB", 1, "Sound level",
        "Sound level monitoring", "#84cc16", "#4f46e5",
    ),
    MetricSpec(
        "light", "Light Level", "lux", 1, "Illuminance",
        "Illuminance measurement", "#eab308", "#ca8a04",
    ),
)

METRICS_BY_KEY = {m.key: m for m in METRICS}


def classify(key: str, value: float) -> Level:
    spec = METRICS_BY_KEY[key]
    if not spec.thresholds:
        return Level.NEUTRAL
    for threshold in spec.thresholds:
        if threshold.violated_by(value):
            return threshold.level
    return Level.OK


def color_for(key: str, value: float) -> str:
    level = classify(key, value)
    if level is Level.NEUTRAL:
        return METRICS_BY_KEY[key].accent_color
    return LEVEL_COLORS[level]


def format_value(spec: MetricSpec, value: Optional[float]) -> str:
    if value is None or np.isnan(value):
        return "—"
    return f"{value:.{spec.decimals}f} {spec.unit}"


@dataclass(frozen=True)
class MetricStats:
    current: float
    minimum: float
    average: float
    maximum: float


def readings_frame(readings: Sequence[Reading], tz: str = "UTC") -> pd.DataFrame:
    """One row per reading, in arrival order, with a tz-aware ``recorded_at``."""
    columns = ["recorded_at", *READING_FIELDS]
    if not readings:
        return pd.DataFrame(columns=columns)
    df = pd.DataFrame(
        [{"recorded_at": r.recorded_at_seconds, **{k: r.value(k) for k in READING_FIELDS}} for r in readings],
        columns=columns,
    )
    df["recorded_at"] = pd.to_datetime(df["recorded_at"], unit="s", utc=True).dt.tz_convert(tz)
    return df


def summarize(values: Iterable[float]) -> Optional[MetricStats]:
    s = pd.Series(list(values), dtype=float)
    if s.empty:
        return None
    return MetricStats(
        current=float(s.iloc[-1]),
        minimum=float(s.min()),
        average=float(s.mean()),
        maximum=float(s.max()),
    )


def summarize_metric(readings: Sequence[Reading], key: str) -> Optional[MetricStats]:
    return summarize(r.value(key) for r in readings)
