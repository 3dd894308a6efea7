from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

import pandas as pd

from envmon.models import Reading

# CSV header -> reading field
CSV_COLUMNS = (
    ("Temperature", "temperature"),
    ("Humidity", "humidity"),
    ("Pressure", "pressure"),
    ("CO", "co"),
    ("CO2", "co2"),
    ("Methane", "methane"),
    ("LPG", "lpg"),
    ("PM2.5", "pm25"),
    ("PM10", "pm10"),
    ("Noise", "noise"),
    ("Light", "light"),
)


@dataclass(frozen=True)
class CsvExport:
    filename: str
    data: bytes
    mime: str = "text/csv"


def iso_timestamp(seconds: int) -> str:
    return pd.Timestamp(seconds, unit="s", tz="UTC").strftime("%Y-%m-%dT%H:%M:%S.000Z")


def readings_to_csv(readings: Sequence[Reading]) -> Optional[bytes]:
    if not readings:
        return None
    rows = []
    for r in readings:
        row = {"Timestamp": iso_timestamp(r.recorded_at_seconds)}
        for header, key in CSV_COLUMNS:
            row[header] = r.value(key)
        rows.append(row)
    df = pd.DataFrame(rows, columns=["Timestamp", *(h for h, _ in CSV_COLUMNS)])
    return df.to_csv(index=False, lineterminator="\n").encode("utf-8")


def export_filename(device_id: str, start: datetime, end: datetime) -> str:
    return f"environmental_data_{device_id}_{start:%Y-%m-%d}_to_{end:%Y-%m-%d}.csv"


def build_export(readings: Sequence[Reading], device_id: str,
                 start: Optional[datetime], end: Optional[datetime]) -> Optional[CsvExport]:
    """CSV payload for the loaded range, or ``None`` when there is nothing to export."""
    data = readings_to_csv(readings)
    if data is None or start is None or end is None:
        return None
    return CsvExport(export_filename(device_id, start, end), data)
