"""
Historical tariff trends: filter checks and chart series.

Each (import country, export country, product) combination is one line on the
chart, capped at MAX_LINES for readability.
"""

from __future__ import annotations

from typing import Any

import pandas as pd

MAX_LINES = 10
DEFAULT_START_DATE = "2020-01-01"
DEFAULT_END_DATE = "2024-12-31"

SERIES_COLORS = [
    "#3b82f6",
    "#10b981",
    "#f59e0b",
    "#ef4444",
    "#8b5cf6",
    "#ec4899",
    "#14b8a6",
    "#f97316",
    "#06b6d4",
    "#84cc16",
]


def default_filters() -> dict[str, Any]:
    return {
        "exportCountries": [],
        "importCountries": [],
        "products": [],
        "dateRange": {"start": DEFAULT_START_DATE, "end": DEFAULT_END_DATE},
    }


def count_lines(filters: dict[str, Any]) -> int:
    return (
        len(filters.get("importCountries") or [])
        * len(filters.get("exportCountries") or [])
        * len(filters.get("products") or [])
    )


def validate_filters(filters: dict[str, Any]) -> str | None:
    if not filters.get("importCountries") or not filters.get("exportCountries") or not filters.get("products"):
        return "Please fill in all the boxes"
    total = count_lines(filters)
    if total > MAX_LINES:
        return (
            f"Too many combinations ({total} lines). Please reduce selections to create "
            f"{MAX_LINES} or fewer lines for optimal readability."
        )
    return None


def build_params(filters: dict[str, Any]) -> dict[str, str]:
    date_range = filters.get("dateRange") or {}
    return {
        "startDate": str(date_range.get("start") or DEFAULT_START_DATE),
        "endDate": str(date_range.get("end") or DEFAULT_END_DATE),
        "importCountries": ",".join(filters.get("importCountries") or []),
        "exportCountries": ",".join(filters.get("exportCountries") or []),
        "products": ",".join(filters.get("products") or []),
    }


def format_series(data: list[dict[str, Any]]) -> list[dict[str, Any]]:
    series = []
    for index, item in enumerate(data):
        series.append({
            "id": f"{item.get('importCountry')}-{item.get('exportCountry')}-{item.get('product')}",
            "importCountry": item.get("importCountry"),
            "exportCountry": item.get("exportCountry"),
            "product": item.get("product"),
            "data": [
                {"date": point.get("date"), "tariffRate": point.get("rate")}
                for point in item.get("dataPoints") or []
            ],
            "color": SERIES_COLORS[index % len(SERIES_COLORS)],
        })
    return series


def series_frame(series: list[dict[str, Any]]) -> pd.DataFrame:
    """Long-form frame (series, date, tariffRate) for a line chart."""
    rows = [
        {"series": s["id"], "date": p["date"], "tariffRate": p["tariffRate"]}
        for s in series
        for p in s["data"]
    ]
    frame = pd.DataFrame(rows, columns=["series", "date", "tariffRate"])
    if not frame.empty:
        frame["date"] = pd.to_datetime(frame["date"])
        frame = frame.sort_values(["series", "date"]).reset_index(drop=True)
    return frame


def color_map(series: list[dict[str, Any]]) -> dict[str, str]:
    return {s["id"]: s["color"] for s in series}
