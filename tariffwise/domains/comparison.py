"""
Multi-country comparison: request payload and result formatting.

The backend computes and ranks the landed costs; this module only shapes the
result for the table and the bar chart.
"""

from __future__ import annotations

from typing import Any

import pandas as pd

from tariffwise.domains.currency import format_currency
from tariffwise.domains.validation import parse_number

CHART_COLUMNS = ["country", "productCost", "tariffAmount", "totalCost", "tariffRate", "tariffType", "hasFTA"]


def build_payload(form: dict[str, Any]) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "product": form["product"],
        "exportingFrom": form["exportingFrom"],
        "importingToCountries": list(form.get("importingToCountries") or []),
        "quantity": parse_number(form.get("quantity")),
        "currency": form.get("currency") or "USD",
    }
    custom_cost = str(form.get("customCost") or "").strip()
    if custom_cost:
        payload["customCost"] = custom_cost
    return payload


def ranked(comparisons: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Cheapest first. Rows without a rank sort after ranked ones."""
    def sort_key(item: dict[str, Any]) -> tuple[float, float]:
        rank = item.get("rank")
        return (
            float(rank) if rank is not None else float("inf"),
            float(item.get("totalCost") or 0),
        )

    return sorted(comparisons, key=sort_key)


def chart_frame(data: dict[str, Any] | None) -> pd.DataFrame:
    comparisons = (data or {}).get("comparisons")
    if not isinstance(comparisons, list) or not comparisons:
        return pd.DataFrame(columns=CHART_COLUMNS)
    rows = [{col: item.get(col) for col in CHART_COLUMNS} for item in ranked(comparisons)]
    return pd.DataFrame(rows, columns=CHART_COLUMNS)


def table_rows(data: dict[str, Any], currency: str) -> list[dict[str, Any]]:
    rows = []
    for item in ranked(data.get("comparisons") or []):
        rows.append({
            "Rank": item.get("rank"),
            "Importing Country": item.get("country"),
            "Tariff Rate": f"{float(item.get('tariffRate') or 0):.2f}%",
            "Tariff Type": item.get("tariffType"),
            "Product Cost": format_currency(item.get("productCost"), currency),
            "Tariff Amount": format_currency(item.get("tariffAmount"), currency),
            "Total Cost": format_currency(item.get("totalCost"), currency),
            "FTA": "Yes" if item.get("hasFTA") else "No",
        })
    return rows
