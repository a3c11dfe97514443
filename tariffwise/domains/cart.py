"""Export cart and session history view helpers."""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable

import pandas as pd

from tariffwise.domains.currency import format_currency

CART_COLUMNS = ["Product", "Source", "Route", "Quantity", "Tariff", "Product Cost", "Total Cost", "Date"]


def history_not_in_cart(history: list[dict[str, Any]], cart: list[dict[str, Any]]) -> list[dict[str, Any]]:
    cart_ids = {item.get("id") for item in cart}
    return [item for item in history if item.get("id") not in cart_ids]


def toggle(selected: set[str], item_id: str) -> set[str]:
    updated = set(selected)
    if item_id in updated:
        updated.discard(item_id)
    else:
        updated.add(item_id)
    return updated


def toggle_all(selected: set[str], items: Iterable[dict[str, Any]]) -> set[str]:
    """Select everything, or clear the selection when everything is already selected."""
    ids = {item.get("id") for item in items}
    if ids and selected >= ids:
        return set()
    return ids


def plural(count: int, noun: str = "item") -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def csv_filename(today: date | None = None, prefix: str = "tariff-calculations") -> str:
    return f"{prefix}-{(today or date.today()).isoformat()}.csv"


def cart_frame(items: list[dict[str, Any]]) -> pd.DataFrame:
    rows = []
    for item in items:
        currency = item.get("currency")
        rows.append({
            "Product": item.get("productName"),
            "Source": item.get("source") or "",
            "Route": f"{item.get('exportingFrom')} → {item.get('importingTo')}",
            "Quantity": f"{item.get('quantity')} {item.get('unit') or ''}".strip(),
            "Tariff": item.get("tariffType"),
            "Product Cost": format_currency(item.get("productCost"), currency),
            "Total Cost": format_currency(item.get("totalCost"), currency),
            "Date": item.get("calculationDate"),
        })
    return pd.DataFrame(rows, columns=CART_COLUMNS)
