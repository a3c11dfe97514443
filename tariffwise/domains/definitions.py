"""
Tariff definition helpers: merging admin overrides into the global table,
filtering, and choosing which backend collection a write goes to.
"""

from __future__ import annotations

import time
from typing import Any, Iterable

from tariffwise.domains.validation import parse_number

TARIFF_TYPE_AHS = "AHS"
TARIFF_TYPE_MFN = "MFN"
TARIFF_TYPES = (TARIFF_TYPE_AHS, TARIFF_TYPE_MFN)
FILTER_ALL_VALUE = "all"
USER_ID_PREFIX = "user"
ADMIN_MODIFIED_PREFIX = "admin-modified"

SCOPE_USER = "user"
SCOPE_MODIFIED = "modified"

DEFINITION_FIELDS = ("product", "exportingFrom", "importingTo", "type", "rate", "effectiveDate", "expirationDate")


def _key(tariff: dict[str, Any]) -> tuple[Any, Any, Any]:
    return (tariff.get("product"), tariff.get("exportingFrom"), tariff.get("importingTo"))


def merge_tariffs(global_tariffs: list[dict[str, Any]], modified: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Global tariffs with admin-modified ones replacing the same product/country pair."""
    merged = list(global_tariffs)
    index = {_key(t): i for i, t in enumerate(merged)}
    for tariff in modified:
        key = _key(tariff)
        if key in index:
            merged[index[key]] = tariff
        else:
            index[key] = len(merged)
            merged.append(tariff)
    return merged


def _matches(value: Any, wanted: str | None) -> bool:
    return not wanted or wanted == FILTER_ALL_VALUE or value == wanted


def filter_tariffs(
    tariffs: Iterable[dict[str, Any]],
    product: str | None = None,
    exporting_from: str | None = None,
    importing_to: str | None = None,
) -> list[dict[str, Any]]:
    return [
        t for t in tariffs
        if _matches(t.get("product"), product)
        and _matches(t.get("exportingFrom"), exporting_from)
        and _matches(t.get("importingTo"), importing_to)
    ]


def _unique(values: Iterable[Any]) -> list[str]:
    seen: dict[str, None] = {}
    for v in values:
        if v:
            seen.setdefault(v, None)
    return list(seen)


def unique_products(tariffs: Iterable[dict[str, Any]]) -> list[str]:
    return _unique(t.get("product") for t in tariffs)


def unique_countries(tariffs: Iterable[dict[str, Any]]) -> list[str]:
    tariffs = list(tariffs)
    exporting = [t.get("exportingFrom") for t in tariffs]
    importing = [t.get("importingTo") for t in tariffs]
    return _unique(exporting + importing)


def write_scope(simulator_mode: bool, is_admin: bool) -> str:
    """Admins editing the global table write overrides; everyone else writes their own tariffs."""
    return SCOPE_MODIFIED if is_admin and not simulator_mode else SCOPE_USER


def scope_for_existing(tariff: dict[str, Any], simulator_mode: bool) -> str:
    if simulator_mode or str(tariff.get("id", "")).startswith(USER_ID_PREFIX):
        return SCOPE_USER
    return SCOPE_MODIFIED


def generate_tariff_id(simulator_mode: bool, is_admin: bool) -> str:
    prefix = USER_ID_PREFIX if simulator_mode or not is_admin else ADMIN_MODIFIED_PREFIX
    return f"{prefix}-{int(time.time() * 1000)}"


def build_payload(form: dict[str, Any], tariff_id: str | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    if tariff_id:
        payload["id"] = tariff_id
    for field in DEFINITION_FIELDS:
        payload[field] = form.get(field)
    payload["rate"] = parse_number(form.get("rate"))
    return payload


def is_replacement(payload: dict[str, Any], modified: list[dict[str, Any]]) -> bool:
    """True when an override for the same product/country pair already exists."""
    return any(_key(t) == _key(payload) for t in modified)


def form_from_tariff(tariff: dict[str, Any]) -> dict[str, Any]:
    form = {field: tariff.get(field, "") for field in DEFINITION_FIELDS}
    form["rate"] = "" if tariff.get("rate") is None else str(tariff.get("rate"))
    return form
