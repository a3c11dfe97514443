"""
Tests for export cart helpers, add-to-cart messages and the admin stats loader.
"""

from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock, patch

from tariffwise.domains.cart import cart_frame, csv_filename, history_not_in_cart, plural, toggle, toggle_all
from tariffwise.infrastructure.api.client import ApiError
from tariffwise.ui.admin_dashboard import load_stats
from tariffwise.ui.export_cart import _finish, add_selected_to_cart, clear_cart, remove_selected_from_cart
from tariffwise.ui.results_table import add_to_cart, breakdown_frame, cart_error_message

HISTORY = [{"id": "h1"}, {"id": "h2"}, {"id": "h3"}]
CART = [
    {
        "id": "h2",
        "productName": "Rice",
        "exportingFrom": "Thailand",
        "importingTo": "Singapore",
        "quantity": 10,
        "unit": "kg",
        "tariffType": "AHS",
        "productCost": 25,
        "totalCost": 26.25,
        "currency": "USD",
        "calculationDate": "2025-03-01",
    },
]


def test_history_excludes_cart_items() -> None:
    assert [h["id"] for h in history_not_in_cart(HISTORY, CART)] == ["h1", "h3"]


def test_toggle_and_toggle_all() -> None:
    assert toggle(set(), "h1") == {"h1"}
    assert toggle({"h1"}, "h1") == set()
    assert toggle_all({"h1"}, HISTORY) == {"h1", "h2", "h3"}
    assert toggle_all({"h1", "h2", "h3"}, HISTORY) == set()


def test_plural_and_filename() -> None:
    assert plural(1) == "1 item"
    assert plural(3) == "3 items"
    assert csv_filename(date(2025, 3, 1)) == "tariff-calculations-2025-03-01.csv"


def test_cart_frame_formats_money() -> None:
    frame = cart_frame(CART)
    assert frame.loc[0, "Route"] == "Thailand → Singapore"
    assert frame.loc[0, "Quantity"] == "10 kg"
    assert frame.loc[0, "Total Cost"] == "$26.25"


def test_add_selected_to_cart() -> None:
    client = MagicMock()
    assert add_selected_to_cart(client, set()) == (0, set(), "Please select at least one calculation to add to cart")
    assert add_selected_to_cart(client, {"h1", "h3"}) == (2, set(), "Successfully added 2 items to cart")
    assert client.add_to_cart.call_count == 2


def test_add_selected_to_cart_continues_past_failures() -> None:
    client = MagicMock()
    client.add_to_cart.side_effect = [None, ApiError("boom", 500), None]

    result = add_selected_to_cart(client, {"a", "b", "c"})

    assert [c.args[0] for c in client.add_to_cart.call_args_list] == ["a", "b", "c"]
    assert result == (2, {"b"}, "Successfully added 2 items to cart. 1 item could not be added: boom")


def test_add_selected_to_cart_all_failed() -> None:
    client = MagicMock()
    client.add_to_cart.side_effect = ApiError("Calculation already in cart", 400)

    assert add_selected_to_cart(client, {"a", "b"}) == (
        0, {"a", "b"}, "Failed to add items to cart: Calculation already in cart",
    )


def test_remove_selected_from_cart() -> None:
    client = MagicMock()
    assert remove_selected_from_cart(client, set()) == (0, set(), "Please select at least one item to delete")
    assert remove_selected_from_cart(client, {"h2"}) == (1, set(), "Successfully deleted 1 item")
    client.remove_from_cart.assert_called_once_with("h2")


def test_remove_selected_from_cart_continues_past_failures() -> None:
    client = MagicMock()
    client.remove_from_cart.side_effect = [ApiError("gone", 404), None, None]

    result = remove_selected_from_cart(client, {"a", "b", "c"})

    assert client.remove_from_cart.call_count == 3
    assert result == (2, {"a"}, "Successfully deleted 2 items. 1 item could not be deleted: gone")


def test_partial_batch_refreshes_badge_and_keeps_failed_selected(fake_st: MagicMock) -> None:
    client = MagicMock()
    client.cart_count.return_value = 5
    fake_st.session_state.update(selected_history_items={"a", "b", "c"}, downloads={"cart": b"stale"})

    with patch("tariffwise.ui.export_cart.st", fake_st), patch("tariffwise.ui.session_state.st", fake_st):
        _finish(2, {"b"}, "Successfully added 2 items to cart", client, "selected_history_items")

    assert fake_st.session_state.selected_history_items == {"b"}
    assert fake_st.session_state.cart_count == 5
    assert fake_st.session_state.downloads == {}
    assert fake_st.session_state.flash == ("warning", "Successfully added 2 items to cart")
    fake_st.rerun.assert_called_once()


def test_failed_batch_leaves_badge_and_downloads(fake_st: MagicMock) -> None:
    client = MagicMock()
    fake_st.session_state.update(selected_cart_items={"a"}, downloads={"cart": b"csv"})

    with patch("tariffwise.ui.export_cart.st", fake_st), patch("tariffwise.ui.session_state.st", fake_st):
        _finish(0, {"a"}, "Failed to delete items: gone", client, "selected_cart_items")

    client.cart_count.assert_not_called()
    assert fake_st.session_state.downloads == {"cart": b"csv"}
    assert fake_st.session_state.flash == ("error", "Failed to delete items: gone")


def test_clear_cart_failure_message() -> None:
    client = MagicMock()
    assert clear_cart(client) == (True, "Export cart cleared successfully")
    client.clear_cart.side_effect = ApiError("Server returned 500", 500)
    ok, message = clear_cart(client)
    assert not ok
    assert "Server returned 500" in message


def test_cart_error_messages() -> None:
    assert cart_error_message(ApiError("Calculation already in cart", 400)) == "This calculation is already in your export cart"
    assert cart_error_message(ApiError("missing", 404)) == "Calculation not found in history. Please calculate again."
    assert cart_error_message(ApiError("bad input", 400)) == "Failed to add to cart: bad input"
    assert cart_error_message(ApiError("boom", 500)) == "Failed to add to cart: boom"


def test_add_to_cart_needs_calculation_id() -> None:
    client = MagicMock()
    assert add_to_cart(client, None) == (False, "No calculation data available")
    assert add_to_cart(client, {"data": {"product": "Rice"}}) == (False, "Calculation ID not found. Please calculate again.")
    client.add_to_cart.assert_not_called()


def test_add_to_cart_uses_wrapped_or_inner_id() -> None:
    client = MagicMock()
    assert add_to_cart(client, {"data": {"product": "Rice"}, "calculationId": "hist-1"})[0]
    client.add_to_cart.assert_called_with("hist-1")
    assert add_to_cart(client, {"product": "Oranges", "calculationId": "local_1_abc"})[0]
    client.add_to_cart.assert_called_with("local_1_abc")


def test_add_to_cart_maps_api_errors() -> None:
    client = MagicMock()
    client.add_to_cart.side_effect = ApiError("not found", 404)
    ok, message = add_to_cart(client, {"calculationId": "hist-1", "data": {"product": "Rice"}})
    assert not ok
    assert message == "Calculation not found in history. Please calculate again."


def test_breakdown_frame() -> None:
    frame = breakdown_frame({
        "currency": "EUR",
        "breakdown": [{"description": "Rice", "type": "Product Cost", "rate": "€2.50/kg", "amount": 25}],
    })
    assert frame.loc[0, "Amount"] == "€25.00"


def test_load_stats_defaults_to_zero() -> None:
    client = MagicMock()
    client.dashboard_stats.return_value = {"totalTariffs": 42, "totalProducts": None}
    assert load_stats(client) == {"totalTariffs": 42, "totalProducts": 0, "totalCountries": 0, "totalCountryPairs": 0}

    client.dashboard_stats.side_effect = ApiError("forbidden", 403)
    assert load_stats(client)["totalTariffs"] == 0
