"""Tests for the shared table cart."""

import threading
from decimal import Decimal

import pytest

from qrorder.domain.errors import InvalidInput
from qrorder.services.cart_service import item_identity
from tests.helpers import T0


def add(carts, guest, item_id, quantity=1, modifiers=(), name=None, **kwargs):
    return carts.add_item(
        "T1", guest, name or guest.title(), {"id": item_id}, quantity, modifiers, **kwargs
    )


class TestItemIdentity:
    def test_without_modifiers(self):
        assert item_identity("m3") == "m3"

    def test_modifier_order_does_not_matter(self):
        assert item_identity("m3", ["b", "a"]) == item_identity("m3", {"a", "b"}) == "m3|a,b"

    def test_duplicates_collapse(self):
        assert item_identity("m3", ["a", "a"]) == "m3|a"

    def test_separator_inside_modifier_name_is_escaped(self):
        assert item_identity("m3", ["a,b"]) == "m3|a\\,b"
        assert item_identity("m3", ["a,b"]) != item_identity("m3", ["a", "b"])

    def test_separator_inside_item_id_is_escaped(self):
        assert item_identity("m3|a") != item_identity("m3", ["a"])


class TestAddItem:
    def test_same_modifier_set_merges_into_one_line(self, carts):
        add(carts, "ana", "m3", 1, ["cheese", "bacon"])
        cart = add(carts, "ana", "m3", 2, ["bacon", "cheese"])

        assert len(cart["items"]) == 1
        line = cart["items"][0]
        assert line["quantity"] == 3
        assert line["key"] == "m3|bacon,cheese"
        assert line["modifiers"] == ["bacon", "cheese"]

    def test_different_modifiers_are_separate_lines(self, carts):
        add(carts, "ana", "m3", 1, ["cheese"])
        cart = add(carts, "ana", "m3", 1)
        assert sorted(line["key"] for line in cart["items"]) == ["m3", "m3|cheese"]

    def test_comma_in_modifier_name_does_not_merge_with_split_modifiers(self, carts):
        add(carts, "ana", "m3", 1, {"a,b"})
        cart = add(carts, "ana", "m3", 1, {"a", "b"})

        assert len(cart["items"]) == 2
        modifiers = sorted(line["modifiers"] for line in cart["items"])
        assert modifiers == [["a", "b"], ["a,b"]]
        assert all(line["quantity"] == 1 for line in cart["items"])

    def test_same_item_from_two_guests_stays_two_lines(self, carts):
        add(carts, "ana", "m1")
        cart = add(carts, "leo", "m1")
        assert len(cart["items"]) == 2

    def test_catalog_name_and_price(self, carts):
        line = add(carts, "ana", "m2")["items"][0]
        assert line["name"] == "Regina"
        assert line["unit_price"] == Decimal("10.00")

    def test_latest_price_override_wins(self, carts):
        add(carts, "ana", "m1", 1)
        line = add(carts, "ana", "m1", 1, unit_price=Decimal("9.00"))["items"][0]
        assert line["quantity"] == 2
        assert line["unit_price"] == Decimal("9.00")
        assert line["line_total"] == Decimal("18.00")

    def test_unknown_item_uses_caller_values(self, carts):
        cart = carts.add_item("T1", "ana", "Ana", {"id": "soup", "name": "Soup", "price": "4.20"}, 1)
        line = cart["items"][0]
        assert (line["name"], line["unit_price"]) == ("Soup", Decimal("4.20"))

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_rejected(self, carts, quantity):
        with pytest.raises(InvalidInput):
            add(carts, "ana", "m1", quantity)
        assert carts.snapshot("T1")["items"] == []

    def test_missing_item_id_rejected(self, carts):
        with pytest.raises(InvalidInput):
            carts.add_item("T1", "ana", "Ana", {"name": "Soup"}, 1)

    def test_blank_table_rejected(self, carts):
        with pytest.raises(InvalidInput):
            carts.add_item("", "ana", "Ana", {"id": "m1"}, 1)


class TestAdjustQuantity:
    def test_increment_and_decrement(self, carts):
        add(carts, "ana", "m1", 2)
        assert carts.adjust_quantity("T1", "ana", "m1", 3)["items"][0]["quantity"] == 5
        assert carts.adjust_quantity("T1", "ana", "m1", -4)["items"][0]["quantity"] == 1

    def test_reaching_zero_removes_line(self, carts):
        add(carts, "ana", "m1", 2)
        assert carts.adjust_quantity("T1", "ana", "m1", -2)["items"] == []

    def test_going_negative_removes_line(self, carts):
        add(carts, "ana", "m1", 2)
        add(carts, "ana", "m2", 1)
        cart = carts.adjust_quantity("T1", "ana", "m1", -5)
        assert [line["key"] for line in cart["items"]] == ["m2"]

    def test_unknown_line_is_noop(self, carts):
        add(carts, "ana", "m1", 1)
        cart = carts.adjust_quantity("T1", "ana", "m9", -1)
        assert cart["items"][0]["quantity"] == 1
        assert carts.adjust_quantity("T8", "nobody", "m1", 1)["items"] == []

    def test_other_guest_line_is_not_touched(self, carts):
        add(carts, "ana", "m1", 1)
        cart = carts.adjust_quantity("T1", "leo", "m1", -1)
        assert cart["items"][0]["quantity"] == 1


class TestSnapshot:
    def test_flags_lines_of_requesting_guest(self, carts):
        add(carts, "ana", "m1", 2)
        add(carts, "leo", "m4", 1)

        cart = carts.snapshot("T1", "leo")
        owners = {line["item_id"]: line["is_owner"] for line in cart["items"]}
        assert owners == {"m1": False, "m4": True}
        assert {line["owner_name"] for line in cart["items"]} == {"Ana", "Leo"}

    def test_totals(self, carts):
        add(carts, "ana", "m1", 2)
        add(carts, "leo", "m4", 1)
        totals = carts.snapshot("T1")["totals"]
        assert totals == {
            "subtotal": Decimal("20.50"),
            "surtax": Decimal("2.05"),
            "total": Decimal("22.55"),
        }

    def test_empty_table(self, carts):
        cart = carts.snapshot("T2")
        assert cart["items"] == []
        assert cart["totals"]["total"] == Decimal("0.00")


class TestClearAndCheckout:
    def test_clear_table_drops_all_guests(self, carts):
        add(carts, "ana", "m1")
        add(carts, "leo", "m2")
        assert carts.clear_table("T1") is True
        assert carts.snapshot("T1")["items"] == []
        assert carts.clear_table("T1") is False

    def test_checkout_creates_one_ticket_for_the_table(self, carts, floor):
        add(carts, "ana", "m1", 2, ["extra cheese"])
        add(carts, "leo", "m4", 1)

        ticket = carts.checkout("T1", "ana")
        assert ticket.table == "T1"
        assert ticket.owner_name == "Ana"
        assert ticket.total == Decimal("22.55")
        assert [(i.item_id, i.owner_name) for i in ticket.items] == [("m1", "Ana"), ("m4", "Leo")]
        assert ticket.items[0].modifiers == frozenset({"extra cheese"})
        assert carts.snapshot("T1")["items"] == []
        assert floor.table_states.get("T1").session_start_at == T0

    def test_checkout_keeps_cart_prices(self, carts):
        add(carts, "ana", "m1", 1, unit_price=Decimal("9.00"))
        ticket = carts.checkout("T1")
        assert ticket.items[0].unit_price == Decimal("9.00")
        assert ticket.total == Decimal("9.90")

    def test_checkout_of_empty_cart_rejected(self, carts, floor):
        with pytest.raises(InvalidInput):
            carts.checkout("T1")
        assert floor.tickets.count() == 0


class TestConcurrentGuests:
    def test_parallel_additions_are_not_lost(self, carts):
        def worker(guest):
            for _ in range(50):
                carts.add_item("T1", guest, guest, {"id": "m1"}, 1)
                carts.add_item("T1", "shared", "Shared", {"id": "m2"}, 1)

        threads = [threading.Thread(target=worker, args=(f"g{i}",)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        lines = {(l["guest_key"], l["item_id"]): l["quantity"] for l in carts.snapshot("T1")["items"]}
        assert lines[("shared", "m2")] == 400
        assert all(lines[(f"g{i}", "m1")] == 50 for i in range(8))
