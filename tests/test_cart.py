"""
Tests for the cart engine
"""

import json
from decimal import Decimal

import pytest

from fashionhive.cart import (
    AddItem,
    CartEngine,
    CartState,
    ClearBrand,
    ClearCart,
    LineItem,
    MemoryStorage,
    ProductSnapshot,
    RemoveItem,
    UpdateQuantity,
    apply,
    replay,
)


def _assert_totals_consistent(engine: CartEngine):
    assert engine.total_items == sum(item.quantity for item in engine.items)
    assert engine.total_price == sum(
        (item.numeric_price * item.quantity for item in engine.items), Decimal("0")
    )


class TestLineItem:
    """Tests for LineItem and the product snapshot."""

    def test_from_product(self, product_a):
        item = LineItem.from_product(product_a, 2, "M")

        assert item.product_id == "65f000000000000000000001"
        assert item.quantity == 2
        assert item.color == ""
        assert item.numeric_price == Decimal("3990")
        assert item.brand_collection == "Khaadi"
        assert item.product.images == ("https://cdn.example.com/khaadi/1.jpg",)

    def test_brand_falls_back_to_brand_field(self, product_c):
        item = LineItem.from_product(product_c, 1, "S")
        assert item.brand_collection == "Sapphire"

    def test_missing_images_and_price(self):
        item = LineItem.from_product({"id": 7, "name": "Sample"}, 1, "L")

        assert item.product_id == "7"
        assert item.product.images == ()
        assert item.numeric_price == Decimal("0")
        assert item.brand_collection == ""

    def test_line_total(self, product_b):
        item = LineItem.from_product(product_b, 3, "M")
        assert item.line_total == Decimal("37500")

    def test_round_trip_dict(self, product_a):
        item = LineItem.from_product(product_a, 2, "M", "Red")
        restored = LineItem.from_dict(json.loads(json.dumps(item.to_dict())))

        assert restored == item

    def test_from_dict_rejects_non_positive_quantity(self, product_a):
        data = LineItem.from_product(product_a, 1, "M").to_dict()
        data["quantity"] = 0

        with pytest.raises(ValueError):
            LineItem.from_dict(data)

    def test_snapshot_is_not_refreshed(self, product_a):
        item = LineItem.from_product(product_a, 1, "M")
        product_a["price"] = "Rs.9,999"

        assert item.numeric_price == Decimal("3990")
        assert item.product.price == "Rs.3,990"


class TestCommands:
    """Tests for the pure transition function."""

    def test_apply_does_not_mutate(self, product_a):
        state = CartState()
        new_state = apply(state, AddItem(product=product_a, quantity=1, size="M"))

        assert state.items == ()
        assert len(new_state.items) == 1

    def test_replay(self, product_a, product_b):
        state = replay([
            AddItem(product=product_a, quantity=1, size="M"),
            AddItem(product=product_b, quantity=2, size="L"),
            UpdateQuantity(product_id=product_a["_id"], size="M", color="", quantity=5),
            RemoveItem(product_id=product_b["_id"], size="L"),
        ])

        assert [item.quantity for item in state.items] == [5]

    def test_clear_cart(self, product_a):
        state = replay([AddItem(product=product_a, quantity=1, size="M"), ClearCart()])
        assert state == CartState()

    def test_unknown_command(self):
        with pytest.raises(TypeError):
            apply(CartState(), object())


class TestCartEngine:
    """Tests for CartEngine operations."""

    def test_add_item(self, engine, product_a):
        result = engine.add_item(product_a, 2, "M")

        assert result.success is True
        assert result.message == "Item added to cart"
        assert result.total_items == 2
        assert result.total_price == Decimal("7980")

    def test_quantity_defaults_to_one(self, engine, product_a):
        engine.add_item(product_a, size="M")
        assert engine.total_items == 1

    def test_add_without_size_fails(self, engine, memory_storage, product_a):
        result = engine.add_item(product_a, 1, "")

        assert result.success is False
        assert result.reason == "missing size"
        assert result.message == "Please select a size"
        assert engine.items == ()
        assert memory_storage.writes == 0

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_add_with_invalid_quantity_fails(self, engine, product_a, quantity):
        result = engine.add_item(product_a, quantity, "M")

        assert result.success is False
        assert result.reason == "invalid quantity"
        assert engine.items == ()

    def test_merge_on_duplicate_add(self, engine, product_a):
        engine.add_item(product_a, 2, "M", "Red")
        engine.add_item(product_a, 3, "M", "Red")

        assert len(engine.items) == 1
        assert engine.items[0].quantity == 5

    def test_different_variants_are_separate_lines(self, engine, product_a):
        engine.add_item(product_a, 1, "M", "Red")
        engine.add_item(product_a, 1, "L", "Red")
        engine.add_item(product_a, 1, "M", "Blue")

        assert len(engine.items) == 3

    def test_none_color_matches_empty_color(self, engine, product_a):
        engine.add_item(product_a, 1, "M", None)
        engine.add_item(product_a, 1, "M", "")

        assert len(engine.items) == 1
        assert engine.items[0].quantity == 2

    def test_update_quantity_overwrites(self, engine, product_a):
        engine.add_item(product_a, 2, "M")
        engine.update_quantity(product_a["_id"], "M", "", 7)

        assert engine.items[0].quantity == 7
        assert engine.total_items == 7

    def test_update_quantity_zero_removes(self, engine, product_a):
        engine.add_item(product_a, 2, "M")
        engine.update_quantity(product_a["_id"], "M", "", 0)

        assert engine.items == ()

    def test_remove_and_update_missing_are_noops(self, engine, product_a, product_b):
        engine.add_item(product_a, 2, "M")
        engine.add_item(product_b, 1, "L")
        before = engine.items

        engine.remove_item("does-not-exist", "M")
        engine.remove_item(product_a["_id"], "XL")
        engine.update_quantity("does-not-exist", "M", "", 0)
        engine.update_quantity(product_a["_id"], "M", "Green", 4)

        assert engine.items == before

    def test_remove_is_idempotent(self, engine, product_a, product_b):
        engine.add_item(product_a, 1, "M")
        engine.add_item(product_b, 1, "L")

        engine.remove_item(product_a["_id"], "M")
        engine.remove_item(product_a["_id"], "M")

        assert [item.product_id for item in engine.items] == [product_b["_id"]]

    def test_clear_cart(self, engine, product_a):
        engine.add_item(product_a, 1, "M")
        engine.clear_cart()
        engine.clear_cart()

        assert engine.items == ()
        assert engine.total_items == 0
        assert engine.total_price == 0

    def test_clear_brand_isolation(self, engine, product_a, product_b, product_c):
        engine.add_item(product_a, 1, "M")
        engine.add_item(product_c, 1, "S")
        engine.add_item(product_b, 1, "L")
        engine.add_item(dict(product_c, _id="65f000000000000000000005"), 2, "S")

        engine.clear_brand("Khaadi")

        assert [item.product_id for item in engine.items] == [
            "65f000000000000000000004",
            "65f000000000000000000005",
        ]

    def test_clear_brand_is_case_sensitive(self, engine, product_a):
        engine.add_item(product_a, 1, "M")
        engine.clear_brand("khaadi")

        assert len(engine.items) == 1

    def test_totals_consistent_after_every_operation(self, engine, product_a, product_b, product_c):
        operations = [
            lambda: engine.add_item(product_a, 2, "M"),
            lambda: engine.add_item(product_b, 1, "L", "Gold"),
            lambda: engine.add_item(product_a, 3, "M"),
            lambda: engine.add_item(product_c, 4, "S"),
            lambda: engine.update_quantity(product_b["_id"], "L", "Gold", 6),
            lambda: engine.remove_item(product_a["_id"], "M"),
            lambda: engine.clear_brand("Sapphire"),
            lambda: engine.update_quantity(product_b["_id"], "L", "Gold", -2),
            lambda: engine.clear_cart(),
        ]
        for operation in operations:
            operation()
            _assert_totals_consistent(engine)

    def test_add_then_partial_remove(self, engine):
        engine.add_item({"id": "A", "price": "Rs.100"}, 2, "M", "")
        engine.add_item({"id": "B", "price": "Rs.50"}, 1, "L", "")
        assert engine.total_items == 3

        engine.update_quantity("A", "M", "", 0)

        assert [item.product_id for item in engine.items] == ["B"]
        assert engine.total_items == 1

    def test_history_records_commands(self, engine, product_a):
        engine.add_item(product_a, 1, "M")
        engine.add_item(product_a, 1, "")
        engine.clear_brand("Khaadi")

        assert [type(c) for c in engine.history] == [AddItem, ClearBrand]
        assert replay(engine.history) == engine.state


class TestGrouping:
    """Tests for brand partitioning."""

    def test_group_by_brand(self, engine):
        a = {"id": "A", "price": "Rs.1,000", "brandCollection": "X"}
        b = {"id": "B", "price": "Rs.2,000", "brandCollection": "X"}
        c = {"id": "C", "price": "Rs.500", "brandCollection": "Y"}
        engine.add_item(a, 1, "M")
        engine.add_item(c, 3, "M")
        engine.add_item(b, 2, "M")

        grouped = engine.group_by_brand()

        assert list(grouped) == ["X", "Y"]
        assert [item.product_id for item in grouped["X"]] == ["A", "B"]
        assert [item.product_id for item in grouped["Y"]] == ["C"]
        assert engine.brand_total("X") == Decimal("5000")
        assert engine.brand_total("Y") == Decimal("1500")

    def test_missing_brand_grouped_under_other(self, engine):
        engine.add_item({"id": "A", "price": 10}, 1, "M")
        assert list(engine.group_by_brand()) == ["Other"]

    def test_group_reflects_current_items(self, engine, product_a):
        engine.add_item(product_a, 1, "M")
        first = engine.group_by_brand()
        engine.clear_cart()

        assert engine.group_by_brand() == {}
        assert len(first["Khaadi"]) == 1

    def test_brand_total_unknown_brand(self, engine, product_a):
        engine.add_item(product_a, 1, "M")
        assert engine.brand_total("Nope") == 0

    def test_cart_summary(self, engine, product_a, product_c):
        engine.add_item(product_a, 2, "M")
        engine.add_item(product_c, 1, "S")

        summary = engine.get_cart_summary()

        assert summary["is_empty"] is False
        assert summary["total_items"] == 3
        assert summary["brands"] == [
            {"brand": "Khaadi", "items": 1, "total": Decimal("7980")},
            {"brand": "Sapphire", "items": 1, "total": Decimal("1990")},
        ]

    def test_empty_cart_summary(self, engine):
        assert engine.get_cart_summary()["is_empty"] is True


class TestPersistence:
    """Tests for write-through persistence and restore."""

    def test_write_through_after_each_mutation(self, engine, memory_storage, product_a):
        engine.add_item(product_a, 1, "M")
        assert memory_storage.writes == 1

        engine.update_quantity(product_a["_id"], "M", "", 3)
        assert memory_storage.writes == 2

        stored = json.loads(memory_storage.data)
        assert stored[0]["quantity"] == 3
        assert "total_items" not in memory_storage.data.decode()

    def test_restore_round_trip(self, memory_storage, product_a, product_c):
        first = CartEngine(memory_storage)
        first.add_item(product_a, 2, "M", "Red")
        first.add_item(product_c, 1, "S")

        second = CartEngine(memory_storage)

        assert second.items == first.items
        assert second.total_price == first.total_price

    def test_restore_malformed_data(self):
        engine = CartEngine(MemoryStorage(b"{not json"))

        assert engine.items == ()
        assert engine.total_items == 0

    @pytest.mark.parametrize("payload", [
        b'{"items": []}',
        b'[{"product_id": "A"}]',
        b'[{"product_id": "A", "product": {"id": "A"}, "quantity": -1, "size": "M"}]',
        b"\xff\xfe",
        b'[{"product_id": "A", "product": {"id": "A"}, "quantity": 1, "size": "M"},'
        b' {"product_id": "A", "product": {"id": "A"}, "quantity": 2, "size": "M"}]',
        b"[" * 200000,
    ])
    def test_restore_invalid_shapes(self, payload):
        assert CartEngine(MemoryStorage(payload)).items == ()

    def test_restore_non_finite_price_counts_as_zero(self):
        payload = (
            b'[{"product_id": "A", "product": {"id": "A", "price": "Rs.100"},'
            b' "quantity": 2, "size": "M", "numeric_price": "Infinity"}]'
        )
        engine = CartEngine(MemoryStorage(payload))

        assert engine.total_items == 2
        assert engine.total_price == Decimal("0")

    def test_restore_storage_error(self):
        class BrokenStorage:
            def load(self):
                raise OSError("disk gone")

            def save(self, data):
                return True

        assert CartEngine(BrokenStorage()).items == ()

    def test_save_failure_keeps_memory_state(self, product_a):
        class FullStorage:
            def load(self):
                return None

            def save(self, data):
                return False

        engine = CartEngine(FullStorage())
        result = engine.add_item(product_a, 1, "M")

        assert result.success is True
        assert engine.total_items == 1

    def test_save_exception_keeps_memory_state(self, product_a):
        class RaisingStorage:
            def load(self):
                return None

            def save(self, data):
                raise RuntimeError("quota exceeded")

        engine = CartEngine(RaisingStorage())
        engine.add_item(product_a, 1, "M")

        assert engine.total_items == 1

    def test_restore_disabled(self, memory_storage, product_a):
        CartEngine(memory_storage).add_item(product_a, 1, "M")
        assert CartEngine(memory_storage, restore=False).items == ()


def test_snapshot_round_trip():
    snapshot = ProductSnapshot(id="A", name="Kurta", price="Rs.3,990", images=("u",), brand="X", category="C")
    assert ProductSnapshot.from_dict(snapshot.to_dict()) == snapshot
