"""
Tests for the cart engine: merge-add, quantity updates, removal and totals.
"""
import itertools
import threading
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.data.database import enable_sqlite_foreign_keys, init_db
from app.data.models import CartItemModel, ProductModel, UserModel
from app.domain.errors import (
    CartItemRejectedError,
    CatalogConsistencyError,
    InvalidQuantityError,
)
from app.repos.cart_repo import CartRepo
from app.services.cart_service import CartService, compute_totals


def rows_for(db, user_id):
    db.expire_all()
    return db.query(CartItemModel).filter_by(user_id=user_id).order_by(CartItemModel.id).all()


class TestAddItem:
    """Test merge-add semantics of add_item."""

    def test_same_key_merges_quantities(self, seeded):
        svc = CartService(seeded)

        svc.add_item(user_id=1, product_id=7, quantity=2)
        svc.add_item(user_id=1, product_id=7, quantity=3)

        rows = rows_for(seeded, 1)
        assert len(rows) == 1
        assert rows[0].quantity == 5

    def test_missing_size_and_color_is_a_stable_key(self, seeded):
        svc = CartService(seeded)

        svc.add_item(1, 7, 1, size=None, color=None)
        svc.add_item(1, 7, 4)

        items = svc.get_cart_items(1)
        assert len(items) == 1
        assert items[0]["quantity"] == 5
        assert items[0]["size"] is None
        assert items[0]["color"] is None

    def test_different_variants_are_separate_lines(self, seeded):
        svc = CartService(seeded)

        svc.add_item(1, 7, 1)
        svc.add_item(1, 7, 1, size="M")
        svc.add_item(1, 7, 1, size="M", color="red")
        svc.add_item(1, 7, 2, size="M", color="red")

        items = svc.get_cart_items(1)
        assert [(i["size"], i["color"], i["quantity"]) for i in items] == [
            (None, None, 1),
            ("M", None, 1),
            ("M", "red", 3),
        ]

    def test_carts_are_per_user(self, seeded):
        svc = CartService(seeded)

        svc.add_item(1, 7, 2)
        svc.add_item(2, 7, 1)

        assert svc.get_cart_items(1)[0]["quantity"] == 2
        assert svc.get_cart_items(2)[0]["quantity"] == 1

    @pytest.mark.parametrize("quantity", [0, -1, True, 1.5, "2"])
    def test_rejects_non_positive_or_non_integer_quantity(self, seeded, quantity):
        with pytest.raises(InvalidQuantityError):
            CartService(seeded).add_item(1, 7, quantity)
        assert rows_for(seeded, 1) == []

    def test_unknown_product_is_reported_not_crashed(self, seeded):
        svc = CartService(seeded)

        with pytest.raises(CartItemRejectedError):
            svc.add_item(1, 4242, 1)

        # the session is usable again after the rejected insert
        svc.add_item(1, 7, 1)
        assert len(rows_for(seeded, 1)) == 1


class TestCartItems:
    """Test the enriched cart read."""

    def test_items_are_joined_with_product_data(self, seeded):
        svc = CartService(seeded)
        svc.add_item(1, 7, 2, size="L", color="black")

        (item,) = svc.get_cart_items(1)

        assert item["user_id"] == 1
        assert item["product_id"] == 7
        assert item["name"] == "Highlands Bilum"
        assert item["price"] == Decimal("10.00")
        assert item["image_url"] == "/img/bilum.jpg"
        assert item["size"] == "L"
        assert item["color"] == "black"

    def test_empty_cart(self, seeded):
        assert CartService(seeded).get_cart_items(1) == []

    def test_missing_product_is_a_consistency_fault(self, seeded, monkeypatch):
        orphan = CartItemModel(id=5, user_id=1, product_id=77, quantity=1, size="", color="")
        monkeypatch.setattr(CartRepo, "get_cart_rows", lambda self, user_id: [(orphan, None)])

        with pytest.raises(CatalogConsistencyError):
            CartService(seeded).get_cart_items(1)

    def test_summary_shape(self, seeded):
        svc = CartService(seeded)
        svc.add_item(1, 7, 2)
        svc.add_item(1, 9, 1)

        summary = svc.get_cart_summary(1)

        assert summary["total"] == "25.00"
        assert summary["count"] == 3
        assert len(summary["items"]) == 2


class TestUpdateAndRemove:
    """Test quantity replacement, removal and clearing."""

    def test_update_replaces_quantity(self, seeded):
        svc = CartService(seeded)
        svc.add_item(1, 7, 2)
        item_id = svc.get_cart_items(1)[0]["id"]

        assert svc.update_item(1, item_id, 7) is True
        assert svc.get_cart_items(1)[0]["quantity"] == 7

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_update_rejects_non_positive_quantity(self, seeded, quantity):
        svc = CartService(seeded)
        svc.add_item(1, 7, 2)
        item_id = svc.get_cart_items(1)[0]["id"]

        with pytest.raises(InvalidQuantityError):
            svc.update_item(1, item_id, quantity)
        assert svc.get_cart_items(1)[0]["quantity"] == 2

    def test_update_unknown_item_returns_false(self, seeded):
        assert CartService(seeded).update_item(1, 12345, 3) is False

    def test_update_of_another_users_item_is_refused(self, seeded):
        svc = CartService(seeded)
        svc.add_item(1, 7, 2)
        item_id = svc.get_cart_items(1)[0]["id"]

        assert svc.update_item(2, item_id, 50) is False
        assert svc.get_cart_items(1)[0]["quantity"] == 2

    def test_remove_is_idempotent(self, seeded):
        svc = CartService(seeded)
        svc.add_item(1, 7, 2)
        svc.add_item(1, 9, 1)
        item_id = svc.get_cart_items(1)[0]["id"]

        assert svc.remove_item(1, item_id) is True
        assert svc.remove_item(1, item_id) is False
        assert [i["product_id"] for i in svc.get_cart_items(1)] == [9]

    def test_remove_does_not_touch_other_users_items(self, seeded):
        svc = CartService(seeded)
        svc.add_item(1, 7, 2)
        item_id = svc.get_cart_items(1)[0]["id"]

        svc.remove_item(2, item_id)

        assert len(svc.get_cart_items(1)) == 1

    def test_clear_is_idempotent_and_scoped_to_user(self, seeded):
        svc = CartService(seeded)
        svc.add_item(1, 7, 2)
        svc.add_item(1, 9, 1)
        svc.add_item(2, 11, 1)

        assert svc.clear_cart(1) is True
        assert svc.clear_cart(1) is True
        assert svc.get_cart_items(1) == []
        assert len(svc.get_cart_items(2)) == 1


class TestComputeTotals:
    """Test cart total and unit count."""

    def test_scenario(self):
        items = [
            {"product_id": 7, "quantity": 2, "price": Decimal("10.00")},
            {"product_id": 9, "quantity": 1, "price": Decimal("5.00")},
        ]
        assert compute_totals(items) == (Decimal("25.00"), 3)

    def test_order_independent(self):
        items = [
            {"quantity": 3, "price": Decimal("0.10")},
            {"quantity": 1, "price": Decimal("19.99")},
            {"quantity": 7, "price": "2.35"},
        ]
        expected = compute_totals(items)
        for perm in itertools.permutations(items):
            assert compute_totals(perm) == expected
        assert expected == (Decimal("36.74"), 11)

    def test_empty(self):
        assert compute_totals([]) == (Decimal("0.00"), 0)


class TestConcurrentAdd:
    """Parallel adds of the same item from separate connections."""

    @pytest.fixture
    def file_sessions(self, tmp_path):
        engine = create_engine(
            f"sqlite:///{tmp_path / 'cart.db'}",
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        enable_sqlite_foreign_keys(engine)
        init_db(engine)
        factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

        with factory() as session:
            session.add(UserModel(id=1, username="kila", email="kila@example.com", full_name="Kila Wari", password_hash="x"))
            session.add(ProductModel(id=7, name="Highlands Bilum", description="Wool bilum", price=Decimal("10.00")))
            session.commit()

        yield factory
        engine.dispose()

    def test_parallel_adds_merge_into_one_row(self, file_sessions):
        workers = 8
        barrier = threading.Barrier(workers)
        errors = []

        def add_one():
            with file_sessions() as session:
                barrier.wait()
                try:
                    CartService(session).add_item(1, 7, 1)
                except Exception as e:
                    errors.append(e)

        threads = [threading.Thread(target=add_one) for _ in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        with file_sessions() as session:
            rows = rows_for(session, 1)
        assert len(rows) == 1
        assert rows[0].quantity == workers
