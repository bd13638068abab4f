from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from storefront.data.models import CartItemModel, OrderModel, OrderItemModel, UserModel
from storefront.domain.errors import (
    EmptyCart,
    InvalidInput,
    InvalidTransition,
    OrderNotFound,
    OrderNumberExhausted,
    StorageUnavailable,
    UserNotFound,
    ValidationError,
)
from storefront.services.cart_service import CartService
from storefront.services.order_service import OrderService, generate_order_number


def _numbers(*values):
    it = iter(values)
    return lambda: next(it)


@pytest.fixture
def cart(db, products):
    svc = CartService(db)
    svc.add_item("s1", products["Product A"].id, 2)
    svc.add_item("s1", products["Product B"].id, 1, color="negro")
    return svc


@pytest.fixture
def svc(db, notifier):
    return OrderService(db, notification_service=notifier)


def _count(db, model):
    return db.query(model).count()


def test_generated_number_format():
    number = generate_order_number()
    assert number.startswith("ORD-")
    token = number[len("ORD-"):]
    assert len(token) == 5
    assert token.isalnum() and token.upper() == token


def test_checkout_creates_order_and_clears_cart(svc, cart, db, notifier, customer):
    order = svc.create_order("s1", customer)

    assert order["status"] == "pending"
    assert order["subtotal"] == Decimal("45.50")
    assert order["shipping"] == Decimal("9.99")
    assert order["taxes"] == Decimal("3.64")
    assert order["total"] == Decimal("59.13")
    assert order["customer_email"] == "ana@example.com"
    assert order["payment_method"] == "credit-card"

    assert len(order["items"]) == 2
    first, second = order["items"]
    assert (first["product_name"], first["quantity"], first["subtotal"]) == ("Product A", 2, Decimal("20.00"))
    assert second["color"] == "negro"

    assert _count(db, OrderModel) == 1
    assert _count(db, OrderItemModel) == 2
    assert cart.get_cart("s1")["summary"]["item_count"] == 0
    assert notifier.sent == [(order["order_number"], "ana@example.com")]


def test_empty_cart_creates_nothing(svc, db, products, customer):
    with pytest.raises(EmptyCart):
        svc.create_order("s1", customer)
    assert _count(db, OrderModel) == 0


def test_empty_cart_wins_over_invalid_details(svc, products):
    with pytest.raises(EmptyCart):
        svc.create_order("s1", {})


def test_validation_collects_every_field(svc, cart, db, customer):
    customer.update(customer_email="not-an-email", customer_phone="12", payment_method="bitcoin")
    del customer["shipping_city"]

    with pytest.raises(ValidationError) as exc:
        svc.create_order("s1", customer)

    assert set(exc.value.errors) == {
        "customer_email",
        "customer_phone",
        "payment_method",
        "shipping_city",
    }
    assert _count(db, OrderModel) == 0
    assert len(db.query(CartItemModel).all()) == 2


def test_unknown_user(svc, cart, customer):
    with pytest.raises(UserNotFound):
        svc.create_order("s1", customer, user_id=77)


def test_order_owned_by_user(svc, cart, db, customer):
    user = UserModel(name="Ana", email="ana@example.com")
    db.add(user)
    db.commit()

    order = svc.create_order("s1", customer, user_id=user.id)

    assert order["user_id"] == user.id
    assert [o["id"] for o in svc.list_orders(user_id=user.id)] == [order["id"]]


def test_number_collision_is_retried(db, cart, products, notifier, customer):
    first = OrderService(db, notifier, number_generator=_numbers("ORD-AAAAA")).create_order("s1", customer)

    cart.add_item("s1", products["Product A"].id, 1)
    second = OrderService(
        db, notifier, number_generator=_numbers("ORD-AAAAA", "ORD-AAAAA", "ORD-BBBBB")
    ).create_order("s1", customer)

    assert first["order_number"] == "ORD-AAAAA"
    assert second["order_number"] == "ORD-BBBBB"


def test_collision_at_flush_is_retried(db, cart, products, notifier, customer, monkeypatch):
    OrderService(db, notifier, number_generator=_numbers("ORD-AAAAA")).create_order("s1", customer)
    cart.add_item("s1", products["Product B"].id, 1)

    svc = OrderService(db, notifier, number_generator=_numbers("ORD-AAAAA", "ORD-BBBBB"))

    # pierwsze sprawdzenie nie widzi zajetego numeru, kolizja dopiero na unique constraint
    real_exists = svc.repo.order_number_exists
    checks = {"n": 0}

    def stale_exists(number):
        checks["n"] += 1
        return False if checks["n"] == 1 else real_exists(number)

    monkeypatch.setattr(svc.repo, "order_number_exists", stale_exists)

    real_delete = svc.cart_repo.delete_items
    deletes = []

    def counting_delete(session_key, item_ids):
        deletes.append(list(item_ids))
        return real_delete(session_key, item_ids)

    monkeypatch.setattr(svc.cart_repo, "delete_items", counting_delete)

    order = svc.create_order("s1", customer)

    assert order["order_number"] == "ORD-BBBBB"
    assert [i["product_name"] for i in order["items"]] == ["Product B"]
    assert len(deletes) == 1
    assert _count(db, OrderModel) == 2
    assert cart.get_cart("s1")["items"] == []


def test_number_exhaustion_leaves_cart_untouched(db, cart, products, notifier, customer):
    OrderService(db, notifier, number_generator=lambda: "ORD-AAAAA").create_order("s1", customer)
    cart.add_item("s1", products["Product A"].id, 1)

    svc = OrderService(db, notifier, number_generator=lambda: "ORD-AAAAA")
    with pytest.raises(OrderNumberExhausted):
        svc.create_order("s1", customer)

    assert _count(db, OrderModel) == 1
    assert cart.get_cart("s1")["summary"]["item_count"] == 1


def test_failure_inside_transaction_rolls_everything_back(svc, cart, db, customer, monkeypatch):
    def boom(session_key, item_ids):
        raise RuntimeError("disk full")

    monkeypatch.setattr(svc.cart_repo, "delete_items", boom)

    with pytest.raises(RuntimeError):
        svc.create_order("s1", customer)

    assert _count(db, OrderModel) == 0
    assert _count(db, OrderItemModel) == 0
    assert cart.get_cart("s1")["summary"]["item_count"] == 3


def test_items_added_during_checkout_stay_in_cart(svc, cart, db, products, customer, monkeypatch):
    real_snapshot = svc._snapshot_cart

    def snapshot_then_add(session_key):
        lines = real_snapshot(session_key)
        CartService(db).add_item(session_key, products["Laptop Pro"].id, 1)
        return lines

    monkeypatch.setattr(svc, "_snapshot_cart", snapshot_then_add)

    order = svc.create_order("s1", customer)

    assert [i["product_name"] for i in order["items"]] == ["Product A", "Product B"]
    left = cart.get_cart("s1")["items"]
    assert [(i["product_id"], i["quantity"]) for i in left] == [(products["Laptop Pro"].id, 1)]


def test_order_items_keep_snapshot(svc, cart, db, products, customer):
    order = svc.create_order("s1", customer)

    product = products["Product A"]
    product.price = Decimal("99.00")
    product.name = "Renamed"
    product.image_url = "new.jpg"
    db.commit()

    item = svc.get_order(order["id"])["items"][0]
    assert item["product_name"] == "Product A"
    assert item["price"] == Decimal("10.00")
    assert item["product_image_url"] == "a.jpg"


def test_lookups(svc, cart, customer):
    order = svc.create_order("s1", customer)

    assert svc.get_order_by_number(order["order_number"])["id"] == order["id"]
    assert [o["id"] for o in svc.list_orders(email="ana@example.com")] == [order["id"]]
    assert svc.list_orders(email="other@example.com") == []

    with pytest.raises(OrderNotFound):
        svc.get_order(999)
    with pytest.raises(OrderNotFound):
        svc.get_order_by_number("ORD-NOPE0")
    with pytest.raises(InvalidInput):
        svc.list_orders()


def test_lookup_by_email_as_typed(svc, cart, customer):
    customer["customer_email"] = "Ana@Example.COM"
    order = svc.create_order("s1", customer)

    assert order["customer_email"] == "Ana@example.com"
    for email in ("Ana@Example.COM", " Ana@example.com "):
        assert [o["id"] for o in svc.list_orders(email=email)] == [order["id"]]

    with pytest.raises(InvalidInput):
        svc.list_orders(email="not-an-email")


def test_status_lifecycle(svc, cart, customer):
    order_id = svc.create_order("s1", customer)["id"]

    for status in ("processing", "shipped", "delivered"):
        assert svc.update_status(order_id, status)["status"] == status

    with pytest.raises(InvalidTransition):
        svc.update_status(order_id, "cancelled")


@pytest.mark.parametrize("path, target", [
    ((), "shipped"),
    ((), "delivered"),
    (("processing",), "pending"),
    (("cancelled",), "processing"),
])
def test_illegal_transitions(svc, cart, customer, path, target):
    order_id = svc.create_order("s1", customer)["id"]
    for status in path:
        svc.update_status(order_id, status)

    with pytest.raises(InvalidTransition):
        svc.update_status(order_id, target)


def test_cancel_from_processing(svc, cart, customer):
    order_id = svc.create_order("s1", customer)["id"]
    svc.update_status(order_id, "processing")
    assert svc.update_status(order_id, "cancelled")["status"] == "cancelled"


def test_unknown_status(svc, cart, customer):
    order_id = svc.create_order("s1", customer)["id"]
    with pytest.raises(InvalidInput):
        svc.update_status(order_id, "lost")


def test_payment_proof(svc, cart, customer):
    order_id = svc.create_order("s1", customer)["id"]

    order = svc.attach_payment_proof(order_id, "  https://files.example.com/proof.png ")
    assert order["payment_proof"] == "https://files.example.com/proof.png"

    svc.update_status(order_id, "cancelled")
    with pytest.raises(InvalidTransition):
        svc.attach_payment_proof(order_id, "late.png")


def _db_down():
    return OperationalError("SELECT 1", {}, Exception("database is locked"))


def test_transient_storage_error_is_retried_once(svc, cart, customer, monkeypatch):
    order = svc.create_order("s1", customer)
    real_get = svc.repo.get_order
    calls = {"n": 0}

    def flaky(order_id):
        calls["n"] += 1
        if calls["n"] == 1:
            raise _db_down()
        return real_get(order_id)

    monkeypatch.setattr(svc.repo, "get_order", flaky)

    assert svc.get_order(order["id"])["id"] == order["id"]
    assert calls["n"] == 2


def test_persistent_storage_error_surfaces(svc, monkeypatch):
    def down(order_id):
        raise _db_down()

    monkeypatch.setattr(svc.repo, "get_order", down)

    with pytest.raises(StorageUnavailable):
        svc.get_order(1)
