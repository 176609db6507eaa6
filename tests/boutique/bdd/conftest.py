"""Shared BDD fixtures and step definitions for the boutique domain."""

from datetime import UTC, datetime

import pytest
from boutique.cart.cart import ShoppingCart
from boutique.catalog.item import CatalogItem
from boutique.order.lifecycle import OrderStatus
from boutique.order.order import Order
from pytest_bdd import given, parsers, then

_LONG_AGO = datetime(2020, 1, 1, tzinfo=UTC)


@pytest.fixture()
def error():
    """Container for an exception captured in a When step."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps: catalog and cart
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a catalog item "{name}" priced at {price:g}'), target_fixture="catalog_item")
def catalog_item_priced(name, price):
    item = CatalogItem.create(name=name, base_price=price)
    item._events.clear()
    return item


@given("an empty cart", target_fixture="cart")
def empty_cart():
    cart = ShoppingCart.create(owner_id="user-1")
    cart._events.clear()
    return cart


# ---------------------------------------------------------------------------
# Given steps: orders
# ---------------------------------------------------------------------------
@given(parsers.cfparse('an order owned by "{owner}" in status "{status}"'), target_fixture="order")
def order_in_status(owner, status):
    order = Order.create(
        {"name": "Awa Ndiaye", "phone": "+221 77 123 45 67"},
        [{"product_id": "prod-001", "name": "Boubou brodé", "quantity": 1, "unit_price": 10000.0}],
        "Wave",
        user_id=None if owner == "guest" else owner,
    )
    order.status = OrderStatus(status).value
    order.updated_at = _LONG_AGO
    order._events.clear()
    return order


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order, status):
    assert order.status == status


@then("the order was last updated long ago")
def order_not_touched(order):
    assert order.updated_at == _LONG_AGO


@then("the order was just updated")
def order_touched(order):
    assert order.updated_at > _LONG_AGO


@then(parsers.cfparse("the request is rejected with {error_name}"))
def request_rejected(error, error_name):
    assert error["exc"] is not None
    assert type(error["exc"]).__name__ == error_name


@then("the request succeeds")
def request_succeeds(error):
    assert error["exc"] is None
