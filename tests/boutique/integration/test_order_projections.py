"""Integration tests for the OrderSummary projection."""

from boutique.cart.items import AddToCart
from boutique.cart.management import CreateCart
from boutique.catalog.management import AddCatalogItem
from boutique.invoice.eligibility import filter_invoiceable
from boutique.order.checkout import PlaceOrder
from boutique.order.status import ChangeOrderStatus
from boutique.projections.order_summary import OrderSummary, list_order_summaries
from protean import current_domain


def _place_order(user_id="user-1", quantity=2):
    cart_id = current_domain.process(CreateCart(owner_id=user_id), asynchronous=False)
    item_id = current_domain.process(AddCatalogItem(name="Boubou", base_price=10000.0), asynchronous=False)
    current_domain.process(AddToCart(cart_id=cart_id, product_id=item_id, quantity=quantity), asynchronous=False)
    return current_domain.process(
        PlaceOrder(cart_id=cart_id, user_id=user_id, name="Awa Ndiaye", phone="771234567", payment_method="Wave"),
        asynchronous=False,
    )["order_id"]


class TestOrderSummaryProjection:
    def test_created_on_checkout(self):
        order_id = _place_order()
        summary = current_domain.repository_for(OrderSummary).get(order_id)

        assert summary.status == "PendingPayment"
        assert summary.customer_name == "Awa Ndiaye"
        assert summary.item_count == 2
        assert summary.total == 20000.0
        assert summary.currency == "XOF"

    def test_follows_status_changes(self):
        order_id = _place_order()
        current_domain.process(
            ChangeOrderStatus(order_id=order_id, new_status="Paid", actor_role="admin", actor_id="adm-1"),
            asynchronous=False,
        )
        assert current_domain.repository_for(OrderSummary).get(order_id).status == "Paid"

    def test_listing_per_user(self):
        _place_order(user_id="user-1")
        _place_order(user_id="user-1")
        _place_order(user_id="user-2")

        assert len(list_order_summaries()) == 3
        assert len(list_order_summaries(user_id="user-1")) == 2

    def test_invoiceable_summaries(self):
        paid = _place_order()
        _place_order()
        current_domain.process(
            ChangeOrderStatus(order_id=paid, new_status="Paid", actor_role="admin", actor_id="adm-1"),
            asynchronous=False,
        )

        invoiceable = filter_invoiceable(list_order_summaries())
        assert [s.order_id for s in invoiceable] == [paid]
