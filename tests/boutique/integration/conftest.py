import pytest
from boutique.api.errors import register_exception_handlers
from boutique.api.routes import alert_router, cart_router, catalog_router, invoice_router, order_router
from fastapi import FastAPI
from fastapi.testclient import TestClient

ADMIN = {"X-Actor-Role": "admin", "X-Actor-Id": "adm-1"}


@pytest.fixture()
def client():
    app = FastAPI()
    register_exception_handlers(app)
    for router in (catalog_router, cart_router, order_router, invoice_router, alert_router):
        app.include_router(router)
    return TestClient(app)


@pytest.fixture()
def place_order(client):
    """Create a catalog item, fill a cart and check out; returns the placement response body."""

    def _place(user_id="user-1", base_price=10000.0, quantity=2, **checkout):
        item = client.post("/catalog", json={"name": "Boubou brodé", "base_price": base_price}, headers=ADMIN)
        item_id = item.json()["item_id"]
        cart_id = client.post("/carts", json={"owner_id": user_id}).json()["cart_id"]
        client.post(f"/carts/{cart_id}/items", json={"product_id": item_id, "quantity": quantity})

        body = {"cart_id": cart_id, "name": "Awa Ndiaye", "phone": "+221 77 123 45 67", "payment_method": "Wave"}
        body.update(checkout)
        headers = {"X-Actor-Id": user_id} if user_id else {}
        response = client.post("/orders", json=body, headers=headers)
        assert response.status_code == 201
        return response.json()

    return _place
