"""Integration tests for the order, invoice and alert API endpoints via TestClient."""

ADMIN = {"X-Actor-Role": "admin", "X-Actor-Id": "adm-1"}
MANAGER = {"X-Actor-Role": "manager", "X-Actor-Id": "mgr-1"}


def customer(user_id="user-1"):
    return {"X-Actor-Role": "customer", "X-Actor-Id": user_id}


class TestCheckoutAPI:
    def test_place_order(self, client, place_order):
        placed = place_order()
        assert placed["order_number"].startswith("SB-")

        data = client.get(f"/orders/{placed['order_id']}", headers=ADMIN).json()
        assert data["status"] == "PendingPayment"
        assert data["total"] == 20000.0
        assert data["invoiceable"] is False
        assert data["customer"]["name"] == "Awa Ndiaye"

    def test_empty_cart_checkout(self, client):
        cart_id = client.post("/carts", json={}).json()["cart_id"]
        response = client.post(
            "/orders",
            json={"cart_id": cart_id, "name": "Awa Ndiaye", "phone": "771234567"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "empty_cart"

    def test_long_notes_rejected(self, client):
        cart_id = client.post("/carts", json={}).json()["cart_id"]
        response = client.post(
            "/orders",
            json={"cart_id": cart_id, "name": "Awa", "phone": "771234567", "notes": "x" * 201},
        )
        assert response.status_code == 422

    def test_track_by_order_number(self, client, place_order):
        placed = place_order(user_id=None)
        response = client.get(f"/orders/track/{placed['order_number'].lower()}")
        assert response.status_code == 200
        assert response.json()["order_id"] == placed["order_id"]

    def test_track_unknown_number(self, client):
        assert client.get("/orders/track/SB-XXXXXX").status_code == 404


class TestOrderVisibility:
    def test_customer_sees_only_own_orders(self, client, place_order):
        mine = place_order(user_id="user-1")
        theirs = place_order(user_id="user-2")

        listed = client.get("/orders", headers=customer("user-1")).json()
        assert [o["order_id"] for o in listed] == [mine["order_id"]]

        assert client.get(f"/orders/{theirs['order_id']}", headers=customer("user-1")).status_code == 404

    def test_staff_see_all_orders(self, client, place_order):
        place_order(user_id="user-1")
        place_order(user_id=None)
        assert len(client.get("/orders", headers=MANAGER).json()) == 2


class TestStatusAPI:
    def test_allowed_transitions(self, client, place_order):
        order_id = place_order()["order_id"]

        data = client.get(f"/orders/{order_id}/transitions", headers=customer()).json()
        assert data["current_status"] == "PendingPayment"
        assert data["allowed"] == ["Cancelled"]

    def test_admin_marks_paid(self, client, place_order):
        order_id = place_order()["order_id"]
        response = client.put(f"/orders/{order_id}/status", json={"new_status": "Paid"}, headers=ADMIN)
        assert response.status_code == 200
        assert response.json()["status"] == "Paid"
        assert response.json()["invoiceable"] is True

    def test_manager_cannot_mark_paid(self, client, place_order):
        order_id = place_order()["order_id"]
        response = client.put(f"/orders/{order_id}/status", json={"new_status": "Paid"}, headers=MANAGER)
        assert response.status_code == 403
        assert response.json()["error"] == "unauthorized_transition"

    def test_customer_cannot_cancel_someone_elses_order(self, client, place_order):
        order_id = place_order(user_id="user-1")["order_id"]
        response = client.put(
            f"/orders/{order_id}/status",
            json={"new_status": "Cancelled"},
            headers=customer("user-2"),
        )
        assert response.status_code == 403
        assert response.json()["error"] == "self_action"

    def test_unknown_status_value(self, client, place_order):
        order_id = place_order()["order_id"]
        response = client.put(f"/orders/{order_id}/status", json={"new_status": "Lost"}, headers=ADMIN)
        assert response.status_code == 422


class TestInvoiceAPI:
    def test_invoice_list_and_document(self, client, place_order):
        paid = place_order()["order_id"]
        place_order()
        client.put(f"/orders/{paid}/status", json={"new_status": "Paid"}, headers=ADMIN)

        listed = client.get("/invoices", headers=ADMIN).json()
        assert [o["order_id"] for o in listed] == [paid]

        invoice = client.get(f"/invoices/{paid}", headers=customer()).json()
        assert invoice["total"] == 20000.0
        assert invoice["lines"][0]["line_total"] == 20000.0

    def test_pending_order_has_no_invoice(self, client, place_order):
        order_id = place_order()["order_id"]
        assert client.get(f"/invoices/{order_id}", headers=ADMIN).status_code == 400


class TestAlertsAPI:
    def test_staff_alert_and_mark_read(self, client, place_order):
        place_order()

        alerts = client.get("/dashboard/alerts", headers=MANAGER).json()
        assert len(alerts) == 1
        assert alerts[0]["kind"] == "order-created"

        client.put(f"/dashboard/alerts/{alerts[0]['alert_id']}/read", headers=MANAGER)
        assert client.get("/dashboard/alerts", headers=MANAGER).json() == []

    def test_customer_alert_on_status_change(self, client, place_order):
        order_id = place_order(user_id="user-1")["order_id"]
        client.put(f"/orders/{order_id}/status", json={"new_status": "Paid"}, headers=ADMIN)

        alerts = client.get("/dashboard/alerts", headers=customer("user-1")).json()
        assert [a["status"] for a in alerts] == ["Paid"]

    def test_customer_cannot_mark_staff_alert_read(self, client, place_order):
        place_order()
        alert_id = client.get("/dashboard/alerts", headers=MANAGER).json()[0]["alert_id"]

        response = client.put(f"/dashboard/alerts/{alert_id}/read", headers=customer("user-1"))

        assert response.status_code == 404
        assert len(client.get("/dashboard/alerts", headers=MANAGER).json()) == 1
