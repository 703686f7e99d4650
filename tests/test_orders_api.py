"""
Tests for order retrieval and the order status lifecycle.
"""

import uuid
from datetime import timedelta
from decimal import Decimal

import pytest
from rest_framework import status

from orders.models import Order
from orders.services import create_order

ORDERS_URL = "/api/orders/"


@pytest.fixture
def order(menu_item):
    order, _ = create_order(
        items=[{"itemId": str(menu_item.id), "quantity": 2}],
        client_total=Decimal("90.00"),
        payment_method="cash",
    )
    return order


def make_orders(count, **kwargs):
    return [
        Order.objects.create(total=Decimal("10.00"), payment_method="cash", **kwargs)
        for _ in range(count)
    ]


@pytest.mark.django_db
class TestOrderList:
    """Tests for GET /api/orders/"""

    def test_list_envelope_and_pagination(self, authenticated_client):
        make_orders(25)

        response = authenticated_client.get(ORDERS_URL)

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["success"] is True
        assert len(body["data"]) == 20
        assert body["count"] == 25
        assert body["pagination"] == {"page": 1, "limit": 20, "total": 25, "pages": 2}

    def test_second_page(self, authenticated_client):
        make_orders(25)

        body = authenticated_client.get(ORDERS_URL, {"page": 2, "limit": 20}).json()

        assert len(body["data"]) == 5
        assert body["pagination"]["page"] == 2

    def test_newest_first(self, authenticated_client, order):
        newer = make_orders(1)[0]
        Order.objects.filter(pk=newer.pk).update(created_at=order.created_at + timedelta(minutes=5))

        data = authenticated_client.get(ORDERS_URL).json()["data"]

        assert [row["id"] for row in data] == [str(newer.id), str(order.id)]

    def test_status_filter(self, authenticated_client):
        make_orders(2)
        make_orders(3, status=Order.Status.COMPLETED)

        body = authenticated_client.get(ORDERS_URL, {"status": "completed"}).json()

        assert body["count"] == 3
        assert {row["status"] for row in body["data"]} == {"completed"}

    @pytest.mark.parametrize(
        "params",
        [{"limit": 0}, {"limit": 101}, {"page": 0}, {"page": "abc"}, {"status": "shipped"}],
    )
    def test_invalid_query(self, authenticated_client, params):
        response = authenticated_client.get(ORDERS_URL, params)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.django_db
class TestOrderDetail:
    """Tests for GET /api/orders/<id>/"""

    def test_get_order(self, authenticated_client, order, menu_item):
        response = authenticated_client.get(f"{ORDERS_URL}{order.id}/")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["id"] == str(order.id)
        assert data["total"] == 90.0
        assert data["items"][0]["menuItem"]["name"] == "Latte"

    def test_repeated_reads_are_identical(self, authenticated_client, order):
        first = authenticated_client.get(f"{ORDERS_URL}{order.id}/").json()
        second = authenticated_client.get(f"{ORDERS_URL}{order.id}/").json()

        assert first == second

    def test_deleted_menu_item_leaves_line_unresolved(self, authenticated_client, order, menu_item):
        menu_item.delete()

        data = authenticated_client.get(f"{ORDERS_URL}{order.id}/").json()["data"]

        assert data["items"][0]["itemId"] == str(order.items.get().item_id)
        assert data["items"][0]["menuItem"] is None
        assert data["total"] == 90.0

    def test_missing_order(self, authenticated_client):
        response = authenticated_client.get(f"{ORDERS_URL}{uuid.uuid4()}/")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == {"message": "Order not found", "code": "NOT_FOUND"}

    def test_malformed_id(self, authenticated_client):
        response = authenticated_client.get(f"{ORDERS_URL}not-a-uuid/")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.django_db
class TestOrderStatus:
    """Tests for PUT /api/orders/<id>/status/"""

    def url(self, order_id):
        return f"{ORDERS_URL}{order_id}/status/"

    @pytest.mark.parametrize("new_status", ["completed", "cancelled"])
    def test_pending_order_can_be_closed(self, authenticated_client, order, new_status):
        created_at = order.created_at

        response = authenticated_client.put(self.url(order.id), {"status": new_status}, format="json")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["message"] == "Order status updated successfully"
        assert body["data"]["status"] == new_status
        order.refresh_from_db()
        assert order.status == new_status
        assert order.created_at == created_at
        assert order.updated_at >= created_at

    def test_same_status_is_accepted(self, authenticated_client, order):
        response = authenticated_client.put(self.url(order.id), {"status": "pending"}, format="json")

        assert response.status_code == status.HTTP_200_OK

    @pytest.mark.parametrize("new_status", ["pending", "cancelled"])
    def test_completed_order_is_final(self, authenticated_client, order, new_status):
        Order.objects.filter(pk=order.pk).update(status=Order.Status.COMPLETED)

        response = authenticated_client.put(self.url(order.id), {"status": new_status}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        error = response.json()["error"]
        assert error["code"] == "INVALID_STATUS_TRANSITION"
        assert error["details"] == {"from": "completed", "to": new_status}
        order.refresh_from_db()
        assert order.status == Order.Status.COMPLETED

    def test_unknown_status_value(self, authenticated_client, order):
        response = authenticated_client.put(self.url(order.id), {"status": "shipped"}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_missing_order(self, authenticated_client):
        response = authenticated_client.put(self.url(uuid.uuid4()), {"status": "completed"}, format="json")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"]["code"] == "NOT_FOUND"
