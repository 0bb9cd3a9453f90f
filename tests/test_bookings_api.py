"""API tests for the client booking routes under /api/events."""

from decimal import Decimal

import pytest

from src.bookings.inventory_service import GUEST_PURCHASER
from src.models import Ticket


def _purchase(client, event_id, quantity=None, headers=None):
    body = None if quantity is None else {"quantity": quantity}
    return client.post(f"/api/events/{event_id}/purchase", json=body, headers=headers)


def _ticket_emails(session_factory, event_id):
    session = session_factory()
    try:
        return [t.user_email for t in session.query(Ticket).filter(Ticket.event_id == event_id)]
    finally:
        session.close()


class TestListEvents:

    def test_list_is_ordered_by_date(self, client, make_event):
        later = make_event(name="Homecoming Concert", days_ahead=30)
        sooner = make_event(name="Jazz Night", days_ahead=3)

        response = client.get("/api/events")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["count"] == 2
        assert [e["id"] for e in body["data"]] == [sooner, later]

    def test_sold_out_events_are_still_listed(self, client, make_event):
        make_event(total_tickets=10, available_tickets=0)

        body = client.get("/api/events").json()

        assert body["count"] == 1
        assert body["data"][0]["available_tickets"] == 0

    def test_empty_list(self, client):
        assert client.get("/api/events").json() == {"success": True, "data": [], "count": 0}


class TestPurchase:

    def test_purchase_without_body_buys_one_ticket(self, client, make_event, read_event, session_factory):
        event_id = make_event(total_tickets=5)

        response = _purchase(client, event_id)

        assert response.status_code == 200
        booking = response.json()["booking"]
        assert booking["tickets_booked"] == 1
        assert booking["remaining_tickets"] == 4
        assert read_event(event_id).available_tickets == 4
        assert _ticket_emails(session_factory, event_id) == [GUEST_PURCHASER]

    def test_purchase_with_quantity(self, client, make_event, read_event):
        event_id = make_event(total_tickets=10, price=Decimal("12.50"))

        response = _purchase(client, event_id, quantity=3)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["booking"]["event_id"] == event_id
        assert body["booking"]["event_name"] == "Tiger Jazz Night"
        assert body["booking"]["remaining_tickets"] == 7
        assert Decimal(body["booking"]["total_price"]) == Decimal("37.50")
        assert read_event(event_id).available_tickets == 7

    def test_authenticated_purchase_records_email(self, client, make_event, auth_headers, session_factory):
        event_id = make_event()
        headers = auth_headers(email="buyer@clemson.edu")

        response = _purchase(client, event_id, quantity=2, headers=headers)

        assert response.status_code == 200
        assert _ticket_emails(session_factory, event_id) == ["buyer@clemson.edu"]

    def test_invalid_token_is_not_treated_as_guest(self, client, make_event, read_event):
        event_id = make_event(total_tickets=5)

        response = _purchase(client, event_id, headers={"Authorization": "Bearer nonsense"})

        assert response.status_code == 401
        assert read_event(event_id).available_tickets == 5

    def test_non_bearer_header_buys_as_guest(self, client, make_event, session_factory):
        event_id = make_event(total_tickets=5)

        response = _purchase(client, event_id, headers={"Authorization": "Basic dXNlcjpwYXNz"})

        assert response.status_code == 200
        assert _ticket_emails(session_factory, event_id) == [GUEST_PURCHASER]

    def test_unknown_event(self, client):
        response = _purchase(client, 9999, quantity=1)

        assert response.status_code == 404
        assert response.json()["error"] == "EVENT_NOT_FOUND"

    def test_insufficient_inventory_reports_remaining(self, client, make_event, read_event):
        event_id = make_event(total_tickets=10, available_tickets=2)

        response = _purchase(client, event_id, quantity=3)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "INSUFFICIENT_INVENTORY"
        assert body["remaining_tickets"] == 2
        assert read_event(event_id).available_tickets == 2

    @pytest.mark.parametrize("quantity", [0, -2, 1.5, "two"])
    def test_invalid_quantity(self, client, make_event, read_event, quantity):
        event_id = make_event(total_tickets=5)

        response = _purchase(client, event_id, quantity=quantity)

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_INPUT"
        assert read_event(event_id).available_tickets == 5

    def test_last_ticket_then_sold_out(self, client, make_event):
        event_id = make_event(total_tickets=1)

        assert _purchase(client, event_id).status_code == 200

        response = _purchase(client, event_id)
        assert response.status_code == 400
        assert response.json()["remaining_tickets"] == 0
