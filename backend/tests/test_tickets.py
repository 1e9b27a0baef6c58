# =============================================================================
# ASSETDESK - TICKET WORKFLOW TESTS
# =============================================================================
# Creation, admin updates, replies and the notifications they trigger
# =============================================================================

import pytest
from fastapi.testclient import TestClient

from assetdesk.services.assets import create_asset
from assetdesk.services.users import create_user
from factories import AssetFactory, TicketFactory, UserFactory

pytestmark = pytest.mark.integration

CUSTOMER = "customer@client.test"
OVERSIZED_ID = 99999999999999999999


@pytest.fixture
def ticket(client: TestClient, user_headers, company, outbox):
    """Open ticket with a customer email; the acknowledgement is cleared."""
    response = client.post(
        "/api/tickets",
        json={**TicketFactory(), "company_id": company["id"], "customer_email": CUSTOMER},
        headers=user_headers
    )
    assert response.status_code == 201
    outbox.clear()
    return response.json()


def _count(db, table: str) -> int:
    return db.execute(f"SELECT COUNT(*) AS n FROM {table}").fetchone()["n"]


class TestCreateTicket:
    """POST /api/tickets"""

    def test_create_returns_joined_ticket(
        self, client: TestClient, user_headers, regular_user, company
    ):
        response = client.post(
            "/api/tickets",
            json={**TicketFactory(priority=None), "company_id": company["id"]},
            headers=user_headers
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "Open"
        assert data["priority"] == "Normal"
        assert data["company_name"] == company["name"]
        assert data["user_id"] == regular_user["id"]
        assert data["user_name"] == regular_user["username"]
        assert data["assigned_user_id"] is None
        assert data["assigned_user_name"] is None

    @pytest.mark.parametrize("missing", ["company_id", "title", "description"])
    def test_required_fields(self, client: TestClient, user_headers, company, missing):
        payload = {**TicketFactory(), "company_id": company["id"]}
        payload.pop(missing)

        response = client.post("/api/tickets", json=payload, headers=user_headers)

        assert response.status_code == 400

    def test_unknown_priority_is_400(self, client: TestClient, user_headers, company):
        response = client.post(
            "/api/tickets",
            json={**TicketFactory(priority="Critical"), "company_id": company["id"]},
            headers=user_headers
        )

        assert response.status_code == 400

    def test_links_each_asset_once(self, client: TestClient, db, user_headers, company):
        first = create_asset(db, {**AssetFactory(), "company_id": company["id"]})
        second = create_asset(db, {**AssetFactory(), "company_id": company["id"]})

        response = client.post(
            "/api/tickets",
            json={
                **TicketFactory(),
                "company_id": company["id"],
                "asset_ids": [first["id"], second["id"], first["id"]],
            },
            headers=user_headers
        )

        assert response.status_code == 201
        detail = client.get(f"/api/tickets/{response.json()['id']}", headers=user_headers).json()
        assert sorted(a["id"] for a in detail["assets"]) == sorted([first["id"], second["id"]])
        assert _count(db, "ticket_assets") == 2

    def test_failed_link_leaves_no_ticket(self, client: TestClient, db, user_headers, company, outbox):
        """A bad asset id rolls back the ticket insert too."""
        response = client.post(
            "/api/tickets",
            json={
                **TicketFactory(),
                "company_id": company["id"],
                "asset_ids": [999],
                "customer_email": CUSTOMER,
            },
            headers=user_headers
        )

        assert response.status_code == 500
        assert "message" in response.json()
        assert _count(db, "tickets") == 0
        assert _count(db, "ticket_assets") == 0
        assert outbox == []

    def test_acknowledgement_email(self, client: TestClient, user_headers, company, outbox):
        payload = {
            **TicketFactory(title="VPN down", description="Cannot connect <since 9am>"),
            "company_id": company["id"],
            "customer_email": CUSTOMER,
        }

        response = client.post("/api/tickets", json=payload, headers=user_headers)

        ticket_id = response.json()["id"]
        assert len(outbox) == 1
        assert outbox[0]["to"] == CUSTOMER
        assert outbox[0]["subject"] == (
            f"[Ticket #{ticket_id}] Your support request has been received: VPN down"
        )
        assert "Cannot connect &lt;since 9am&gt;" in outbox[0]["body"]

    def test_no_customer_email_no_mail(self, client: TestClient, user_headers, company, outbox):
        client.post(
            "/api/tickets",
            json={**TicketFactory(), "company_id": company["id"]},
            headers=user_headers
        )

        assert outbox == []

    def test_mail_failure_does_not_fail_request(
        self, client: TestClient, user_headers, company, smtp_down, admin_headers
    ):
        response = client.post(
            "/api/tickets",
            json={**TicketFactory(), "company_id": company["id"], "customer_email": CUSTOMER},
            headers=user_headers
        )

        assert response.status_code == 201
        log = client.get("/api/email-log", headers=admin_headers).json()
        assert len(log) == 1
        assert log[0]["status"] == "failed"
        assert log[0]["ticket_id"] == response.json()["id"]
        assert log[0]["error"]


class TestReadTickets:
    """GET /api/tickets and /api/tickets/{id}"""

    def test_list_most_recently_updated_first(
        self, client: TestClient, db, user_headers, company
    ):
        ids = [
            client.post(
                "/api/tickets",
                json={**TicketFactory(), "company_id": company["id"]},
                headers=user_headers
            ).json()["id"]
            for _ in range(3)
        ]
        for ticket_id, stamp in zip(ids, ["2024-01-02 10:00:00", "2024-03-01 10:00:00",
                                          "2024-02-01 10:00:00"]):
            db.execute("UPDATE tickets SET updated_at = ? WHERE id = ?", (stamp, ticket_id))
        db.commit()

        response = client.get("/api/tickets", headers=user_headers)

        assert [t["id"] for t in response.json()] == [ids[1], ids[2], ids[0]]

    def test_filter_by_status(self, client: TestClient, admin_headers, ticket):
        client.put(
            f"/api/tickets/{ticket['id']}",
            json={"status": "Resolved", "priority": ticket["priority"]},
            headers=admin_headers
        )

        resolved = client.get("/api/tickets", params={"status": "Resolved"}, headers=admin_headers)
        still_open = client.get("/api/tickets", params={"status": "Open"}, headers=admin_headers)

        assert [t["id"] for t in resolved.json()] == [ticket["id"]]
        assert still_open.json() == []

    def test_detail_has_updates_oldest_first(self, client: TestClient, user_headers, ticket):
        for text in ["first", "second", "third"]:
            client.post(
                f"/api/tickets/{ticket['id']}/updates",
                json={"update_text": text},
                headers=user_headers
            )

        detail = client.get(f"/api/tickets/{ticket['id']}", headers=user_headers).json()

        assert [u["update_text"] for u in detail["updates"]] == ["first", "second", "third"]
        assert detail["assets"] == []

    def test_unknown_ticket_is_404(self, client: TestClient, user_headers):
        response = client.get("/api/tickets/999", headers=user_headers)

        assert response.status_code == 404
        assert response.json() == {"message": "Ticket not found"}

    def test_oversized_id_is_404(self, client: TestClient, user_headers):
        response = client.get(f"/api/tickets/{OVERSIZED_ID}", headers=user_headers)

        assert response.status_code == 404
        assert response.json() == {"message": "Ticket not found"}


class TestUpdateTicket:
    """PUT /api/tickets/{id} (admin)"""

    def test_three_changes_send_three_emails(
        self, client: TestClient, db, admin_headers, ticket, outbox
    ):
        tech = create_user(db, UserFactory(username="tech_anna"))

        response = client.put(
            f"/api/tickets/{ticket['id']}",
            json={"status": "In Progress", "priority": "High", "assigned_user_id": tech["id"]},
            headers=admin_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "In Progress"
        assert data["priority"] == "High"
        assert data["assigned_user_name"] == "tech_anna"

        title = ticket["title"]
        assert [m["subject"] for m in outbox] == [
            f"Re: [Ticket #{ticket['id']}] Status Updated: {title}",
            f"Re: [Ticket #{ticket['id']}] Priority Updated: {title}",
            f"Re: [Ticket #{ticket['id']}] Your Ticket Has Been Assigned: {title}",
        ]
        assert "Open" in outbox[0]["body"] and "In Progress" in outbox[0]["body"]
        assert "tech_anna" in outbox[2]["body"]

    def test_each_email_mentions_only_its_own_change(
        self, client: TestClient, db, admin_headers, ticket, outbox
    ):
        tech = create_user(db, UserFactory(username="tech_ben"))

        client.put(
            f"/api/tickets/{ticket['id']}",
            json={"status": "In Progress", "priority": "High", "assigned_user_id": tech["id"]},
            headers=admin_headers
        )

        status_mail, priority_mail, assigned_mail = (m["body"] for m in outbox)
        assert "Normal" not in status_mail and "High" not in status_mail
        assert "Normal" in priority_mail and "High" in priority_mail
        assert "Open" not in priority_mail and "In Progress" not in priority_mail
        for value in ("Open", "In Progress", "Normal", "High"):
            assert value not in assigned_mail

    def test_no_customer_email_no_mail(
        self, client: TestClient, user_headers, admin_headers, company, outbox
    ):
        created = client.post(
            "/api/tickets",
            json={**TicketFactory(), "company_id": company["id"]},
            headers=user_headers
        ).json()

        response = client.put(
            f"/api/tickets/{created['id']}",
            json={"status": "Resolved", "priority": "Urgent"},
            headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["status"] == "Resolved"
        assert outbox == []

    def test_mail_failure_does_not_fail_update(
        self, client: TestClient, admin_headers, ticket, smtp_down
    ):
        response = client.put(
            f"/api/tickets/{ticket['id']}",
            json={"status": "Resolved", "priority": "Normal"},
            headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["status"] == "Resolved"
        failed = client.get(
            "/api/email-log", params={"status": "failed"}, headers=admin_headers
        ).json()
        assert [row["ticket_id"] for row in failed] == [ticket["id"]]

    def test_unchanged_fields_send_nothing(self, client: TestClient, admin_headers, ticket, outbox):
        response = client.put(
            f"/api/tickets/{ticket['id']}",
            json={"status": ticket["status"], "priority": ticket["priority"]},
            headers=admin_headers
        )

        assert response.status_code == 200
        assert outbox == []

    def test_unassign_mentions_our_team(
        self, client: TestClient, admin_headers, admin_user, ticket, outbox
    ):
        client.put(
            f"/api/tickets/{ticket['id']}",
            json={"status": "Open", "priority": "Normal", "assigned_user_id": admin_user["id"]},
            headers=admin_headers
        )
        outbox.clear()

        response = client.put(
            f"/api/tickets/{ticket['id']}",
            json={"status": "Open", "priority": "Normal", "assigned_user_id": None},
            headers=admin_headers
        )

        assert response.json()["assigned_user_id"] is None
        assert len(outbox) == 1
        assert "our team" in outbox[0]["body"]

    def test_invalid_status_is_400(self, client: TestClient, admin_headers, ticket):
        response = client.put(
            f"/api/tickets/{ticket['id']}",
            json={"status": "Done", "priority": "Normal"},
            headers=admin_headers
        )

        assert response.status_code == 400

    def test_unknown_ticket_is_404(self, client: TestClient, admin_headers):
        response = client.put(
            "/api/tickets/999",
            json={"status": "Open", "priority": "Normal"},
            headers=admin_headers
        )

        assert response.status_code == 404

    def test_oversized_id_is_404(self, client: TestClient, admin_headers):
        response = client.put(
            f"/api/tickets/{OVERSIZED_ID}",
            json={"status": "Open", "priority": "Normal"},
            headers=admin_headers
        )

        assert response.status_code == 404

    def test_requires_admin(self, client: TestClient, user_headers, ticket):
        response = client.put(
            f"/api/tickets/{ticket['id']}",
            json={"status": "Closed", "priority": "Normal"},
            headers=user_headers
        )

        assert response.status_code == 403


class TestReplies:
    """POST /api/tickets/{id}/updates"""

    def test_reply_moves_ticket_in_progress(
        self, client: TestClient, user_headers, regular_user, ticket, outbox
    ):
        response = client.post(
            f"/api/tickets/{ticket['id']}/updates",
            json={"update_text": "Please restart the printer."},
            headers=user_headers
        )

        assert response.status_code == 201
        data = response.json()
        assert data["ticket_status"] == "In Progress"
        assert data["user_name"] == regular_user["username"]
        assert data["update_text"] == "Please restart the printer."

        detail = client.get(f"/api/tickets/{ticket['id']}", headers=user_headers).json()
        assert detail["status"] == "In Progress"

        assert len(outbox) == 1
        assert outbox[0]["subject"] == f"Re: [Ticket #{ticket['id']}] {ticket['title']}"
        assert regular_user["username"] in outbox[0]["body"]
        assert "Please restart the printer." in outbox[0]["body"]

    @pytest.mark.parametrize("text", ["", "   "])
    def test_blank_reply_is_400(self, client: TestClient, db, user_headers, ticket, text):
        response = client.post(
            f"/api/tickets/{ticket['id']}/updates",
            json={"update_text": text},
            headers=user_headers
        )

        assert response.status_code == 400
        assert _count(db, "ticket_updates") == 0

    def test_reply_to_unknown_ticket_is_404(self, client: TestClient, user_headers):
        response = client.post(
            "/api/tickets/999/updates",
            json={"update_text": "Hello?"},
            headers=user_headers
        )

        assert response.status_code == 404

    def test_reply_to_oversized_id_is_404(self, client: TestClient, db, user_headers):
        response = client.post(
            f"/api/tickets/{OVERSIZED_ID}/updates",
            json={"update_text": "Hello?"},
            headers=user_headers
        )

        assert response.status_code == 404
        assert _count(db, "ticket_updates") == 0

    def test_mail_failure_does_not_fail_reply(
        self, client: TestClient, user_headers, admin_headers, ticket, smtp_down
    ):
        response = client.post(
            f"/api/tickets/{ticket['id']}/updates",
            json={"update_text": "Replacing the toner now."},
            headers=user_headers
        )

        assert response.status_code == 201
        assert response.json()["ticket_status"] == "In Progress"
        failed = client.get(
            "/api/email-log", params={"status": "failed"}, headers=admin_headers
        ).json()
        assert [row["email_type"] for row in failed] == ["new_reply"]


class TestDeleteTicket:
    """DELETE /api/tickets/{id} (admin)"""

    def test_delete_removes_updates_and_keeps_email_log(
        self, client: TestClient, db, admin_headers, user_headers, ticket
    ):
        client.post(
            f"/api/tickets/{ticket['id']}/updates",
            json={"update_text": "On it"},
            headers=user_headers
        )

        response = client.delete(f"/api/tickets/{ticket['id']}", headers=admin_headers)

        assert response.status_code == 204
        assert _count(db, "tickets") == 0
        assert _count(db, "ticket_updates") == 0
        log = db.execute("SELECT ticket_id FROM email_log").fetchall()
        assert len(log) == 2
        assert all(row["ticket_id"] is None for row in log)

    def test_requires_admin(self, client: TestClient, user_headers, ticket):
        response = client.delete(f"/api/tickets/{ticket['id']}", headers=user_headers)

        assert response.status_code == 403

    def test_oversized_id_is_404(self, client: TestClient, admin_headers):
        response = client.delete(f"/api/tickets/{OVERSIZED_ID}", headers=admin_headers)

        assert response.status_code == 404
