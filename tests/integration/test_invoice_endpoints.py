"""Integration tests for invoices, export and themes."""
import json
import pytest


async def log_entry(app_client, headers, start, end, **extra):
    response = await app_client.post(
        "/time-entries",
        json={"started_at": start, "ended_at": end, **extra},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()["id"]


@pytest.mark.asyncio
class TestInvoiceEndpoints:
    """Tests for /invoices."""

    async def test_invoice_bills_entries(self, app_client, auth_headers):
        """Test invoicing marks entries billed and locks them."""
        first = await log_entry(
            app_client, auth_headers, "2025-01-15T09:00:00", "2025-01-15T11:30:00", hourly_rate="100"
        )
        second = await log_entry(
            app_client, auth_headers, "2025-01-16T09:00:00", "2025-01-16T10:00:00", hourly_rate="80"
        )

        response = await app_client.post(
            "/invoices",
            json={"time_entry_ids": [first, second]},
            headers=auth_headers,
        )

        assert response.status_code == 201
        invoice = response.json()
        assert invoice["number"] == "INV-00001"
        assert float(invoice["subtotal"]) == 330.0
        assert len(invoice["lines"]) == 2

        entry = await app_client.get(f"/time-entries/{first}", headers=auth_headers)
        assert entry.json()["billed"] is True
        assert entry.json()["invoice_id"] == invoice["id"]

        delete = await app_client.delete(f"/time-entries/{first}", headers=auth_headers)
        assert delete.status_code == 400

        again = await app_client.post("/invoices", json={"time_entry_ids": [first]}, headers=auth_headers)
        assert again.status_code == 400

        unbilled = await app_client.get("/time-entries?billed=false", headers=auth_headers)
        assert unbilled.json() == []

    async def test_mark_paid(self, app_client, auth_headers):
        """Test paying an invoice once."""
        entry_id = await log_entry(
            app_client, auth_headers, "2025-01-15T09:00:00", "2025-01-15T10:00:00", hourly_rate="100"
        )
        invoice = await app_client.post("/invoices", json={"time_entry_ids": [entry_id]}, headers=auth_headers)
        invoice_id = invoice.json()["id"]

        paid = await app_client.post(
            f"/invoices/{invoice_id}/paid",
            json={"paid_on": "2025-02-10"},
            headers=auth_headers,
        )
        assert paid.json()["status"] == "paid"
        assert paid.json()["paid_on"] == "2025-02-10"

        twice = await app_client.post(f"/invoices/{invoice_id}/paid", json={}, headers=auth_headers)
        assert twice.status_code == 400

        listing = await app_client.get("/invoices?status=paid", headers=auth_headers)
        assert [i["id"] for i in listing.json()] == [invoice_id]

    async def test_unknown_entry(self, app_client, auth_headers):
        """Test invoicing unknown entries returns 400."""
        response = await app_client.post("/invoices", json={"time_entry_ids": [999]}, headers=auth_headers)

        assert response.status_code == 400


@pytest.mark.asyncio
class TestExportEndpoint:
    """Tests for /export."""

    async def test_export_jsonl(self, app_client, auth_headers):
        """Test the export streams one JSON object per line."""
        entry_id = await log_entry(
            app_client, auth_headers, "2025-01-15T09:00:00", "2025-01-15T11:30:00", hourly_rate="100"
        )

        response = await app_client.get("/export", headers=auth_headers)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/x-ndjson")
        assert "attachment" in response.headers["content-disposition"]

        records = [json.loads(line) for line in response.text.splitlines()]
        entry = next(r for r in records if r["type"] == "time_entry")
        assert entry["id"] == entry_id
        assert list(entry["data"]) == [
            "id", "project_id", "task_id", "started_at", "ended_at",
            "duration_minutes", "notes", "billable", "hourly_rate",
        ]
        assert entry["data"]["hourly_rate"] == 100.0
        assert any(r["type"] == "billing_rate" and r["id"] == f"time_entry:{entry_id}" for r in records)


@pytest.mark.asyncio
class TestThemeEndpoints:
    """Tests for /themes."""

    async def test_list_themes(self, app_client):
        """Test themes are public and include both palettes."""
        response = await app_client.get("/themes")

        assert response.status_code == 200
        assert set(response.json()) == {"dark", "light"}

    async def test_current_theme(self, app_client):
        """Test the configured theme comes with its font."""
        response = await app_client.get("/themes/current")

        data = response.json()
        assert data["name"] == "dark"
        assert data["font"] == "JetBrains Mono"
        assert data["colors"]["bg-primary"] == "#000000"

    async def test_unknown_theme(self, app_client):
        """Test unknown theme names return 404."""
        response = await app_client.get("/themes/solarized")

        assert response.status_code == 404
