"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from server import app, get_service

REVIEWER = {"X-User-Name": "Linh Tran", "X-User-Role": "reviewer"}
VIEWER = {"X-User-Name": "Guest", "X-User-Role": "viewer"}


@pytest.fixture
def client(service):
    app.dependency_overrides[get_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_healthcheck(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_get_inspection_opens_review(client):
    response = client.get("/api/inspections/INSP-1")

    assert response.status_code == 200
    body = response.json()
    assert body["container_number"] == "MSCU1234565"
    assert body["quote"]["status"] == "DRAFT"
    assert body["quote"]["total"] == "137.50"


def test_unknown_inspection_is_404(client):
    response = client.get("/api/inspections/INSP-404")

    assert response.status_code == 404
    assert response.json()["error"]["error_type"] == "INSPECTION_NOT_FOUND"


def test_viewer_is_forbidden(client):
    response = client.post("/api/inspections/INSP-1/defects/d-1/cost", data={"amount": "10"}, headers=VIEWER)

    assert response.status_code == 403
    assert response.json()["error"]["error_type"] == "UNAUTHORIZED"


def test_missing_role_defaults_to_viewer(client):
    response = client.post("/api/inspections/INSP-1/quote/approve")
    assert response.status_code == 403


def test_unknown_role_is_rejected(client):
    response = client.post("/api/inspections/INSP-1/quote/approve", headers={"X-User-Role": "captain"})
    assert response.status_code == 400


def test_invalid_cost_is_422(client):
    response = client.post("/api/inspections/INSP-1/defects/d-1/cost", data={"amount": "abc"}, headers=REVIEWER)

    assert response.status_code == 422
    assert response.json()["error"]["details"]["defect_id"] == "d-1"


@pytest.mark.parametrize("amount", ["1e30", "99999999999999999999999999999"])
def test_oversized_cost_is_422(client, amount):
    response = client.post("/api/inspections/INSP-1/defects/d-1/cost", data={"amount": amount}, headers=REVIEWER)

    assert response.status_code == 422
    assert response.json()["error"]["error_type"] == "INVALID_COST"


def test_unknown_review_status_is_400(client):
    response = client.post(
        "/api/inspections/INSP-1/defects/d-1/status", data={"status": "MAYBE"}, headers=REVIEWER
    )
    assert response.status_code == 400


def test_unknown_defect_is_404(client):
    response = client.post(
        "/api/inspections/INSP-1/defects/d-99/status", data={"status": "rejected"}, headers=REVIEWER
    )
    assert response.status_code == 404
    assert response.json()["error"]["error_type"] == "DEFECT_NOT_FOUND"


def test_invoice_before_approval_is_409(client):
    client.get("/api/inspections/INSP-1")
    response = client.post(
        "/api/inspections/INSP-1/invoice",
        data={"customer_name": "Acme", "customer_address": "1 Rd"},
        headers=REVIEWER,
    )

    assert response.status_code == 409
    assert response.json()["error"]["error_type"] == "INVALID_TRANSITION"


def test_review_approve_invoice_and_download(client):
    client.get("/api/inspections/INSP-1")

    response = client.post(
        "/api/inspections/INSP-1/defects/d-2/status", data={"status": "accepted"}, headers=REVIEWER
    )
    assert response.status_code == 200
    assert response.json()["quote"]["subtotal"] == "175.00"

    response = client.post("/api/inspections/INSP-1/quote/approve", headers=REVIEWER)
    assert response.json()["quote"]["approved_by"] == "Linh Tran"

    response = client.post(
        "/api/inspections/INSP-1/invoice",
        data={"customer_name": "", "customer_address": "1 Rd"},
        headers=REVIEWER,
    )
    assert response.status_code == 409
    assert response.json()["error"]["error_type"] == "CUSTOMER_DETAILS_MISSING"

    response = client.post(
        "/api/inspections/INSP-1/invoice",
        data={"customer_name": "Acme", "customer_address": "1 Rd"},
        headers=REVIEWER,
    )
    assert response.status_code == 201
    assert response.json()["quote"]["invoice_details"]["invoice_number"] == "INV-2025-0042"

    response = client.get("/api/inspections/INSP-1/invoice.pdf?lang=vi")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert 'filename="INV-2025-0042.pdf"' in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")

    response = client.post(
        "/api/inspections/INSP-1/defects/d-1/cost", data={"amount": "1"}, headers=REVIEWER
    )
    assert response.status_code == 409
    assert response.json()["error"]["error_type"] == "QUOTE_FROZEN"


def test_report_download(client):
    response = client.get("/api/inspections/INSP-1/report.pdf")

    assert response.status_code == 200
    assert 'filename="report_MSCU1234565.pdf"' in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_next_container(client):
    response = client.get("/api/manifest/next")
    assert response.json() == {"container_number": "TGHU7654321"}
