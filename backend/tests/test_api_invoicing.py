"""Invoice endpoints: building, listing, status updates and deletion."""

from datetime import date

from conftest import auth_headers


def _approved(make_timesheet, owner):
    return [
        make_timesheet(owner, week_starting=date(2024, 1, 15), status="approved"),
        make_timesheet(owner, week_starting=date(2024, 1, 22), status="approved"),
    ]


def test_approved_timesheets_for_user(client, admin, contractor, make_timesheet):
    approved = _approved(make_timesheet, contractor)
    make_timesheet(contractor, week_starting=date(2024, 1, 29))

    rows = client.get(
        "/api/invoicing/timesheets", params={"userId": contractor.id}, headers=auth_headers(admin)
    ).json()
    assert [row["id"] for row in rows] == [ts.id for ts in approved]


def test_create_invoice(client, admin, contractor, make_timesheet):
    ids = [ts.id for ts in _approved(make_timesheet, contractor)]
    resp = client.post(
        "/api/invoicing/create",
        json={"user_id": contractor.id, "timesheet_ids": ids, "vat_rate": 20, "cis_rate": 20},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Invoice created successfully"
    invoice = body["invoice"]
    assert invoice["reference_number"] == f"INV-{invoice['id']}"
    assert invoice["subtotal"] == 1700.0
    assert invoice["total_amount"] == 1700.0

    # the timesheets are no longer offered for invoicing
    rows = client.get(
        "/api/invoicing/timesheets", params={"userId": contractor.id}, headers=auth_headers(admin)
    ).json()
    assert rows == []


def test_create_twice_is_409(client, admin, contractor, make_timesheet):
    ids = [ts.id for ts in _approved(make_timesheet, contractor)]
    body = {"user_id": contractor.id, "timesheet_ids": ids}
    headers = auth_headers(admin)
    assert client.post("/api/invoicing/create", json=body, headers=headers).status_code == 201
    assert client.post("/api/invoicing/create", json=body, headers=headers).status_code == 409


def test_create_with_draft_is_400(client, admin, contractor, make_timesheet):
    draft = make_timesheet(contractor)
    resp = client.post(
        "/api/invoicing/create",
        json={"user_id": contractor.id, "timesheet_ids": [draft.id]},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 400


def test_create_empty_is_400(client, admin, contractor):
    resp = client.post(
        "/api/invoicing/create",
        json={"user_id": contractor.id, "timesheet_ids": []},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 400


def test_rates_out_of_range_are_422(client, admin, contractor):
    resp = client.post(
        "/api/invoicing/create",
        json={"user_id": contractor.id, "timesheet_ids": [1], "vat_rate": 150},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 422


def test_list_detail_status_and_delete(client, admin, contractor, make_timesheet):
    approved = _approved(make_timesheet, contractor)
    headers = auth_headers(admin)
    created = client.post(
        "/api/invoicing/create",
        json={"user_id": contractor.id, "timesheet_ids": [ts.id for ts in approved]},
        headers=headers,
    ).json()["invoice"]

    listing = client.get("/api/admin/invoices", headers=headers).json()
    assert len(listing) == 1
    assert listing[0]["username"] == "alice"

    detail = client.get(f"/api/admin/invoices/{created['id']}", headers=headers).json()
    assert [row["status"] for row in detail["timesheets"]] == ["invoiced", "invoiced"]

    resp = client.put(f"/api/admin/invoices/{created['id']}", json={"status": "paid"}, headers=headers)
    assert resp.json() == {"message": "Invoice status updated"}
    assert client.get(f"/api/admin/invoices/{created['id']}", headers=headers).json()["status"] == "paid"

    bad = client.put(f"/api/admin/invoices/{created['id']}", json={"status": "void"}, headers=headers)
    assert bad.status_code == 422

    assert client.delete(f"/api/admin/invoices/{created['id']}", headers=headers).status_code == 200
    assert client.get(f"/api/admin/invoices/{created['id']}", headers=headers).status_code == 404

    rows = client.get(
        "/api/invoicing/timesheets", params={"userId": contractor.id}, headers=headers
    ).json()
    assert len(rows) == 2


def test_missing_invoice_is_404(client, admin):
    assert client.get("/api/admin/invoices/404", headers=auth_headers(admin)).status_code == 404
