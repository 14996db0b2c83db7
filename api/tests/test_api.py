from tests.helpers import auth

TX = "/api/v1/transactions"


def create(client, user="alice", **overrides):
    body = {"kind": "expense", "name": "rent", "amount_cents": 1000, "date": "2025-03-10", "status": "unpaid"}
    body.update(overrides)
    r = client.post(f"{TX}/simple", json=body, headers=auth(user))
    assert r.status_code == 201, r.text
    return r.json()


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_requires_user_header(client):
    r = client.get(f"{TX}/", params={"month": 3, "year": 2025})
    assert r.status_code == 401
    assert r.json() == {"message": "No active user"}


def test_owner_comes_from_header(client):
    tx = create(client, owner_id="mallory")
    assert tx["owner_id"] == "alice"


def test_month_listing(client):
    create(client, kind="revenue", amount_cents=5000)
    create(client, amount_cents=1200)
    r = client.get(f"{TX}/", params={"month": 3, "year": 2025}, headers=auth())
    assert r.status_code == 200
    summary = r.json()["summary"]
    assert summary["monthly_balance"] == 3800
    assert summary["accumulated_balance"] == 3800


def test_month_out_of_range_rejected(client):
    r = client.get(f"{TX}/", params={"month": 13, "year": 2025}, headers=auth())
    assert r.status_code == 422


def test_update_and_delete(client):
    tx = create(client)
    r = client.put(f"{TX}/{tx['id']}", json={"name": "rent (march)"}, headers=auth())
    assert r.status_code == 200
    assert r.json()["name"] == "rent (march)"

    assert client.delete(f"{TX}/{tx['id']}", headers=auth("bob")).status_code == 404
    assert client.delete(f"{TX}/{tx['id']}", headers=auth()).status_code == 204
    r = client.get(f"{TX}/", params={"month": 3, "year": 2025}, headers=auth())
    assert r.json()["transactions"] == []


def test_status_and_values(client):
    tx = create(client, amount_cents=100)
    url = f"{TX}/{tx['id']}"
    assert client.patch(f"{url}/add-value", json={"description": "extra", "amount_cents": 50}, headers=auth()).status_code == 204
    r = client.patch(f"{url}/add-value", json={"description": "extra", "amount_cents": 5}, headers=auth())
    assert r.status_code == 400
    assert "extra" in r.json()["message"]

    assert client.patch(f"{url}/status", json={"status": "paid"}, headers=auth()).status_code == 204
    listed = client.get(f"{TX}/", params={"month": 3, "year": 2025}, headers=auth()).json()["transactions"][0]
    assert listed["status"] == "paid"
    assert listed["paid_amount_cents"] == 150

    assert client.patch(f"{url}/subtract-value", json={"description": "extra"}, headers=auth()).status_code == 204
    r = client.patch(f"{url}/subtract-value", json={"description": "extra"}, headers=auth())
    assert r.status_code == 404


def test_recurring_series(client):
    body = {"kind": "expense", "name": "gym", "amount_cents": 4500, "date": "2024-01-31", "repeat_count": 2}
    r = client.post(f"{TX}/recurring", json=body, headers=auth())
    assert r.status_code == 201, r.text
    assert sorted(t["date"] for t in r.json()) == ["2024-01-31", "2024-02-29", "2024-03-31"]


def test_recurring_controlled_needs_counterparty(client):
    body = {"name": "loan", "amount_cents": 100, "date": "2025-03-01", "is_controlled": True}
    assert client.post(f"{TX}/recurring", json=body, headers=auth()).status_code == 422


def test_recurring_repeat_limit(client):
    body = {"name": "gym", "amount_cents": 100, "date": "2025-03-01", "repeat_count": 500}
    r = client.post(f"{TX}/recurring", json=body, headers=auth())
    assert r.status_code == 400


def test_shares(client):
    assert client.post("/api/v1/shares/", json={"sharee_id": "alice"}, headers=auth()).status_code == 400

    r = client.post("/api/v1/shares/", json={"sharee_id": "bob", "aggregate": True}, headers=auth())
    assert r.status_code == 201
    r = client.post("/api/v1/shares/", json={"sharee_id": "bob", "aggregate": False}, headers=auth())
    assert r.json() == {"sharee_id": "bob", "aggregate": False}
    assert client.get("/api/v1/shares/", headers=auth()).json() == [{"sharee_id": "bob", "aggregate": False}]

    assert client.delete("/api/v1/shares/bob", headers=auth()).status_code == 204
    assert client.delete("/api/v1/shares/bob", headers=auth()).status_code == 404


def test_dashboard_past_month(client):
    create(client, kind="revenue", amount_cents=900, date="2025-01-05", status="paid")
    create(client, amount_cents=100, date="2025-02-05", status="paid")
    r = client.get("/api/v1/dashboard/", params={"month": 2, "year": 2025}, headers=auth())
    body = r.json()
    assert body["is_past"] and not body["is_future"]
    assert body["summary"] == {"revenue": 0, "expense": 100, "balance": -100, "total": 800}


def test_dashboard_future_month_projects_total(client):
    create(client, kind="revenue", amount_cents=2000, date="2025-02-01", status="paid")
    create(client, amount_cents=500, date="2025-03-01", status="paid")
    create(client, kind="revenue", amount_cents=300, date="2025-04-20")
    create(client, amount_cents=1000, date="2025-05-02")

    body = client.get("/api/v1/dashboard/", params={"month": 5, "year": 2025}, headers=auth()).json()
    assert body["is_future"]
    assert body["summary"] == {"revenue": 0, "expense": 1000, "balance": -1000, "total": 2000 - 500 + 300 - 1000}


def test_dashboard_splits_shared_and_notices_overdue_once(client):
    client.post("/api/v1/shares/", json={"sharee_id": "alice"}, headers=auth("bob"))
    create(client, user="bob", amount_cents=70, date="2025-03-01")
    late = create(client, amount_cents=100, date="2025-03-10")

    params = {"month": 3, "year": 2025}
    first = client.get("/api/v1/dashboard/", params=params, headers=auth(session_id="s1")).json()
    assert [t["owner_id"] for t in first["personal"]] == ["alice"]
    assert [t["owner_id"] for t in first["shared"]] == ["bob"]
    assert [(o["transaction"]["id"], o["days_overdue"]) for o in first["overdue"]] == [(late["id"], 5)]
    assert first["show_overdue_notice"] is True

    second = client.get("/api/v1/dashboard/", params=params, headers=auth(session_id="s1")).json()
    assert second["overdue"] and second["show_overdue_notice"] is False

    other_session = client.get("/api/v1/dashboard/", params=params, headers=auth(session_id="s2")).json()
    assert other_session["show_overdue_notice"] is True
