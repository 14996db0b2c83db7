import asyncio
import json
import uuid
from datetime import date

import httpx
import pytest

from ledger.config import Settings
from ledger.errors import NetworkOrServerError, NotAuthenticatedError, NotFoundError, ValidationFailedError
from ledger.repositories.http import HttpLedgerRepository, make_client
from ledger.schemas.transactions import SimpleTxIn
from ledger.services.forecast import forecast_total

TX_ID = str(uuid.uuid4())

MONTH_BODY = {
    "month": 3,
    "year": 2025,
    "transactions": [
        {
            "id": TX_ID,
            "owner_id": "alice",
            "kind": "expense",
            "name": "rent",
            "amount_cents": 100,
            "date": "2025-03-10",
            "additions": [
                {"id": str(uuid.uuid4()), "description": "extra", "amount_cents": 50, "removed": False},
                {"description": "orphan", "amount_cents": 10},
            ],
        }
    ],
    "summary": {"total_revenue": 0, "total_expense": 150, "monthly_balance": -150, "accumulated_balance": -150},
}


def call(handler, method, *args):
    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://ledger.test") as client:
            return await getattr(HttpLedgerRepository(client), method)(*args)

    return asyncio.run(go())


def test_get_month_drops_additions_without_id():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        seen["user"] = request.headers["X-User-Id"]
        return httpx.Response(200, json=MONTH_BODY)

    data = call(handler, "get_month", "alice", 3, 2025)
    assert seen["user"] == "alice"
    assert seen["url"].path == "/api/v1/transactions/"
    assert seen["url"].params["month"] == "3" and seen["url"].params["include_shared"] == "true"
    assert [a.description for a in data.transactions[0].additions] == ["extra"]
    assert data.summary.total_expense == 150


def test_create_simple_posts_payload():
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        assert request.url.path == "/api/v1/transactions/simple"
        assert body["date"] == "2025-03-10" and body["owner_id"] == "alice"
        return httpx.Response(201, json={**MONTH_BODY["transactions"][0], "additions": []})

    payload = SimpleTxIn(owner_id="alice", kind="expense", name="rent", amount_cents=100, date=date(2025, 3, 10))
    tx = call(handler, "create_simple", payload)
    assert str(tx.id) == TX_ID


@pytest.mark.parametrize(
    "status,error",
    [
        (400, ValidationFailedError),
        (401, NotAuthenticatedError),
        (404, NotFoundError),
        (422, ValidationFailedError),
        (500, NetworkOrServerError),
        (503, NetworkOrServerError),
    ],
)
def test_status_codes_map_to_error_kinds(status, error):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"message": "server says no"})

    with pytest.raises(error) as excinfo:
        call(handler, "delete", uuid.uuid4(), "alice")
    assert excinfo.value.message == "server says no"


def test_detail_message_and_default_message():
    def with_detail(request):
        return httpx.Response(404, json={"detail": "Transaction not found"})

    def without_body(request):
        return httpx.Response(500, text="oops")

    with pytest.raises(NotFoundError, match="Transaction not found"):
        call(with_detail, "set_status", uuid.uuid4(), "alice", "paid")
    with pytest.raises(NetworkOrServerError) as excinfo:
        call(without_body, "remove_value", uuid.uuid4(), "alice", "extra")
    assert excinfo.value.message == NetworkOrServerError.default_message


def test_transport_failure_is_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkOrServerError):
        call(handler, "get_month", "alice", 3, 2025)


def test_make_client_uses_settings():
    settings = Settings(LEDGER_API_URL="http://ledger.internal:9000", HTTP_TIMEOUT_SECONDS=2.5)
    client = make_client(settings)
    try:
        assert (client.base_url.host, client.base_url.port) == ("ledger.internal", 9000)
        assert client.timeout.read == 2.5
    finally:
        asyncio.run(client.aclose())


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>gateway</html>"),
        httpx.Response(200, json=[1, 2, 3]),
        httpx.Response(200, json={"month": 3, "year": 2025, "transactions": "nope"}),
        httpx.Response(200, json={"month": 3, "year": 2025, "transactions": [{"id": "not-a-uuid"}]}),
    ],
)
def test_malformed_month_is_network_error(response):
    with pytest.raises(NetworkOrServerError, match="Malformed ledger response"):
        call(lambda request: response, "get_month", "alice", 3, 2025)


def test_malformed_created_record_is_network_error():
    def handler(request):
        return httpx.Response(201, json={"id": TX_ID})

    payload = SimpleTxIn(owner_id="alice", kind="expense", name="rent", amount_cents=100, date=date(2025, 3, 10))
    with pytest.raises(NetworkOrServerError):
        call(handler, "create_simple", payload)


def test_forecast_skips_month_with_unreadable_answer():
    months = {
        "3": {"month": 3, "year": 2025, "summary": {"total_revenue": 500, "monthly_balance": 500, "accumulated_balance": 1000}},
        "5": {"month": 5, "year": 2025, "summary": {"total_expense": 200, "monthly_balance": -200}},
    }

    def handler(request: httpx.Request) -> httpx.Response:
        month = request.url.params["month"]
        if month == "4":
            return httpx.Response(200, text="<html>gateway</html>")
        return httpx.Response(200, json=months[month])

    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://ledger.test") as client:
            repo = HttpLedgerRepository(client)
            viewed = await repo.get_month("alice", 5, 2025)
            current = await repo.get_month("alice", 3, 2025)

            async def fetch(y, m):
                return await repo.get_month("alice", m, y)

            return await forecast_total(date(2025, 3, 15), 2025, 5, viewed, current, fetch)

    assert asyncio.run(go()) == 800
