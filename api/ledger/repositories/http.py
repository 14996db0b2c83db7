"""Ledger Repository speaking the ledger REST API over HTTP."""

import logging
from collections.abc import Callable
from typing import Any, TypeVar
from uuid import UUID

import httpx
from pydantic import ValidationError

from ledger.config import Settings
from ledger.errors import (
    LedgerError,
    NetworkOrServerError,
    NotAuthenticatedError,
    NotFoundError,
    ValidationFailedError,
)
from ledger.schemas.transactions import ControlledTxIn, MonthOut, SimpleTxIn, Status, TxOut, TxUpdate

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1/transactions"

T = TypeVar("T")

_STATUS_ERRORS: dict[int, type[LedgerError]] = {
    400: ValidationFailedError,
    401: NotAuthenticatedError,
    404: NotFoundError,
    422: ValidationFailedError,
}


def _server_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    message = body.get("message") or body.get("detail")
    return message if isinstance(message, str) else None


def clean_transaction(raw: Any) -> Any:
    """Drop additions that arrive without an identifier."""
    if not isinstance(raw, dict):
        return raw
    additions = [a for a in (raw.get("additions") or []) if isinstance(a, dict) and a.get("id")]
    return {**raw, "additions": additions}


def parse_transaction(body: dict[str, Any]) -> TxOut:
    return TxOut.model_validate(clean_transaction(body))


def parse_month(body: dict[str, Any]) -> MonthOut:
    transactions = body.get("transactions") or []
    if not isinstance(transactions, list):
        raise ValueError("transactions must be a list")
    return MonthOut.model_validate({**body, "transactions": [clean_transaction(t) for t in transactions]})


class HttpLedgerRepository:
    """Every call maps transport failures and non-2xx answers to ``LedgerError`` kinds.

    A success answer that cannot be read as the expected record is a
    ``NetworkOrServerError`` too. The caller owns the ``httpx.AsyncClient``
    (base URL, timeout) and closes it.
    """

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def _request(self, method: str, url: str, owner_id: str, **kwargs: Any) -> httpx.Response:
        headers = {"X-User-Id": owner_id}
        try:
            response = await self.client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise NetworkOrServerError(f"Could not reach the ledger server: {e}") from e

        if response.is_success:
            return response
        message = _server_message(response)
        logger.info("%s %s answered %d: %s", method, url, response.status_code, message)
        error_cls = _STATUS_ERRORS.get(response.status_code, NetworkOrServerError)
        raise error_cls(message)

    @staticmethod
    def _decode(response: httpx.Response, parse: Callable[[dict[str, Any]], T]) -> T:
        try:
            body = response.json()
            if not isinstance(body, dict):
                raise ValueError(f"expected a JSON object, got {type(body).__name__}")
            return parse(body)
        except (ValueError, ValidationError) as e:
            logger.warning("Malformed answer from %s: %s", response.request.url, e)
            raise NetworkOrServerError("Malformed ledger response") from e

    async def get_month(self, owner_id: str, month: int, year: int, include_shared: bool = True) -> MonthOut:
        params = {"month": month, "year": year, "include_shared": str(include_shared).lower()}
        response = await self._request("GET", f"{API_PREFIX}/", owner_id, params=params)
        return self._decode(response, parse_month)

    async def create_simple(self, payload: SimpleTxIn) -> TxOut:
        response = await self._request(
            "POST", f"{API_PREFIX}/simple", payload.owner_id or "", json=payload.model_dump(mode="json")
        )
        return self._decode(response, parse_transaction)

    async def create_controlled(self, payload: ControlledTxIn) -> TxOut:
        response = await self._request(
            "POST", f"{API_PREFIX}/controlled", payload.owner_id or "", json=payload.model_dump(mode="json")
        )
        return self._decode(response, parse_transaction)

    async def update(self, tx_id: UUID, owner_id: str, payload: TxUpdate) -> TxOut:
        response = await self._request(
            "PUT", f"{API_PREFIX}/{tx_id}", owner_id, json=payload.model_dump(mode="json", exclude_none=True)
        )
        return self._decode(response, parse_transaction)

    async def delete(self, tx_id: UUID, owner_id: str) -> None:
        await self._request("DELETE", f"{API_PREFIX}/{tx_id}", owner_id)

    async def set_status(self, tx_id: UUID, owner_id: str, status: Status) -> None:
        await self._request("PATCH", f"{API_PREFIX}/{tx_id}/status", owner_id, json={"status": status})

    async def add_value(self, tx_id: UUID, owner_id: str, description: str, amount_cents: int) -> None:
        await self._request(
            "PATCH",
            f"{API_PREFIX}/{tx_id}/add-value",
            owner_id,
            json={"description": description, "amount_cents": amount_cents},
        )

    async def remove_value(self, tx_id: UUID, owner_id: str, description: str) -> None:
        await self._request(
            "PATCH", f"{API_PREFIX}/{tx_id}/subtract-value", owner_id, json={"description": description}
        )


def make_client(settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=settings.ledger_api_url, timeout=settings.http_timeout_seconds)
