"""Unit tests for the transaction provider client"""

import httpx
import pytest
from datetime import date, timezone
from movasafe_analytics.domain.filters import AnalyticsFilters, DEFAULT_FILTERS
from movasafe_analytics.domain.exceptions import TransactionAPIError
from movasafe_analytics.infrastructure.clients.transactions import (
    TransactionClient,
    build_query_params,
    unwrap_records,
)

START, END = date(2025, 3, 1), date(2025, 3, 7)


def make_client(handler) -> TransactionClient:
    return TransactionClient(
        base_url="http://provider.test",
        timeout=1.0,
        token="secret",
        transport=httpx.MockTransport(handler),
    )


def test_build_query_params_window_and_filters():
    params = build_query_params(START, END, AnalyticsFilters(transaction_type="CASH_IN", status="FAILED"), limit=50)

    assert params["startDate"] == "2025-03-01T00:00:00+00:00"
    assert params["endDate"] == "2025-03-07T23:59:59.999999+00:00"
    assert params["limit"] == 50
    assert params["sortBy"] == "createdAt"
    assert params["transactionType"] == "CASH_IN"
    assert params["status"] == "FAILED"


def test_build_query_params_omits_all_filters():
    params = build_query_params(START, END, DEFAULT_FILTERS)
    assert "transactionType" not in params
    assert "status" not in params


@pytest.mark.parametrize(
    "body",
    [
        {"success": True, "data": {"content": [{"id": "1"}]}},
        {"success": True, "data": [{"id": "1"}]},
        [{"id": "1"}],
    ],
)
def test_unwrap_records_envelopes(body):
    assert unwrap_records(body) == [{"id": "1"}]


def test_unwrap_records_rejects_unknown_shape():
    with pytest.raises(TransactionAPIError):
        unwrap_records({"success": False, "message": "nope"})


async def test_fetch_transactions_success(raw_records):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers.get("Authorization")
        seen["status"] = request.url.params.get("status")
        return httpx.Response(200, json={"success": True, "data": {"content": raw_records}})

    records = await make_client(handler).fetch_transactions(
        START, END, AnalyticsFilters(status="SUCCESSFUL"), timezone.utc
    )

    assert records == raw_records
    assert seen["path"] == "/api/transactions/all"
    assert seen["auth"] == "Bearer secret"
    assert seen["status"] == "SUCCESSFUL"


async def test_fetch_transactions_http_error():
    client = make_client(lambda request: httpx.Response(502, text="bad gateway"))

    with pytest.raises(TransactionAPIError, match="502"):
        await client.fetch_transactions(START, END, DEFAULT_FILTERS)


async def test_fetch_transactions_timeout():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(TransactionAPIError, match="timeout"):
        await make_client(handler).fetch_transactions(START, END, DEFAULT_FILTERS)


async def test_fetch_transactions_invalid_json():
    client = make_client(lambda request: httpx.Response(200, text="<html>"))

    with pytest.raises(TransactionAPIError, match="Invalid transaction data"):
        await client.fetch_transactions(START, END, DEFAULT_FILTERS)
