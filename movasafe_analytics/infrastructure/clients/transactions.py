"""Transaction provider HTTP client for fetching wallet transaction history"""

import httpx
from datetime import date, datetime, time, timezone, tzinfo
from typing import Any, Dict, List, Optional
from movasafe_analytics.domain.filters import ALL, AnalyticsFilters
from movasafe_analytics.domain.exceptions import TransactionAPIError
from movasafe_analytics.config import settings
from movasafe_analytics.infrastructure.observability.metrics import provider_latency_histogram

ALL_TRANSACTIONS_PATH = "/api/transactions/all"


def build_query_params(
    start: date,
    end: date,
    filters: AnalyticsFilters,
    tz: tzinfo = timezone.utc,
    limit: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Query string for the all-transactions endpoint.

    The window runs from local start-of-day on `start` to local end-of-day on
    `end`, sent as ISO timestamps.
    """
    params: Dict[str, Any] = {
        "page": 0,
        "limit": limit or settings.transactions_fetch_limit,
        "sortBy": "createdAt",
        "order": "DESC",
        "startDate": datetime.combine(start, time.min, tzinfo=tz).isoformat(),
        "endDate": datetime.combine(end, time.max, tzinfo=tz).isoformat(),
    }
    if filters.transaction_type != ALL:
        params["transactionType"] = filters.transaction_type
    if filters.status != ALL:
        params["status"] = filters.status
    return params


def unwrap_records(body: Any) -> List[Dict[str, Any]]:
    """
    Extract the record list from the provider's response envelope.

    Accepts {"data": {"content": [...]}}, {"data": [...]} and a bare list.

    Raises:
        TransactionAPIError: If no record list can be found
    """
    data = body.get("data", body) if isinstance(body, dict) else body
    if isinstance(data, dict):
        data = data.get("content")
    if not isinstance(data, list):
        raise TransactionAPIError("Invalid transaction data from provider: no record list")
    return data


class TransactionClient:
    """Client for the wallet transaction API"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.transactions_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.token = token or settings.transactions_api_token
        self.transport = transport

    async def fetch_transactions(
        self,
        start: date,
        end: date,
        filters: AnalyticsFilters,
        tz: tzinfo = timezone.utc,
    ) -> List[Dict[str, Any]]:
        """
        Fetch raw transaction records for a reporting window.

        Records are returned unparsed; validation happens in the domain layer
        so malformed records are skipped rather than failing the fetch.

        Raises:
            TransactionAPIError: On timeout, HTTP errors, or invalid response
        """
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with provider_latency_histogram.time():
                    response = await client.get(
                        f"{self.base_url}{ALL_TRANSACTIONS_PATH}",
                        params=build_query_params(start, end, filters, tz),
                        headers=headers,
                    )
                response.raise_for_status()
                return unwrap_records(response.json())

            except httpx.TimeoutException as e:
                raise TransactionAPIError(f"Transaction API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise TransactionAPIError(f"Transaction API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise TransactionAPIError(f"Transaction API unreachable: {e}") from e
            except ValueError as e:
                raise TransactionAPIError(f"Invalid transaction data from provider: {e}") from e
