"""Dependency injection for FastAPI endpoints"""

from datetime import tzinfo
from typing import Optional
from fastapi import HTTPException, Query, Request
from movasafe_analytics.config import settings
from movasafe_analytics.infrastructure.clients.transactions import TransactionClient
from movasafe_analytics.utils.date_utils import resolve_timezone


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_transaction_client() -> TransactionClient:
    """Provide transaction provider client instance"""
    return TransactionClient()


def get_reporting_timezone(
    timezone: Optional[str] = Query(None, description="IANA timezone, defaults to the configured reporting timezone"),
) -> tzinfo:
    """Resolve the bucketing timezone for a request"""
    return timezone_or_422(timezone or settings.reporting_timezone)


def timezone_or_422(name: str) -> tzinfo:
    try:
        return resolve_timezone(name)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
