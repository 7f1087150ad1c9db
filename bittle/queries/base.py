"""
Every store call goes through `run_query` so that PostgREST and transport
failures surface as one StoreError with the store's message appended.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from postgrest.exceptions import APIError

from bittle.errors import StoreError

logger = logging.getLogger(__name__)

# PostgREST code for ".single()" matching zero (or many) rows
NO_ROWS_CODE = "PGRST116"


def run_query(builder: Any, action: str) -> Any:
    """Execute a prepared query builder; `action` reads like "fetching forms"."""
    try:
        return builder.execute()
    except APIError as exc:
        logger.warning("Store error while %s: %s (%s)", action, exc.message, exc.code)
        raise StoreError(f"Error {action}: {exc.message}", code=exc.code) from exc
    except httpx.HTTPError as exc:
        logger.warning("Transport error while %s: %s", action, exc)
        raise StoreError(f"Error {action}: {exc}") from exc


def fetch_rows(builder: Any, action: str) -> list[dict]:
    response = run_query(builder, action)
    return list(response.data or [])


def fetch_single(builder: Any, action: str) -> dict:
    """
    Run a `.single()` query. A missing row is reported exactly like any
    other store failure.
    """
    response = run_query(builder, action)
    if not response.data:
        raise StoreError(f"Error {action}: no rows returned", code=NO_ROWS_CODE)
    return response.data


def first_inserted(response: Any, action: str) -> dict:
    rows = response.data or []
    if not rows:
        raise StoreError(f"Error {action}: no row returned")
    return rows[0]
