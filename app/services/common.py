"""Shared Supabase data access helpers."""

from __future__ import annotations

import logging
import time
from typing import Any

from postgrest import APIError

from app.config import settings
from app.utils.errors import InvalidInputError, NotFoundError
from supabase import Client

logger = logging.getLogger(__name__)


class SupabaseService:
    """Thin helper wrapper around a Supabase client."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def execute(self, query, default: Any = None, context: str = "database request") -> Any:
        """Execute a Supabase query and normalize API errors.

        ``context`` names the operation in logs and in the wrapped error.
        """
        started = time.perf_counter()
        try:
            response = query.execute()
        except APIError as exc:
            message = getattr(exc, "message", None) or "Database request failed"
            logger.error("%s failed: %s", context, message)
            raise InvalidInputError(f"{context}: {message}") from exc

        elapsed_ms = (time.perf_counter() - started) * 1000
        threshold_ms = settings.slow_query_log_threshold_ms
        if threshold_ms > 0 and elapsed_ms >= threshold_ms:
            logger.warning("Slow Supabase query (%s) %.1fms", context, elapsed_ms)
        data = response.data
        return default if data is None and default is not None else data

    def select_first(
        self,
        table: str,
        filters: dict[str, Any],
        columns: str = "*",
        context: str | None = None,
    ) -> dict[str, Any] | None:
        """Select a single row, or None when nothing matches."""
        query = self.client.table(table).select(columns)
        for key, value in filters.items():
            query = query.eq(key, value)
        rows = self.execute(query.limit(1), default=[], context=context or f"get {table}")
        return rows[0] if rows else None

    def select_one(
        self,
        table: str,
        filters: dict[str, Any],
        columns: str = "*",
        not_found_label: str | None = None,
        context: str | None = None,
    ) -> dict[str, Any]:
        """Select a single row and raise NotFoundError when missing."""
        row = self.select_first(table, filters, columns=columns, context=context)
        if row is None:
            label = not_found_label or table
            raise NotFoundError(label)
        return row

    def select_many(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        columns: str = "*",
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
        offset: int | None = None,
        context: str | None = None,
    ) -> list[dict[str, Any]]:
        """Select many rows from a table with optional filters and paging."""
        query = self.client.table(table).select(columns)
        if filters:
            for key, value in filters.items():
                query = query.eq(key, value)
        if order_by:
            query = query.order(order_by, desc=descending)
        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)
        return self.execute(query, default=[], context=context or f"list {table}")

    def insert_one(
        self,
        table: str,
        payload: dict[str, Any],
        context: str | None = None,
    ) -> dict[str, Any]:
        """Insert one row and return the created object."""
        label = context or f"insert into {table}"
        rows = self.execute(self.client.table(table).insert(payload), default=[], context=label)
        if not rows:
            raise InvalidInputError(f"Failed to {label}")
        return rows[0]

    def update(
        self,
        table: str,
        filters: dict[str, Any],
        payload: dict[str, Any],
        context: str | None = None,
    ) -> list[dict[str, Any]]:
        """Update rows by equality filters and return the updated rows."""
        query = self.client.table(table).update(payload)
        for key, value in filters.items():
            query = query.eq(key, value)
        return self.execute(query, default=[], context=context or f"update {table}")

    def delete(
        self,
        table: str,
        filters: dict[str, Any],
        context: str | None = None,
    ) -> list[dict[str, Any]]:
        """Delete rows by equality filters and return removed rows."""
        query = self.client.table(table).delete()
        for key, value in filters.items():
            query = query.eq(key, value)
        return self.execute(query, default=[], context=context or f"delete from {table}")
