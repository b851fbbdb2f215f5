"""Persistent store access for brewery and review rows (PostgreSQL)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Protocol

import psycopg
from psycopg import sql
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from brew_signals.exceptions import StoreError
from brew_signals.schema import AMENITY_FIELDS, AmenityFields, BreweryRecord, Membership, ReviewRecord

logger = logging.getLogger(__name__)

_JSON_COLUMNS = frozenset({"memberships", "review_themes"})
WRITABLE_COLUMNS = frozenset(AMENITY_FIELDS) | _JSON_COLUMNS


class EntitySource(Protocol):
    def list_breweries(self, brewery_id: str | None = None) -> list[BreweryRecord]: ...


class ReviewSource(Protocol):
    def list_reviews(self, brewery_id: str, language: str | None = None) -> list[ReviewRecord]: ...

    def list_all_reviews(self) -> list[ReviewRecord]: ...


class WriteSink(Protocol):
    def update_brewery(self, brewery_id: str, fields: dict[str, Any]) -> None: ...

    def delete_review(self, review_id: str) -> None: ...


class Store(EntitySource, ReviewSource, WriteSink, Protocol):
    """Everything the batch runner needs from the persistent store."""


@dataclass(frozen=True)
class StoreConfig:
    database_url: str | None = None
    breweries_table: str = "breweries"
    reviews_table: str = "reviews"
    connect_timeout_sec: int = 10

    @classmethod
    def from_env(cls) -> "StoreConfig":
        return cls(
            database_url=os.getenv("DATABASE_URL"),
            breweries_table=os.getenv("BREW_SIGNALS_BREWERIES_TABLE", "breweries"),
            reviews_table=os.getenv("BREW_SIGNALS_REVIEWS_TABLE", "reviews"),
        )


class PostgresStore:
    """Single-connection store. Create once per run and pass it around.

    Use as a context manager::

        with PostgresStore(StoreConfig.from_env()) as store:
            BatchRunner(store, config).enrich_from_reviews()
    """

    def __init__(self, config: StoreConfig, connection: psycopg.Connection | None = None):
        self.config = config
        self._conn = connection

    def __enter__(self) -> "PostgresStore":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def connect(self) -> None:
        if self._conn is not None:
            return
        if not self.config.database_url:
            raise StoreError("DATABASE_URL is required for store access")
        try:
            self._conn = psycopg.connect(
                self.config.database_url,
                row_factory=dict_row,
                autocommit=True,
                connect_timeout=self.config.connect_timeout_sec,
            )
        except psycopg.Error as exc:
            raise StoreError(f"Failed to connect to database: {exc}") from exc
        logger.info("Connected to brewery store")

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def list_breweries(self, brewery_id: str | None = None) -> list[BreweryRecord]:
        columns = sql.SQL(", ").join(
            sql.Identifier(c) for c in ("id", "name", "website", *AMENITY_FIELDS, "memberships", "review_themes")
        )
        query = sql.SQL("select {columns} from {table}").format(
            columns=columns, table=sql.Identifier(self.config.breweries_table)
        )
        params: tuple[Any, ...] = ()
        if brewery_id is not None:
            query += sql.SQL(" where id = %s")
            params = (brewery_id,)
        query += sql.SQL(" order by name")
        return [_row_to_brewery(row) for row in self._fetch(query, params)]

    def list_reviews(self, brewery_id: str, language: str | None = None) -> list[ReviewRecord]:
        query = sql.SQL(
            "select id, brewery_id, reviewer_name, review_timestamp, review_text, rating, language, created_at "
            "from {table} where brewery_id = %s and review_text is not null"
        ).format(table=sql.Identifier(self.config.reviews_table))
        params: tuple[Any, ...] = (brewery_id,)
        if language:
            query += sql.SQL(" and language = %s")
            params += (language,)
        query += sql.SQL(" order by created_at")
        return [_row_to_review(row) for row in self._fetch(query, params)]

    def list_all_reviews(self) -> list[ReviewRecord]:
        query = sql.SQL(
            "select id, brewery_id, reviewer_name, review_timestamp, review_text, rating, language, created_at "
            "from {table} order by created_at"
        ).format(table=sql.Identifier(self.config.reviews_table))
        return [_row_to_review(row) for row in self._fetch(query, ())]

    def update_brewery(self, brewery_id: str, fields: dict[str, Any]) -> None:
        """Partial update; columns not in ``fields`` are left untouched."""
        unknown = set(fields) - WRITABLE_COLUMNS
        if unknown:
            raise StoreError(f"Refusing to write unknown columns {sorted(unknown)} for brewery {brewery_id}")
        if not fields:
            return

        names = sorted(fields)
        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(name)) for name in names
        )
        query = sql.SQL("update {table} set {assignments} where id = %s").format(
            table=sql.Identifier(self.config.breweries_table), assignments=assignments
        )
        params = [_to_db_value(name, fields[name]) for name in names] + [brewery_id]
        self._execute(query, tuple(params))

    def delete_review(self, review_id: str) -> None:
        query = sql.SQL("delete from {table} where id = %s").format(table=sql.Identifier(self.config.reviews_table))
        self._execute(query, (review_id,))

    def _cursor(self):
        if self._conn is None:
            raise StoreError("Store is not connected")
        return self._conn.cursor()

    def _fetch(self, query: sql.Composable, params: tuple[Any, ...]) -> list[dict[str, Any]]:
        try:
            with self._cursor() as cur:
                cur.execute(query, params)
                return list(cur.fetchall())
        except psycopg.Error as exc:
            raise StoreError(f"Query failed: {exc}") from exc

    def _execute(self, query: sql.Composable, params: tuple[Any, ...]) -> None:
        try:
            with self._cursor() as cur:
                cur.execute(query, params)
        except psycopg.Error as exc:
            raise StoreError(f"Write failed: {exc}") from exc


def _to_db_value(name: str, value: Any) -> Any:
    if name in _JSON_COLUMNS:
        if isinstance(value, list):
            value = [_dump(item) for item in value]
        else:
            value = _dump(value)
        return Jsonb(value)
    return value


def _dump(value: Any) -> Any:
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json", exclude_none=True)
    return value


def _row_to_brewery(row: dict[str, Any]) -> BreweryRecord:
    return BreweryRecord(
        id=str(row["id"]),
        name=row["name"],
        website=row.get("website"),
        amenities=AmenityFields(**{name: row.get(name) for name in AMENITY_FIELDS}),
        memberships=_row_memberships(row),
        review_themes=row.get("review_themes"),
    )


def _row_to_review(row: dict[str, Any]) -> ReviewRecord:
    return ReviewRecord(
        id=str(row["id"]),
        brewery_id=str(row["brewery_id"]),
        reviewer_name=row.get("reviewer_name"),
        review_timestamp=row.get("review_timestamp"),
        text=row.get("review_text"),
        rating=row.get("rating"),
        language=row.get("language"),
        created_at=row.get("created_at"),
    )



def _row_memberships(row: dict[str, Any]) -> list[Membership]:
    memberships: list[Membership] = []
    for entry in row.get("memberships") or []:
        if isinstance(entry, dict) and entry.get("name"):
            memberships.append(Membership(**entry))
        else:
            logger.warning("Dropping membership entry without a name for brewery %s: %r", row["id"], entry)
    return memberships
