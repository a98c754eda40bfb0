"""
Async database access (raw SQL) using asyncpg.

`Database` owns the connection pool. The application builds one instance at
startup, connects it in the lifespan handler and closes it on shutdown (see
`api/main.py`). Request handlers never touch the pool directly: they get a
`Session` from `Database.acquire()`, which holds one pooled connection for the
duration of the request and gives it back afterwards.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Every helper runs a single statement in asyncpg's default auto-commit mode.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

import asyncpg

from .config import DatabaseSettings
from .errors import StorageFault

logger = logging.getLogger(__name__)


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url(settings: DatabaseSettings) -> str:
    if settings.url:
        return _sanitize_database_url(settings.url)

    user = quote(settings.username, safe="")
    password = quote(settings.password, safe="")
    credentials = f"{user}:{password}" if password else user
    return f"postgresql://{credentials}@{settings.host}:{settings.port}/{settings.name}"


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


class Session:
    """
    Query helpers bound to one connection.
    """

    def __init__(self, connection: asyncpg.Connection, *, log_sql: bool = False) -> None:
        self._connection = connection
        self._log_sql = log_sql

    def _log(self, sql: str, args: tuple[Any, ...]) -> None:
        if self._log_sql:
            logger.debug("sql query=%s args=%d", " ".join(sql.split()), len(args))

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        self._log(sql, args)
        row = await self._connection.fetchrow(sql, *args)
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        self._log(sql, args)
        rows = await self._connection.fetch(sql, *args)
        return [_record_to_dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> str:
        """
        Run a statement (INSERT/UPDATE/DELETE/DDL) and return its status tag.
        """
        self._log(sql, args)
        return await self._connection.execute(sql, *args)


class Database:
    def __init__(self, settings: DatabaseSettings) -> None:
        self.settings = settings
        self._pool: asyncpg.Pool | None = None

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    async def connect(self) -> None:
        if self._pool is not None:
            return None

        dsn = database_url(self.settings)
        options: dict[str, Any] = {
            "dsn": dsn,
            "min_size": self.settings.pool_min_size,
            "max_size": max(self.settings.pool_min_size, self.settings.pool_max_size),
        }
        if self.settings.ssl:
            options["ssl"] = "require"

        self._pool = await asyncpg.create_pool(**options)

        # Never log the DSN itself, it carries the password.
        parts = urlsplit(dsn)
        logger.info("db_pool_opened host=%s database=%s", parts.hostname, parts.path.lstrip("/"))

    async def close(self) -> None:
        if self._pool is None:
            return None
        await self._pool.close()
        self._pool = None
        logger.info("db_pool_closed")

    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("DB pool is not initialized. Call connect() on startup.")
        return self._pool

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[Session]:
        pool = self.pool()
        try:
            connection = await pool.acquire()
        except Exception as exc:
            logger.exception("db_acquire_failed")
            raise StorageFault("Database is unavailable.") from exc

        try:
            yield Session(connection, log_sql=self.settings.log_sql)
        finally:
            await pool.release(connection)
