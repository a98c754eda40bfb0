import logging

import pytest

from core.config import DatabaseSettings
from core.db import Database, Session
from core.errors import StorageFault


class FakeConnection:
    def __init__(self, rows):
        self.rows = rows
        self.calls = []

    async def fetchrow(self, sql, *args):
        self.calls.append((sql, args))
        return self.rows[0] if self.rows else None

    async def fetch(self, sql, *args):
        self.calls.append((sql, args))
        return list(self.rows)

    async def execute(self, sql, *args):
        self.calls.append((sql, args))
        return "DELETE 1"


class FakePool:
    def __init__(self, connection=None, error=None):
        self.connection = connection
        self.error = error
        self.released = []

    async def acquire(self):
        if self.error is not None:
            raise self.error
        return self.connection

    async def release(self, connection):
        self.released.append(connection)

    async def close(self):
        pass


def test_pool_before_connect():
    database = Database(DatabaseSettings())
    assert database.is_connected is False
    with pytest.raises(RuntimeError):
        database.pool()


@pytest.mark.asyncio
class TestSession:
    async def test_rows_become_dicts(self):
        session = Session(FakeConnection([{"id": 1, "title": "t"}]))

        assert await session.fetch_one("SELECT 1") == {"id": 1, "title": "t"}
        assert await session.fetch_all("SELECT 1") == [{"id": 1, "title": "t"}]
        assert await session.execute("DELETE FROM x") == "DELETE 1"

    async def test_missing_row(self):
        assert await Session(FakeConnection([])).fetch_one("SELECT 1") is None

    async def test_sql_logging(self, caplog):
        session = Session(FakeConnection([]), log_sql=True)

        with caplog.at_level(logging.DEBUG, logger="core.db"):
            await session.fetch_all("SELECT *\n  FROM blog_posts WHERE id = $1", 4)

        assert "query=SELECT * FROM blog_posts WHERE id = $1 args=1" in caplog.text

    async def test_sql_logging_off(self, caplog):
        session = Session(FakeConnection([]), log_sql=False)

        with caplog.at_level(logging.DEBUG, logger="core.db"):
            await session.fetch_all("SELECT 1")

        assert "query=" not in caplog.text


@pytest.mark.asyncio
class TestAcquire:
    async def test_connection_is_released(self):
        connection = FakeConnection([])
        pool = FakePool(connection=connection)
        database = Database(DatabaseSettings())
        database._pool = pool

        async with database.acquire() as session:
            await session.execute("SELECT 1")

        assert pool.released == [connection]

    async def test_connection_is_released_on_error(self):
        connection = FakeConnection([])
        pool = FakePool(connection=connection)
        database = Database(DatabaseSettings())
        database._pool = pool

        with pytest.raises(ValueError):
            async with database.acquire():
                raise ValueError("boom")

        assert pool.released == [connection]

    async def test_acquire_failure_is_storage_fault(self):
        database = Database(DatabaseSettings())
        database._pool = FakePool(error=OSError("could not connect to server"))

        with pytest.raises(StorageFault) as exc_info:
            async with database.acquire():
                pass

        assert "could not connect" not in exc_info.value.message

    async def test_close_is_idempotent(self):
        database = Database(DatabaseSettings())
        database._pool = FakePool()

        await database.close()
        await database.close()

        assert database.is_connected is False
