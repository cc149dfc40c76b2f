"""
Test DocumentStore
==================

Unit tests for the pgvector adapter with a mocked SQLAlchemy session.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from sqlalchemy.exc import SQLAlchemyError

from ragraph.exceptions import DimensionMismatchError, NotFoundError, StorageError
from ragraph.storage.vectors.store import DocumentStore, PostgresConfig, format_vector


def make_store(result=None, execute_error=None, dimension=3):
    """DocumentStore whose session maker yields a mocked session."""
    session = MagicMock()
    session.execute = AsyncMock(return_value=result, side_effect=execute_error)
    session.commit = AsyncMock()

    session_cm = MagicMock()
    session_cm.__aenter__ = AsyncMock(return_value=session)
    session_cm.__aexit__ = AsyncMock(return_value=False)

    store = DocumentStore(PostgresConfig(password="test"), dimension=dimension)
    store._session_maker = MagicMock(return_value=session_cm)
    store._connected = True
    store._schema_ready = True
    return store, session


# ═══════════════════════════════════════════════════════════════════════════════
# CONFIG
# ═══════════════════════════════════════════════════════════════════════════════

class TestPostgresConfig:
    """Test PostgresConfig."""

    def test_connection_string(self):
        config = PostgresConfig(host="db", port=5438, database="postgres", user="postgres", password="pw")
        assert config.get_connection_string() == "postgresql+asyncpg://postgres:pw@db:5438/postgres"

    def test_password_from_env(self, monkeypatch):
        monkeypatch.setenv("PG_PASSWORD", "from-env")
        assert PostgresConfig().password == "from-env"

    def test_invalid_table_name_rejected(self):
        with pytest.raises(ValueError):
            PostgresConfig(table_name="documents; DROP TABLE x")


def test_format_vector():
    assert format_vector([1, 0.5, -2]) == "[1.0,0.5,-2.0]"


# ═══════════════════════════════════════════════════════════════════════════════
# WRITES
# ═══════════════════════════════════════════════════════════════════════════════

class TestAddDocument:
    """Test DocumentStore.add_document()."""

    @pytest.mark.asyncio
    async def test_returns_assigned_id(self):
        result = MagicMock()
        result.scalar.return_value = 42
        store, session = make_store(result=result)

        doc_id = await store.add_document("hybrid retrieval", [0.1, 0.2, 0.3])

        assert doc_id == 42
        params = session.execute.await_args.args[1]
        assert params == {"content": "hybrid retrieval", "embedding": "[0.1,0.2,0.3]"}
        session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_insert_statement_uses_vector_cast(self):
        result = MagicMock()
        result.scalar.return_value = 1
        store, session = make_store(result=result)

        await store.add_document("content", [1.0, 2.0, 3.0])

        statement = str(session.execute.await_args.args[0])
        assert "INSERT INTO documents" in statement
        assert "CAST(:embedding AS vector)" in statement
        assert "RETURNING id" in statement

    @pytest.mark.asyncio
    async def test_dimension_mismatch_refused_before_write(self):
        store, session = make_store()

        with pytest.raises(DimensionMismatchError) as exc_info:
            await store.add_document("content", [1.0, 2.0])

        assert exc_info.value.expected == 3
        assert exc_info.value.actual == 2
        session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_backend_failure_is_storage_error(self):
        store, _ = make_store(execute_error=SQLAlchemyError("connection lost"))

        with pytest.raises(StorageError, match="Failed to insert document"):
            await store.add_document("content", [1.0, 2.0, 3.0])


# ═══════════════════════════════════════════════════════════════════════════════
# READS
# ═══════════════════════════════════════════════════════════════════════════════

class TestNearestDocument:
    """Test DocumentStore.nearest_document()."""

    @pytest.mark.asyncio
    async def test_returns_content_of_first_row(self):
        result = MagicMock()
        result.first.return_value = (7, "nearest content")
        store, session = make_store(result=result)

        content = await store.nearest_document([0.0, 1.0, 0.0])

        assert content == "nearest content"
        statement = str(session.execute.await_args.args[0])
        assert "ORDER BY embedding <-> CAST(:embedding AS vector), id ASC" in statement
        assert "LIMIT 1" in statement

    @pytest.mark.asyncio
    async def test_empty_store_raises_not_found(self):
        result = MagicMock()
        result.first.return_value = None
        store, _ = make_store(result=result)

        with pytest.raises(NotFoundError):
            await store.nearest_document([0.0, 1.0, 0.0])

    @pytest.mark.asyncio
    async def test_backend_failure_is_storage_error(self):
        store, _ = make_store(execute_error=SQLAlchemyError("timeout"))

        with pytest.raises(StorageError):
            await store.nearest_document([0.0, 1.0, 0.0])

    @pytest.mark.asyncio
    async def test_query_dimension_checked(self):
        store, session = make_store()

        with pytest.raises(DimensionMismatchError):
            await store.nearest_document([0.0, 1.0, 0.0, 4.0])
        session.execute.assert_not_awaited()


class TestHealth:
    """Test count() and health_check()."""

    @pytest.mark.asyncio
    async def test_count(self):
        result = MagicMock()
        result.scalar.return_value = 12
        store, _ = make_store(result=result)

        assert await store.count() == 12

    @pytest.mark.asyncio
    async def test_health_check_false_on_error(self):
        store, _ = make_store(execute_error=SQLAlchemyError("down"))
        assert await store.health_check() is False

    @pytest.mark.asyncio
    async def test_health_check_true(self):
        store, _ = make_store(result=MagicMock())
        assert await store.health_check() is True
