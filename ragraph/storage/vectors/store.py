"""
Document Store
==============

Vector Store Adapter on PostgreSQL + pgvector.

Persisted layout:
    documents(id SERIAL PRIMARY KEY, content TEXT NOT NULL, embedding VECTOR(D))
    + HNSW index on embedding (vector_l2_ops)

Features:
- Schema and similarity index created on first use (idempotent)
- Every add inserts a new row: identical content is never deduplicated
- Nearest-neighbour lookup under squared Euclidean distance (<->)
- Async/await through SQLAlchemy + asyncpg
"""

import asyncio
import re
from dataclasses import dataclass, field
from typing import Optional, Sequence

import structlog
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from ragraph.config.environment import get_env_int, get_env_str
from ragraph.exceptions import NotFoundError, StorageError
from ragraph.storage.validation import check_dimension

log = structlog.get_logger()

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass
class PostgresConfig:
    """
    Configuration for the PostgreSQL vector store.

    Environment Variables:
        RAGRAPH_PG_HOST: Host (default: localhost)
        RAGRAPH_PG_PORT: Port (default: 5438)
        RAGRAPH_PG_DATABASE: Database (default: postgres)
        RAGRAPH_PG_USER: User (default: postgres)
        PG_PASSWORD: Password (default: empty)
        RAGRAPH_PG_TABLE: Table name (default: documents)
    """
    host: str = field(default_factory=lambda: get_env_str("RAGRAPH_PG_HOST", "localhost"))
    port: int = field(default_factory=lambda: get_env_int("RAGRAPH_PG_PORT", 5438))
    database: str = field(default_factory=lambda: get_env_str("RAGRAPH_PG_DATABASE", "postgres"))
    user: str = field(default_factory=lambda: get_env_str("RAGRAPH_PG_USER", "postgres"))
    password: str = field(default_factory=lambda: get_env_str("PG_PASSWORD", ""))
    table_name: str = field(default_factory=lambda: get_env_str("RAGRAPH_PG_TABLE", "documents"))
    pool_size: int = 10
    max_overflow: int = 20

    def __post_init__(self):
        if not _IDENTIFIER.match(self.table_name):
            raise ValueError(f"Invalid table name: {self.table_name!r}")

    def get_connection_string(self) -> str:
        """Get async PostgreSQL connection string."""
        return f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


def format_vector(vector: Sequence[float]) -> str:
    """Render a vector as a pgvector literal: [0.1,0.2,...]."""
    return "[" + ",".join(repr(float(v)) for v in vector) + "]"


class DocumentStore:
    """
    Vector Store Adapter: (content, embedding) rows with nearest-neighbour search.

    The store owns its engine; create one instance per process and pass it to
    the ingestion coordinator and the retriever.

    Example:
        store = DocumentStore(PostgresConfig(), dimension=768)
        doc_id = await store.add_document("Hybrid retrieval merges...", embedding)
        content = await store.nearest_document(query_embedding)
        await store.close()
    """

    def __init__(self, config: Optional[PostgresConfig] = None, dimension: int = 768):
        self.config = config or PostgresConfig()
        self.dimension = dimension
        self._engine = None
        self._session_maker = None
        self._connected = False
        self._schema_ready = False
        self._schema_lock = asyncio.Lock()

        log.info(
            "DocumentStore initialized",
            host=f"{self.config.host}:{self.config.port}",
            database=self.config.database,
            table=self.config.table_name,
            dimension=dimension,
        )

    async def connect(self):
        """Establish connection pool to PostgreSQL."""
        if self._connected:
            log.debug("Already connected to PostgreSQL")
            return

        self._engine = create_async_engine(
            self.config.get_connection_string(),
            pool_size=self.config.pool_size,
            max_overflow=self.config.max_overflow,
            echo=False,
        )
        self._session_maker = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self._connected = True
        log.info("Connected to PostgreSQL", host=self.config.host, port=self.config.port)

    async def close(self):
        """Close connection pool."""
        if not self._connected:
            return

        await self._engine.dispose()
        self._connected = False
        self._schema_ready = False
        log.info("Disconnected from PostgreSQL")

    async def ensure_schema(self):
        """
        Create the pgvector extension, the table and the HNSW index if absent.

        Safe to call any number of times; only the first call hits the database.
        """
        if self._schema_ready:
            return

        async with self._schema_lock:
            if self._schema_ready:
                return
            if not self._connected:
                await self.connect()

            table = self.config.table_name
            statements = [
                "CREATE EXTENSION IF NOT EXISTS vector",
                f"""
                CREATE TABLE IF NOT EXISTS {table} (
                    id SERIAL PRIMARY KEY,
                    content TEXT NOT NULL,
                    embedding VECTOR({self.dimension})
                )
                """,
                f"""
                CREATE INDEX IF NOT EXISTS {table}_embedding_idx
                ON {table} USING hnsw (embedding vector_l2_ops)
                """,
            ]

            try:
                async with self._engine.begin() as conn:
                    for statement in statements:
                        await conn.execute(text(statement))
            except (SQLAlchemyError, OSError) as e:
                raise StorageError(f"Failed to create schema for {table}: {e}") from e

            self._schema_ready = True
            log.info("Vector store schema ensured", table=table)

    async def add_document(self, content: str, embedding: Sequence[float]) -> int:
        """
        Insert a new row.

        Args:
            content: Document text
            embedding: Document vector (exactly `dimension` components)

        Returns:
            Id assigned by the database

        Raises:
            DimensionMismatchError: If the embedding has the wrong length
            StorageError: On connection or constraint failure
        """
        check_dimension(embedding, self.dimension, "document embedding")
        await self.ensure_schema()

        insert_sql = text(f"""
            INSERT INTO {self.config.table_name} (content, embedding)
            VALUES (:content, CAST(:embedding AS vector))
            RETURNING id
        """)

        try:
            async with self._session_maker() as session:
                result = await session.execute(
                    insert_sql,
                    {"content": content, "embedding": format_vector(embedding)},
                )
                await session.commit()
                doc_id = result.scalar()
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(f"Failed to insert document: {e}") from e

        log.debug("Document inserted", document_id=doc_id, length=len(content))
        return doc_id

    async def nearest_document(self, embedding: Sequence[float]) -> str:
        """
        Content of the stored document closest to `embedding` (L2 distance).

        Raises:
            NotFoundError: If the store is empty
            StorageError: On backend failure
        """
        check_dimension(embedding, self.dimension, "query embedding")
        await self.ensure_schema()

        search_sql = text(f"""
            SELECT id, content
            FROM {self.config.table_name}
            ORDER BY embedding <-> CAST(:embedding AS vector), id ASC
            LIMIT 1
        """)

        try:
            async with self._session_maker() as session:
                result = await session.execute(search_sql, {"embedding": format_vector(embedding)})
                row = result.first()
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(f"Failed to search documents in PostgreSQL: {e}") from e

        if row is None:
            raise NotFoundError("No documents stored")

        log.debug("Nearest document found", document_id=row[0])
        return row[1]

    async def count(self) -> int:
        """Number of stored rows."""
        await self.ensure_schema()

        try:
            async with self._session_maker() as session:
                result = await session.execute(
                    text(f"SELECT COUNT(*) FROM {self.config.table_name}")
                )
                return result.scalar()
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(f"Failed to count documents: {e}") from e

    async def health_check(self) -> bool:
        """
        Check if PostgreSQL is reachable.

        Returns:
            True if healthy, False otherwise
        """
        try:
            if not self._connected:
                await self.connect()
            async with self._session_maker() as session:
                await session.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            log.error("Health check failed", backend="postgres", error=str(e))
            return False
