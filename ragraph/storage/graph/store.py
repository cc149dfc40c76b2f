"""
Token Graph Store
=================

Graph Store Adapter on FalkorDB.

Schema:
    (:Document {id, content})
    (:Token {name, embedding})                  vector index on Token.embedding
    (:Token)-[:CONTAINS]->(:Document)           "document mentions token"
    (:Token)-[:PREDICATE {name, embedding}]->(:Token)

Identity and write rules:
- Document nodes are keyed by the id assigned by the vector store
- Token nodes are keyed by name; the first embedding written is kept
- PREDICATE edges are keyed by (subject, object, predicate name); the first
  embedding written is kept
- Every upsert is a MERGE, so repeating a write is harmless

Retrieval tie-break (search_by_token_similarity): candidates are ordered by
ascending vector distance of the token, then by ascending document id; the
first row wins.
"""

from typing import Any, Dict, List, Optional, Sequence

import structlog

from ragraph.exceptions import StorageError
from ragraph.models import GraphMatch, TokenHandle
from ragraph.storage.graph.client import FalkorDBClient
from ragraph.storage.validation import check_dimension

log = structlog.get_logger()

TOKEN_LABEL = "Token"
DOCUMENT_LABEL = "Document"

_UPSERT_DOCUMENT = """
    MERGE (d:Document {id: $id})
    ON CREATE SET d.content = $content
"""

_UPSERT_TOKEN = """
    MERGE (t:Token {name: $name})
    ON CREATE SET t.embedding = vecf32($embedding)
    RETURN t.name AS name, t.embedding AS embedding
"""

_LINK_CONTAINS = """
    MATCH (t:Token {name: $name})
    MATCH (d:Document {id: $document_id})
    MERGE (t)-[:CONTAINS]->(d)
    RETURN count(d) AS linked
"""

_UPSERT_PREDICATE = """
    MERGE (s:Token {name: $subject})
    ON CREATE SET s.embedding = vecf32($subject_embedding)
    MERGE (o:Token {name: $object})
    ON CREATE SET o.embedding = vecf32($object_embedding)
    MERGE (s)-[r:PREDICATE {name: $predicate}]->(o)
    ON CREATE SET r.embedding = vecf32($predicate_embedding)
"""

_GET_TOKEN = """
    MATCH (t:Token {name: $name})
    RETURN t.name AS name, t.embedding AS embedding
"""

_SEARCH_BY_TOKEN = """
    CALL db.idx.vector.queryNodes('Token', 'embedding', $k, vecf32($embedding))
    YIELD node, score
    MATCH (node)-[:CONTAINS]->(d:Document)
    RETURN d.id AS document_id, d.content AS content, node.name AS token, score
    ORDER BY score ASC, document_id ASC
    LIMIT 1
"""


def _as_vector(value: Any) -> List[float]:
    if value is None:
        return []
    return [float(v) for v in value]


class TokenGraphStore:
    """
    Document/token graph with vector-indexed token lookup.

    Example:
        store = TokenGraphStore(client, dimension=768)
        await store.ensure_schema()

        await store.upsert_document_node(42, "FalkorDB stores graphs")
        token = await store.upsert_token("FalkorDB", embedding)
        await store.link_contains(token, 42)

        match = await store.search_by_token_similarity(query_embedding, k=10)
    """

    def __init__(self, client: FalkorDBClient, dimension: int = 768, similarity: str = "cosine"):
        self.client = client
        self.dimension = dimension
        self.similarity = similarity
        self._schema_ready = False

    async def connect(self):
        await self.client.connect()

    async def close(self):
        await self.client.close()

    async def health_check(self) -> bool:
        return await self.client.health_check()

    async def ensure_schema(self):
        """
        Create the Token vector index and the lookup indexes if absent.

        FalkorDB has no IF NOT EXISTS for indexes: "already indexed" errors
        are treated as success.
        """
        if self._schema_ready:
            return
        if not self.client.connected:
            await self.client.connect()

        statements = [
            f"CREATE INDEX FOR (d:{DOCUMENT_LABEL}) ON (d.id)",
            f"CREATE INDEX FOR (t:{TOKEN_LABEL}) ON (t.name)",
            (
                f"CREATE VECTOR INDEX FOR (t:{TOKEN_LABEL}) ON (t.embedding) "
                f"OPTIONS {{dimension: {self.dimension}, similarityFunction: '{self.similarity}'}}"
            ),
        ]

        for statement in statements:
            try:
                await self.client.query(statement)
            except StorageError as e:
                if "already indexed" not in str(e).lower():
                    raise
                log.debug("Index already present", statement=statement)

        self._schema_ready = True
        log.info("Graph schema ensured", graph=self.client.config.graph_name, dimension=self.dimension)

    async def upsert_document_node(self, document_id: int, content: str) -> None:
        """Create the Document node for `document_id` unless it exists."""
        await self.ensure_schema()
        await self.client.query(_UPSERT_DOCUMENT, {"id": document_id, "content": content})

    async def upsert_token(self, name: str, embedding: Sequence[float]) -> TokenHandle:
        """
        Create the Token node unless it exists; an existing embedding is kept.

        Returns:
            The stored token (with its stored, possibly older, embedding)
        """
        check_dimension(embedding, self.dimension, f"embedding of token {name!r}")
        await self.ensure_schema()

        records = await self.client.query(
            _UPSERT_TOKEN,
            {"name": name, "embedding": list(embedding)},
        )
        if not records:
            raise StorageError(f"Token upsert returned nothing for {name!r}")

        record = records[0]
        return TokenHandle(name=record["name"], embedding=_as_vector(record.get("embedding")))

    async def link_contains(self, token: TokenHandle, document_id: int) -> None:
        """
        Ensure the CONTAINS edge token -> document exists.

        Raises:
            StorageError: If the token or the document node is missing
        """
        await self.ensure_schema()
        records = await self.client.query(
            _LINK_CONTAINS,
            {"name": token.name, "document_id": document_id},
        )
        if not records or not records[0].get("linked"):
            raise StorageError(
                f"Cannot link token {token.name!r} to document {document_id}: node missing"
            )

    async def upsert_predicate_edge(
        self,
        subject: str,
        subject_embedding: Sequence[float],
        object_name: str,
        object_embedding: Sequence[float],
        predicate: str,
        predicate_embedding: Sequence[float],
    ) -> None:
        """
        Create both endpoint tokens and the PREDICATE edge unless they exist.

        Existing embeddings (tokens and edge) are kept.
        """
        check_dimension(subject_embedding, self.dimension, f"embedding of subject {subject!r}")
        check_dimension(object_embedding, self.dimension, f"embedding of object {object_name!r}")
        check_dimension(predicate_embedding, self.dimension, f"embedding of predicate {predicate!r}")
        await self.ensure_schema()

        await self.client.query(_UPSERT_PREDICATE, {
            "subject": subject,
            "subject_embedding": list(subject_embedding),
            "object": object_name,
            "object_embedding": list(object_embedding),
            "predicate": predicate,
            "predicate_embedding": list(predicate_embedding),
        })

    async def get_token(self, name: str) -> Optional[TokenHandle]:
        """Stored token by name, or None."""
        await self.ensure_schema()
        records = await self.client.query(_GET_TOKEN, {"name": name})
        if not records:
            return None
        return TokenHandle(name=records[0]["name"], embedding=_as_vector(records[0].get("embedding")))

    async def search_by_token_similarity(
        self,
        embedding: Sequence[float],
        k: int = 10,
    ) -> Optional[GraphMatch]:
        """
        Best document reachable from the k tokens nearest to `embedding`.

        Args:
            embedding: Query vector
            k: Number of nearest tokens to consider

        Returns:
            GraphMatch of the winning document, or None if none is reachable
        """
        check_dimension(embedding, self.dimension, "query embedding")
        await self.ensure_schema()

        records = await self.client.query(_SEARCH_BY_TOKEN, {"k": k, "embedding": list(embedding)})
        if not records:
            log.debug("No document reachable through tokens", k=k)
            return None

        best: Dict[str, Any] = records[0]
        return GraphMatch(
            document_id=best["document_id"],
            content=best["content"] or "",
            token=best["token"],
            score=float(best["score"]),
        )
