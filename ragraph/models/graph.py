"""
Graph Models
============

Dataclasses exchanged between the relation extractors, the graph store and
the retriever.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ragraph.exceptions import DependencyError


@dataclass(frozen=True)
class Triplet:
    """An extracted relation: subject -predicate-> object."""
    subject: str
    predicate: str
    object: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Triplet":
        """
        Build a Triplet from extractor output.

        Accepts lowercase keys (subject/predicate/object) as well as the
        capitalised keys some extractors emit.

        Raises:
            DependencyError: If a field is missing or not a non-empty string
        """
        if not isinstance(data, dict):
            raise DependencyError(f"Triplet must be an object, got {type(data).__name__}")

        values = {}
        for name in ("subject", "predicate", "object"):
            value = data.get(name, data.get(name.capitalize()))
            if not isinstance(value, str) or not value.strip():
                raise DependencyError(f"Triplet field '{name}' missing or empty: {data!r}")
            values[name] = value.strip()

        return cls(**values)


@dataclass
class Extraction:
    """
    Output of a relation extractor.

    Attributes:
        tokens: Token names mentioned by the document
        triplets: Subject-predicate-object relations
    """
    tokens: List[str] = field(default_factory=list)
    triplets: List[Triplet] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "Extraction":
        """
        Validate the extractor contract {"tokens": [...], "triplets": [...]}.

        A missing "triplets" key is read as no triplets; a null list is read
        as empty.

        Raises:
            DependencyError: If the payload is malformed
        """
        if not isinstance(payload, dict):
            raise DependencyError(f"Extractor output must be an object, got {type(payload).__name__}")

        tokens = payload.get("tokens") or []
        triplets = payload.get("triplets") or []

        if not isinstance(tokens, list) or not all(isinstance(t, str) for t in tokens):
            raise DependencyError("Extractor output 'tokens' must be a list of strings")
        if not isinstance(triplets, list):
            raise DependencyError("Extractor output 'triplets' must be a list")

        return cls(
            tokens=list(tokens),
            triplets=[Triplet.from_dict(t) for t in triplets],
        )

    def unique_tokens(self) -> List[str]:
        """Token names without blanks and duplicates, in first-seen order."""
        stripped = (token.strip() for token in self.tokens)
        return list(dict.fromkeys(token for token in stripped if token))


@dataclass
class TokenHandle:
    """A Token node as stored in the graph (embedding is the first one written)."""
    name: str
    embedding: List[float] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"<TokenHandle({self.name!r}, dim={len(self.embedding)})>"


@dataclass
class GraphMatch:
    """
    Best document reached from the query through token similarity.

    Attributes:
        document_id: Id shared with the vector store row
        content: Document content
        token: Name of the token the document was reached from
        score: Vector distance of that token from the query (lower is closer)
    """
    document_id: int
    content: str
    token: str
    score: float

    def __repr__(self) -> str:
        return (
            f"<GraphMatch(document_id={self.document_id}, token={self.token!r}, "
            f"score={self.score:.4f})>"
        )

