"""
Pydantic schemas for the HTTP endpoints.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================

class DocumentIn(BaseModel):
    """One document of an /add request."""

    text: str = Field(..., description="Raw document text (at least 5 characters once trimmed)")


class AddRequest(BaseModel):
    """Request schema for POST /add."""

    documents: List[DocumentIn] = Field(..., description="Documents to ingest")


class QueryRequest(BaseModel):
    """Request schema for POST /query."""

    query: str = Field(..., description="Question (at least 3 characters once trimmed)")
    use_graph: bool = Field(default=False, description="Expand the context through the token graph")


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================

class AddResponse(BaseModel):
    message: str
    added: int
    document_ids: List[int] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)


class UploadResponse(BaseModel):
    message: str
    document_id: int
    errors: List[str] = Field(default_factory=list)


class QueryResponse(BaseModel):
    response: str = Field(..., description="Generated answer")
    context: str = Field(..., description="Context passed to the generative model")
    graph_error: Optional[str] = Field(default=None, description="Set when the graph lookup failed")


class HealthResponse(BaseModel):
    status: str
    components: Dict[str, bool]


class ErrorResponse(BaseModel):
    error: str
    details: List[str] = Field(default_factory=list)
