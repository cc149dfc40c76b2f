"""
Ragraph API Application

FastAPI surface over HybridRAG: document ingestion (/add, /upload),
question answering (/query) and backend health (/health).
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, File, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ragraph import __version__
from ragraph.api.schemas import (
    AddRequest,
    AddResponse,
    ErrorResponse,
    HealthResponse,
    QueryRequest,
    QueryResponse,
    UploadResponse,
)
from ragraph.core.engine import HybridRAG
from ragraph.exceptions import NotFoundError, RagraphError, ValidationError

log = structlog.get_logger()


def _status_for(exc: RagraphError) -> int:
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def create_app(rag: Optional[HybridRAG] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        rag: Engine to serve (default: HybridRAG.from_config() at startup)

    Returns:
        FastAPI app; the engine is connected on startup and closed on shutdown
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = rag or HybridRAG.from_config()
        app.state.rag = engine
        log.info("Ragraph API starting", version=__version__, graph=engine.graph_enabled)
        await engine.connect()
        try:
            yield
        finally:
            await engine.close()
            log.info("Ragraph API stopped")

    app = FastAPI(
        title="Ragraph API",
        description="Hybrid retrieval over pgvector and a FalkorDB token graph.",
        version=__version__,
        lifespan=lifespan,
    )
    if rag is not None:
        app.state.rag = rag

    @app.exception_handler(RagraphError)
    async def ragraph_exception_handler(request: Request, exc: RagraphError):
        code = _status_for(exc)
        if code >= 500:
            log.error("Request failed", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=code, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Report malformed request bodies as 400, like short texts."""
        log.warning("Invalid request", path=request.url.path, errors=exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request", "details": [str(e.get("msg")) for e in exc.errors()]},
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all incoming requests with timing."""
        start_time = time.time()
        response = await call_next(request)
        elapsed_ms = (time.time() - start_time) * 1000
        log.info(
            "Request handled",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            elapsed_ms=round(elapsed_ms, 1),
        )
        return response

    @app.post(
        "/add",
        response_model=AddResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
        summary="Add documents",
    )
    async def add_documents(body: AddRequest, request: Request):
        """Ingest a batch; 500 only when every document failed."""
        engine: HybridRAG = request.app.state.rag
        report = await engine.add_documents([doc.text for doc in body.documents])

        if report.all_failed:
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": "Failed to process documents", "details": report.errors},
            )

        message = "Documents added with errors" if report.errors else "Documents added successfully"
        return AddResponse(
            message=message,
            added=report.added_count,
            document_ids=report.document_ids,
            errors=report.errors,
        )

    @app.post(
        "/upload",
        response_model=UploadResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
        summary="Upload a document file",
    )
    async def upload_document(request: Request, document: UploadFile = File(...)):
        engine: HybridRAG = request.app.state.rag
        raw = await document.read()
        result = await engine.add_single_document(raw)
        return UploadResponse(
            message="Document uploaded successfully",
            document_id=result.document_id,
            errors=result.errors,
        )

    @app.post(
        "/query",
        response_model=QueryResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
        summary="Answer a question",
    )
    async def query(body: QueryRequest, request: Request):
        engine: HybridRAG = request.app.state.rag
        result = await engine.query(body.query, use_graph=body.use_graph)
        return QueryResponse(
            response=result.response_text,
            context=result.context,
            graph_error=result.graph_error,
        )

    @app.get("/health", response_model=HealthResponse, summary="Health Check")
    async def health(request: Request):
        engine: HybridRAG = request.app.state.rag
        components = await engine.health()
        healthy = components.pop("healthy")
        return JSONResponse(
            status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
            content=HealthResponse(
                status="healthy" if healthy else "degraded",
                components=components,
            ).model_dump(),
        )

    return app
