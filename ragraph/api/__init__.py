"""
Ragraph HTTP API
================

FastAPI application factory: `create_app(rag)`.
"""

from ragraph.api.app import create_app

__all__ = ["create_app"]
