"""
Ragraph Services
================

Clients for the remote models the engine depends on.
"""

from ragraph.services.gemini import GeminiConfig, GeminiService, parse_json_response

__all__ = [
    "GeminiConfig",
    "GeminiService",
    "parse_json_response",
]
