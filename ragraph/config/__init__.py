"""
Configuration module for ragraph.

Environment readers shared by every dataclass config. The top-level
RagraphConfig lives in ragraph.core.
"""

from .environment import (
    get_env_bool,
    get_env_float,
    get_env_int,
    get_env_str,
    load_env_file,
)

__all__ = [
    "get_env_str",
    "get_env_int",
    "get_env_float",
    "get_env_bool",
    "load_env_file",
]
