"""
Environment helpers
===================

Typed readers for environment variables, used as dataclass default factories
by every config in the package.

Usage:
    from ragraph.config.environment import get_env_int

    @dataclass
    class MyConfig:
        port: int = field(default_factory=lambda: get_env_int("MY_PORT", 8080))
"""

import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

_TRUTHY = {"1", "true", "yes", "on"}


def get_env_str(key: str, default: str) -> str:
    """Read an environment variable as a string."""
    return os.environ.get(key, default)


def get_env_int(key: str, default: int) -> int:
    """Read an environment variable as an integer."""
    return int(os.environ.get(key, default))


def get_env_float(key: str, default: Optional[float]) -> Optional[float]:
    """Read an environment variable as a float; empty string means None."""
    raw = os.environ.get(key)
    if raw is None:
        return default
    if raw.strip() == "":
        return None
    return float(raw)


def get_env_bool(key: str, default: bool) -> bool:
    """Read an environment variable as a boolean."""
    raw = os.environ.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def load_env_file(path: Optional[Union[str, Path]] = None) -> bool:
    """
    Load a .env file into the process environment.

    Variables already set in the environment win over the file.

    Returns:
        True if a file was found and loaded
    """
    return load_dotenv(dotenv_path=path, override=False)
