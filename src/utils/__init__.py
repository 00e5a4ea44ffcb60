"""Utilities package for the Recipe Catalog backend."""

from .config import get_config, reset_config

__all__ = [
    "get_config",
    "reset_config",
]
