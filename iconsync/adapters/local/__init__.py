"""
Local mode adapter implementations.

Stores containers as directories on the local filesystem.
"""
from .storage import LocalAssetStore

__all__ = ["LocalAssetStore"]
