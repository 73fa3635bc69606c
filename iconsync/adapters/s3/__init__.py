"""
S3 mode adapter implementations.

Containers are S3 buckets accessed with boto3.
"""
from .storage import S3AssetStore

__all__ = ["S3AssetStore"]
