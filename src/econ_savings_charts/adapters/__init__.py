"""
Adapters package
----------------

Storage abstraction so the same chart pipeline reads its input and writes
its artefacts either on the local filesystem or on S3.
"""

from .storage import (  # noqa: F401
    LocalStorageAdapter,
    S3StorageAdapter,
    StorageAdapter,
)

__all__ = [
    "StorageAdapter",
    "LocalStorageAdapter",
    "S3StorageAdapter",
]
