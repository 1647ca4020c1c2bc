"""
Storage abstractions.

Integration Points:
- MetadataStorage → MongoDB (accounts, students, review records)
"""

from jupiter.storage.base import (
    MetadataStorage,
    StorageProvider,
    Collections,
)
from jupiter.storage.local import InMemoryMetadataStorage, create_local_storage

__all__ = [
    "MetadataStorage",
    "StorageProvider",
    "Collections",
    "InMemoryMetadataStorage",
    "create_local_storage",
]
