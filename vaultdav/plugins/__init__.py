from .base import EncryptedMetadata, StoragePlugin

__all__ = ["EncryptedMetadata", "StoragePlugin"]
