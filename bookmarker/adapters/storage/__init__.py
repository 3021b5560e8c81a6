"""Storage adapters."""
from bookmarker.adapters.storage.upload_store import UploadStore

__all__ = ["UploadStore"]
