"""Core domain exceptions.

All exceptions raised by core logic inherit from CoreError.
Adapters catch provider-specific errors and re-raise as these.
"""


class CoreError(Exception):
    """Base for all core domain errors."""
    pass


class ValidationError(CoreError):
    """Bookmark title or page rejected at commit time."""
    pass


class NotFoundError(CoreError):
    """Referenced bookmark id is not in the forest."""

    def __init__(self, node_id: str):
        super().__init__(f"Bookmark not found: {node_id}")
        self.node_id = node_id


class ImportResolutionError(CoreError):
    """Outline item destination could not be resolved to a page."""
    pass


class PDFError(CoreError):
    """PDF operation failed."""
    pass


class EmbeddingTimeoutError(PDFError):
    """Outline embedding did not finish within the allowed time."""
    pass


class OCRError(CoreError):
    """Text recognition failed."""
    pass


class StorageError(CoreError):
    """Upload storage operation failed."""
    pass
