"""OCR port interface."""
from abc import ABC, abstractmethod


class OCRPort(ABC):
    """Abstract interface for text recognition.

    Implementations: TesseractAdapter
    """

    @abstractmethod
    def extract_text(self, image: bytes) -> str:
        """Recognize text in an image.

        Args:
            image: Encoded image bytes (PNG, JPEG, ...)

        Returns:
            Recognized text, possibly empty
        """
        pass
