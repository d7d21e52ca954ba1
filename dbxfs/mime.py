# mime.py
import mimetypes
from abc import ABC, abstractmethod
from typing import Optional


class MimeTypeDetector(ABC):
    @abstractmethod
    def detect_mime_type_from_path(self, path: str) -> Optional[str]:
        pass


class ExtensionMimeTypeDetector(MimeTypeDetector):
    """Guesses the MIME type from the file extension only, never from content."""

    def __init__(self, default: Optional[str] = None):
        self.default = default

    def detect_mime_type_from_path(self, path: str) -> Optional[str]:
        mime_type = mimetypes.guess_type(path, strict=False)[0]
        return mime_type or self.default
