"""Port for the interchange document codec."""

from typing import Protocol

from src.domain.models.interchange import InterchangeDocument


class InterchangeCodecPort(Protocol):
    """Serializes books to and from the interchange format."""

    def parse(self, data: bytes | str) -> InterchangeDocument:
        """Parse plain or gzip-compressed document content."""

    def build(self, doc: InterchangeDocument) -> str:
        """Serialize a document to text."""

    def compress(self, text: str) -> bytes:
        """Gzip serialized text."""


__all__ = ["InterchangeCodecPort"]
