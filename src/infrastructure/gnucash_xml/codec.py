"""Codec adapter bundling the GnuCash XML parser and builder."""

from src.application.ports.interchange import InterchangeCodecPort
from src.domain.models.interchange import InterchangeDocument
from src.infrastructure.gnucash_xml.builder import (
    build_document,
    compress_document,
)
from src.infrastructure.gnucash_xml.parser import parse_document


class GnuCashXmlCodec(InterchangeCodecPort):
    """GnuCash v2 XML implementation of the interchange codec port."""

    def parse(self, data: bytes | str) -> InterchangeDocument:
        return parse_document(data)

    def build(self, doc: InterchangeDocument) -> str:
        return build_document(doc)

    def compress(self, text: str) -> bytes:
        return compress_document(text)


__all__ = ["GnuCashXmlCodec"]
