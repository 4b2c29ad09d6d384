"""GnuCash v2 XML interchange codec."""

from src.infrastructure.gnucash_xml.builder import (
    build_document,
    compress_document,
)
from src.infrastructure.gnucash_xml.codec import GnuCashXmlCodec
from src.infrastructure.gnucash_xml.parser import parse_document

__all__ = [
    "GnuCashXmlCodec",
    "build_document",
    "compress_document",
    "parse_document",
]
