"""Use case exporting a book as an interchange document."""

from dataclasses import dataclass

from src.application.ports.interchange import InterchangeCodecPort
from src.application.ports.snapshot import BookSnapshotPort
from src.domain.services.interchange_export import build_interchange_document
from src.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class ExportBookResult:
    """Serialized book and what it contains.

    Attributes:
        content: XML text, or gzip bytes when compressed.
        compressed: True when ``content`` is gzip data.
        count_data: Entity counts written to the document header.
    """

    content: str | bytes
    compressed: bool
    count_data: dict[str, int]


class ExportBookUseCase:
    """Serialize every entity of one book."""

    def __init__(
        self,
        snapshot_port: BookSnapshotPort,
        codec: InterchangeCodecPort,
        logger=None,
    ) -> None:
        self._snapshot_port = snapshot_port
        self._codec = codec
        self._logger = logger or get_app_logger()

    def execute(self, root_guid: str, compress: bool = False) -> ExportBookResult:
        """Export the book rooted at ``root_guid``.

        Args:
            root_guid: Root account GUID of the book.
            compress: Gzip the serialized document.

        Returns:
            ExportBookResult: Document content and counts.
        """
        snapshot = self._snapshot_port.fetch_book_snapshot(root_guid)
        doc = build_interchange_document(snapshot)
        text = self._codec.build(doc)
        content = self._codec.compress(text) if compress else text
        self._logger.info(
            f"Exported book {doc.book_guid}: {doc.count_data} "
            f"({len(content)} {'bytes' if compress else 'chars'})"
        )
        return ExportBookResult(
            content=content,
            compressed=compress,
            count_data=dict(doc.count_data),
        )


__all__ = ["ExportBookUseCase", "ExportBookResult"]
