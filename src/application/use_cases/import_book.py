"""Use case importing an interchange document as a new book."""

from src.application.ports.interchange import InterchangeCodecPort
from src.application.ports.ledger import LedgerUnitOfWorkPort
from src.domain.exceptions import ImportAbortedError
from src.domain.models.interchange import ImportSummary
from src.domain.services.interchange_import import plan_import
from src.infrastructure.logging.logger import get_app_logger


class ImportBookUseCase:
    """Parse a document and write every entity in one transaction.

    Either the whole book is committed or nothing is. Imports into the
    same database must be serialized by the caller.
    """

    def __init__(
        self,
        codec: InterchangeCodecPort,
        unit_of_work: LedgerUnitOfWorkPort,
        logger=None,
        allow_currency_fallback: bool = True,
    ) -> None:
        """Initialize the use case.

        Args:
            codec: Interchange document parser.
            unit_of_work: Factory of atomic write scopes.
            logger: Optional logger compatible with logging.Logger-like API.
            allow_currency_fallback: Create USD when the document and the
                database have no currency.
        """
        self._codec = codec
        self._unit_of_work = unit_of_work
        self._logger = logger or get_app_logger()
        self._allow_currency_fallback = allow_currency_fallback

    def execute(self, data: bytes | str) -> ImportSummary:
        """Import a plain or gzip-compressed document.

        Args:
            data: Document content.

        Returns:
            ImportSummary: Counts, skipped records and warnings.

        Raises:
            InterchangeFormatError: If the document cannot be read.
            ImportAbortedError: If the document cannot be imported
                consistently; nothing is written.
        """
        doc = self._codec.parse(data)
        self._logger.info(
            f"Parsed document for book {doc.book_guid}: "
            f"{len(doc.accounts)} accounts, "
            f"{len(doc.transactions)} transactions"
        )

        try:
            with self._unit_of_work.begin() as writer:
                plan = plan_import(
                    doc,
                    writer.fetch_commodities(),
                    allow_currency_fallback=self._allow_currency_fallback,
                )
                writer.insert_commodities(plan.commodities)
                writer.insert_accounts([plan.root_account])
                writer.insert_book(plan.book)
                writer.insert_accounts(plan.accounts)
                writer.insert_transactions(plan.transactions)
                writer.insert_prices(plan.prices)
                writer.insert_budgets(plan.budgets)
        except ImportAbortedError as exc:
            self._logger.error(f"Import aborted, nothing written: {exc}")
            raise

        summary = plan.summary
        for warning in summary.warnings:
            self._logger.warning(warning)
        self._logger.info(
            f"Imported book {summary.book_guid}: "
            f"{summary.commodities} commodities, {summary.accounts} accounts, "
            f"{summary.transactions} transactions, {summary.splits} splits, "
            f"{summary.prices} prices, {summary.budgets} budgets"
        )
        return summary


__all__ = ["ImportBookUseCase"]
