"""Use case building the rolled-up account tree of a book."""

from dataclasses import replace
from datetime import date

from src.application.ports.accounts_repository import AccountsRepositoryPort
from src.application.use_cases.get_book_scope import GetBookScopeUseCase
from src.domain.models.accounts import LineItem
from src.domain.models.numeric import GncNumeric
from src.domain.services.hierarchy import build_hierarchy
from src.infrastructure.logging.logger import get_app_logger


class GetAccountHierarchyUseCase:
    """Fetch per-account balances and roll them up the account tree."""

    def __init__(
        self,
        repository: AccountsRepositoryPort,
        book_scope: GetBookScopeUseCase,
        logger=None,
    ) -> None:
        self._repository = repository
        self._book_scope = book_scope
        self._logger = logger or get_app_logger()

    def execute(
        self,
        root_guid: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        previous_start: date | None = None,
        previous_end: date | None = None,
    ) -> list[LineItem]:
        """Return the top-level line items of a book.

        Args:
            root_guid: Book root; defaults to the first book's root.
            start_date: Optional lower bound for post dates.
            end_date: Optional upper bound for post dates.
            previous_start: Lower bound of an optional comparison period.
            previous_end: Upper bound of the comparison period; setting it
                fills ``previous_amount`` on every item.

        Returns:
            list[LineItem]: Children of the root, with rolled-up amounts.
        """
        root = self._book_scope.resolve_root(root_guid)
        guids = self._book_scope.account_guids(root) if root else None
        balances = self._repository.fetch_account_balances(
            guids,
            start_date,
            end_date,
        )

        if previous_end is not None:
            previous = {
                row.guid: row.balance
                for row in self._repository.fetch_account_balances(
                    guids,
                    previous_start,
                    previous_end,
                )
            }
            balances = [
                replace(
                    row,
                    previous_balance=previous.get(row.guid, GncNumeric.zero()),
                )
                for row in balances
            ]

        items = build_hierarchy(balances, root, logger=self._logger)
        self._logger.info(
            f"Built hierarchy for root {root}: {len(balances)} accounts, "
            f"{len(items)} top-level items"
        )
        return items


__all__ = ["GetAccountHierarchyUseCase"]
