"""Use case deleting an empty leaf account."""

from src.application.cache import BookScopedCache
from src.application.ports.audit import AuditSinkPort
from src.application.ports.ledger import LedgerUnitOfWorkPort
from src.application.use_cases.audit_utils import record_audit
from src.domain.exceptions import AccountDeletionError
from src.domain.services.accounts import ensure_deletable
from src.infrastructure.logging.logger import get_app_logger


class DeleteAccountUseCase:
    """Delete an account that has no splits and no children."""

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWorkPort,
        audit: AuditSinkPort | None = None,
        cache: BookScopedCache | None = None,
        logger=None,
    ) -> None:
        self._unit_of_work = unit_of_work
        self._audit = audit
        self._cache = cache
        self._logger = logger or get_app_logger()

    def execute(self, account_guid: str) -> None:
        """Delete ``account_guid``.

        Raises:
            AccountDeletionError: If the account is missing or still used.
        """
        with self._unit_of_work.begin() as writer:
            account = writer.fetch_account(account_guid)
            if account is None:
                raise AccountDeletionError(f"Account not found: {account_guid}")
            ensure_deletable(
                account_guid,
                writer.count_splits(account_guid),
                writer.count_children(account_guid),
            )
            writer.delete_account(account_guid)

        if self._cache is not None:
            self._cache.clear()
        self._logger.info(f"Deleted account {account_guid} ({account.name})")
        record_audit(
            self._audit,
            self._logger,
            "DELETE",
            "ACCOUNT",
            account_guid,
            old_values={
                "name": account.name,
                "account_type": account.account_type,
                "parent_guid": account.parent_guid,
            },
        )


__all__ = ["DeleteAccountUseCase"]
