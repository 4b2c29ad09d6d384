"""Use case re-parenting an account."""

from src.application.cache import BookScopedCache
from src.application.ports.audit import AuditSinkPort
from src.application.ports.ledger import LedgerUnitOfWorkPort
from src.application.use_cases.audit_utils import record_audit
from src.domain.services.accounts import ensure_valid_move
from src.infrastructure.logging.logger import get_app_logger


class MoveAccountUseCase:
    """Move an account under a new parent after re-checking acyclicity."""

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

    def execute(self, account_guid: str, new_parent_guid: str) -> None:
        """Re-parent ``account_guid`` under ``new_parent_guid``.

        Raises:
            InvalidAccountMoveError: If the move would break the tree.
        """
        with self._unit_of_work.begin() as writer:
            account = writer.fetch_account(account_guid)
            parents = writer.fetch_account_parents()
            ensure_valid_move(
                account_guid,
                new_parent_guid,
                parents,
                account.account_type if account else None,
            )
            old_parent = parents.get(account_guid)
            writer.update_account_parent(account_guid, new_parent_guid)

        if self._cache is not None:
            self._cache.clear()
        self._logger.info(
            f"Moved account {account_guid} from {old_parent} "
            f"to {new_parent_guid}"
        )
        record_audit(
            self._audit,
            self._logger,
            "UPDATE",
            "ACCOUNT",
            account_guid,
            old_values={"parent_guid": old_parent},
            new_values={"parent_guid": new_parent_guid},
        )


__all__ = ["MoveAccountUseCase"]
