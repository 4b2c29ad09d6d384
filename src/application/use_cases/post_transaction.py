"""Use case posting a validated double-entry transaction."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from src.application.ports.audit import AuditSinkPort
from src.application.ports.ledger import LedgerUnitOfWorkPort
from src.application.use_cases.audit_utils import record_audit
from src.domain.constants import DEFAULT_RECONCILE_STATE
from src.domain.models.ledger import Split, Transaction
from src.domain.models.numeric import GncNumeric
from src.domain.models.validation import TransactionInput, ValidationError
from src.domain.services.dates import parse_timestamp
from src.domain.services.normalization import generate_guid
from src.domain.services.validation import validate_transaction
from src.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class PostTransactionResult:
    """Outcome of a post attempt.

    Attributes:
        transaction_guid: GUID of the written transaction, None if rejected.
        errors: Validation errors that blocked the write.
    """

    transaction_guid: str | None
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def posted(self) -> bool:
        return self.transaction_guid is not None


class PostTransactionUseCase:
    """Validate a transaction, then insert it with its splits atomically."""

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWorkPort,
        audit: AuditSinkPort | None = None,
        logger=None,
        guid_factory: Callable[[], str] = generate_guid,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._unit_of_work = unit_of_work
        self._audit = audit
        self._logger = logger or get_app_logger()
        self._guid_factory = guid_factory
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def execute(self, tx_input: TransactionInput) -> PostTransactionResult:
        """Post a transaction, or return why it was rejected.

        Args:
            tx_input: Candidate transaction.

        Returns:
            PostTransactionResult: GUID of the new transaction or errors.
        """
        result = validate_transaction(tx_input)
        if not result.valid:
            self._logger.warning(
                f"Transaction rejected with {len(result.errors)} errors: "
                + "; ".join(error.message for error in result.errors)
            )
            return PostTransactionResult(None, list(result.errors))

        transaction = self._build_transaction(tx_input)
        with self._unit_of_work.begin() as writer:
            writer.insert_transactions([transaction])

        self._logger.info(
            f"Posted transaction {transaction.guid} "
            f"with {len(transaction.splits)} splits"
        )
        record_audit(
            self._audit,
            self._logger,
            "CREATE",
            "TRANSACTION",
            transaction.guid,
            new_values={
                "description": transaction.description,
                "post_date": transaction.post_date.isoformat(),
                "splits": [
                    {
                        "account_guid": split.account_guid,
                        "value": str(split.value),
                    }
                    for split in transaction.splits
                ],
            },
        )
        return PostTransactionResult(transaction.guid)

    def _build_transaction(self, tx_input: TransactionInput) -> Transaction:
        tx_guid = self._guid_factory()
        splits = []
        for item in tx_input.splits or []:
            value = GncNumeric(item.value_num, item.value_denom)
            if item.quantity_num is None:
                quantity = value
            else:
                quantity = GncNumeric(
                    item.quantity_num,
                    item.quantity_denom or item.value_denom,
                )
            splits.append(
                Split(
                    guid=self._guid_factory(),
                    tx_guid=tx_guid,
                    account_guid=item.account_guid.lower(),
                    value=value,
                    quantity=quantity,
                    memo=item.memo or "",
                    action=item.action or "",
                    reconcile_state=item.reconcile_state
                    or DEFAULT_RECONCILE_STATE,
                )
            )
        return Transaction(
            guid=tx_guid,
            currency_guid=tx_input.currency_guid.lower(),
            post_date=parse_timestamp(tx_input.post_date),
            enter_date=self._clock(),
            description=tx_input.description.strip(),
            num=tx_input.num or "",
            splits=splits,
        )


__all__ = ["PostTransactionUseCase", "PostTransactionResult"]
