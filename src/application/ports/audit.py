"""Port for the audit trail notified after ledger mutations."""

from typing import Protocol


class AuditSinkPort(Protocol):
    """Best-effort recorder of successful mutations."""

    def record(
        self,
        action: str,
        entity_type: str,
        entity_guid: str,
        old_values: dict | None = None,
        new_values: dict | None = None,
    ) -> None:
        """Record one mutation; implementations must not raise.

        Args:
            action: ``CREATE``, ``UPDATE`` or ``DELETE``.
            entity_type: ``TRANSACTION``, ``ACCOUNT``, ``SPLIT`` or ``PRICE``.
            entity_guid: GUID of the changed entity.
            old_values: Values before the change, None for creations.
            new_values: Values after the change, None for deletions.
        """


__all__ = ["AuditSinkPort"]
