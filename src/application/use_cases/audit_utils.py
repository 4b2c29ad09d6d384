"""Shared helper for notifying the audit sink after a committed change."""

from logging import Logger

from src.application.ports.audit import AuditSinkPort


def record_audit(
    audit: AuditSinkPort | None,
    logger: Logger,
    action: str,
    entity_type: str,
    entity_guid: str,
    old_values: dict | None = None,
    new_values: dict | None = None,
) -> None:
    """Notify the audit sink without letting its failures propagate.

    The change is already committed when this runs, so an audit failure is
    logged and otherwise ignored.
    """
    if audit is None:
        return
    try:
        audit.record(action, entity_type, entity_guid, old_values, new_values)
    except Exception as exc:
        logger.error(
            f"Failed to record audit {action} {entity_type} {entity_guid}: {exc}"
        )


__all__ = ["record_audit"]
