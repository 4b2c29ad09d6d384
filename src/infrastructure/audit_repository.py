"""SQLAlchemy audit sink writing to the gnucash_web_audit table."""

import json

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.application.ports.audit import AuditSinkPort
from src.application.ports.database import DatabaseEnginePort
from src.infrastructure.logging.logger import get_app_logger

INSERT_AUDIT_SQL = text(
    """
    INSERT INTO gnucash_web_audit (
        user_id, action, entity_type, entity_guid, old_values, new_values
    )
    VALUES (
        :user_id, :action, :entity_type, :entity_guid, :old_values,
        :new_values
    )
    """
)


def _to_json(values: dict | None) -> str | None:
    if values is None:
        return None
    return json.dumps(values, default=str, sort_keys=True)


class SqlAlchemyAuditSink(AuditSinkPort):
    """Append-only audit trail; write failures are logged, never raised."""

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        logger=None,
        user_id: int | None = None,
    ) -> None:
        """Initialize the sink.

        Args:
            db_port: Port providing access to the GnuCash engine.
            logger: Optional logger compatible with logging.Logger-like API.
            user_id: Optional identifier stored with every record.
        """
        self._db_port = db_port
        self._logger = logger or get_app_logger()
        self._user_id = user_id

    def record(
        self,
        action: str,
        entity_type: str,
        entity_guid: str,
        old_values: dict | None = None,
        new_values: dict | None = None,
    ) -> None:
        params = {
            "user_id": self._user_id,
            "action": action,
            "entity_type": entity_type,
            "entity_guid": entity_guid,
            "old_values": _to_json(old_values),
            "new_values": _to_json(new_values),
        }
        try:
            engine = self._db_port.get_gnucash_engine()
            with engine.begin() as conn:
                conn.execute(INSERT_AUDIT_SQL, params)
        except (SQLAlchemyError, RuntimeError) as exc:
            self._logger.error(
                f"Audit write failed for {action} {entity_type} "
                f"{entity_guid}: {exc}"
            )
            return
        self._logger.debug(f"Audited {action} {entity_type} {entity_guid}")


__all__ = ["SqlAlchemyAuditSink"]
