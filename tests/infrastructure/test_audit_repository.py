"""Tests for the SQLAlchemy audit sink."""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from src.infrastructure.audit_repository import SqlAlchemyAuditSink


def test_record_writes_json_values(db_port, sqlite_engine):
    logger = MagicMock()
    sink = SqlAlchemyAuditSink(db_port, logger=logger, user_id=7)

    sink.record(
        "UPDATE",
        "ACCOUNT",
        "a" * 32,
        old_values={"parent_guid": "b" * 32},
        new_values={"parent_guid": "c" * 32},
    )

    with sqlite_engine.connect() as conn:
        row = conn.execute(
            text(
                "SELECT user_id, action, entity_type, entity_guid, "
                "old_values, new_values FROM gnucash_web_audit"
            )
        ).one()
    assert row.user_id == 7
    assert row.action == "UPDATE"
    assert row.entity_type == "ACCOUNT"
    assert json.loads(row.old_values) == {"parent_guid": "b" * 32}
    assert json.loads(row.new_values) == {"parent_guid": "c" * 32}
    logger.debug.assert_called_once()


def test_record_stores_null_for_missing_values(db_port, sqlite_engine):
    SqlAlchemyAuditSink(db_port, logger=MagicMock()).record(
        "DELETE", "ACCOUNT", "a" * 32, old_values={"name": "Cash"}
    )

    with sqlite_engine.connect() as conn:
        new_values = conn.execute(
            text("SELECT new_values FROM gnucash_web_audit")
        ).scalar_one()
    assert new_values is None


def test_record_logs_database_failure():
    """Write errors are logged and swallowed."""
    engine = MagicMock()
    engine.begin.side_effect = OperationalError("INSERT", {}, Exception("x"))
    logger = MagicMock()
    sink = SqlAlchemyAuditSink(
        SimpleNamespace(get_gnucash_engine=lambda: engine),
        logger=logger,
    )

    sink.record("CREATE", "TRANSACTION", "t" * 32, new_values={"a": 1})

    logger.error.assert_called_once()
    assert "Audit write failed" in logger.error.call_args.args[0]


def test_record_logs_missing_configuration():
    def _missing():
        raise RuntimeError("Missing environment variable: GNUCASH_DB_URL")

    logger = MagicMock()
    sink = SqlAlchemyAuditSink(
        SimpleNamespace(get_gnucash_engine=_missing),
        logger=logger,
    )

    sink.record("CREATE", "TRANSACTION", "t" * 32)

    logger.error.assert_called_once()
