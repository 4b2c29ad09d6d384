"""DDL for the GnuCash SQL tables the ledger core reads and writes.

Column names and types follow the GnuCash SQL backend. Foreign keys on
account parents and split references are declared so the database rejects
a child written before its parent.
"""

from sqlalchemy.engine import Engine

_AUTO_ID = {
    "sqlite": "INTEGER PRIMARY KEY AUTOINCREMENT",
    "postgresql": "SERIAL PRIMARY KEY",
    "mysql": "INTEGER PRIMARY KEY AUTO_INCREMENT",
}

CREATE_TABLE_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS commodities (
        guid VARCHAR(32) PRIMARY KEY NOT NULL,
        namespace VARCHAR(2048) NOT NULL,
        mnemonic VARCHAR(2048) NOT NULL,
        fullname VARCHAR(2048),
        cusip VARCHAR(2048),
        fraction INTEGER NOT NULL,
        quote_flag INTEGER NOT NULL,
        quote_source VARCHAR(2048),
        quote_tz VARCHAR(2048)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS accounts (
        guid VARCHAR(32) PRIMARY KEY NOT NULL,
        name VARCHAR(2048) NOT NULL,
        account_type VARCHAR(2048) NOT NULL,
        commodity_guid VARCHAR(32) REFERENCES commodities (guid),
        commodity_scu INTEGER NOT NULL,
        non_std_scu INTEGER NOT NULL,
        parent_guid VARCHAR(32) REFERENCES accounts (guid),
        code VARCHAR(2048),
        description VARCHAR(2048),
        hidden INTEGER,
        placeholder INTEGER
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS books (
        guid VARCHAR(32) PRIMARY KEY NOT NULL,
        root_account_guid VARCHAR(32) NOT NULL REFERENCES accounts (guid),
        root_template_guid VARCHAR(32) NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS transactions (
        guid VARCHAR(32) PRIMARY KEY NOT NULL,
        currency_guid VARCHAR(32) NOT NULL REFERENCES commodities (guid),
        num VARCHAR(2048) NOT NULL,
        post_date TIMESTAMP,
        enter_date TIMESTAMP,
        description VARCHAR(2048)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS splits (
        guid VARCHAR(32) PRIMARY KEY NOT NULL,
        tx_guid VARCHAR(32) NOT NULL REFERENCES transactions (guid),
        account_guid VARCHAR(32) NOT NULL REFERENCES accounts (guid),
        memo VARCHAR(2048) NOT NULL,
        action VARCHAR(2048) NOT NULL,
        reconcile_state VARCHAR(1) NOT NULL,
        reconcile_date TIMESTAMP,
        value_num BIGINT NOT NULL,
        value_denom BIGINT NOT NULL,
        quantity_num BIGINT NOT NULL,
        quantity_denom BIGINT NOT NULL,
        lot_guid VARCHAR(32)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS prices (
        guid VARCHAR(32) PRIMARY KEY NOT NULL,
        commodity_guid VARCHAR(32) NOT NULL REFERENCES commodities (guid),
        currency_guid VARCHAR(32) NOT NULL REFERENCES commodities (guid),
        date TIMESTAMP NOT NULL,
        source VARCHAR(2048),
        type VARCHAR(2048),
        value_num BIGINT NOT NULL,
        value_denom BIGINT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS budgets (
        guid VARCHAR(32) PRIMARY KEY NOT NULL,
        name VARCHAR(2048) NOT NULL,
        description VARCHAR(2048),
        num_periods INTEGER NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS budget_amounts (
        id {auto_id},
        budget_guid VARCHAR(32) NOT NULL REFERENCES budgets (guid),
        account_guid VARCHAR(32) NOT NULL REFERENCES accounts (guid),
        period_num INTEGER NOT NULL,
        amount_num BIGINT NOT NULL,
        amount_denom BIGINT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS gnucash_web_audit (
        id {auto_id},
        user_id INTEGER,
        action VARCHAR(16) NOT NULL,
        entity_type VARCHAR(32) NOT NULL,
        entity_guid VARCHAR(32) NOT NULL,
        old_values TEXT,
        new_values TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
)


def ensure_schema(engine: Engine) -> None:
    """Create the ledger tables that do not exist yet.

    Args:
        engine: SQLAlchemy engine for the GnuCash database.
    """
    auto_id = _AUTO_ID.get(engine.dialect.name, _AUTO_ID["sqlite"])
    with engine.begin() as conn:
        for statement in CREATE_TABLE_STATEMENTS:
            conn.exec_driver_sql(statement.format(auto_id=auto_id))


__all__ = ["CREATE_TABLE_STATEMENTS", "ensure_schema"]
