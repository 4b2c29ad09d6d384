"""SQLAlchemy unit of work writing ledger entities to the GnuCash tables."""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import text
from sqlalchemy.engine import Connection

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.ledger import LedgerUnitOfWorkPort, LedgerWriterPort
from src.domain.models.ledger import (
    Account,
    Book,
    Budget,
    Commodity,
    Price,
    Transaction,
)
from src.infrastructure.gnucash_rows import (
    account_from_row,
    account_params,
    commodity_from_row,
    commodity_params,
    price_params,
    split_params,
    transaction_params,
)
from src.infrastructure.logging.logger import get_app_logger

SELECT_COMMODITIES_SQL = text(
    """
    SELECT guid, namespace, mnemonic, fullname, cusip, fraction,
           quote_flag, quote_source, quote_tz
    FROM commodities
    """
)

SELECT_ACCOUNT_PARENTS_SQL = text("SELECT guid, parent_guid FROM accounts")

SELECT_ACCOUNT_SQL = text(
    """
    SELECT guid, name, account_type, commodity_guid, commodity_scu,
           non_std_scu, parent_guid, code, description, hidden, placeholder
    FROM accounts
    WHERE guid = :guid
    """
)

COUNT_SPLITS_SQL = text(
    "SELECT COUNT(*) FROM splits WHERE account_guid = :guid"
)

COUNT_CHILDREN_SQL = text(
    "SELECT COUNT(*) FROM accounts WHERE parent_guid = :guid"
)

INSERT_COMMODITY_SQL = text(
    """
    INSERT INTO commodities (
        guid, namespace, mnemonic, fullname, cusip, fraction,
        quote_flag, quote_source, quote_tz
    )
    VALUES (
        :guid, :namespace, :mnemonic, :fullname, :cusip, :fraction,
        :quote_flag, :quote_source, :quote_tz
    )
    """
)

INSERT_ACCOUNT_SQL = text(
    """
    INSERT INTO accounts (
        guid, name, account_type, commodity_guid, commodity_scu,
        non_std_scu, parent_guid, code, description, hidden, placeholder
    )
    VALUES (
        :guid, :name, :account_type, :commodity_guid, :commodity_scu,
        :non_std_scu, :parent_guid, :code, :description, :hidden,
        :placeholder
    )
    """
)

INSERT_BOOK_SQL = text(
    """
    INSERT INTO books (guid, root_account_guid, root_template_guid)
    VALUES (:guid, :root_account_guid, :root_template_guid)
    """
)

INSERT_TRANSACTION_SQL = text(
    """
    INSERT INTO transactions (
        guid, currency_guid, num, post_date, enter_date, description
    )
    VALUES (
        :guid, :currency_guid, :num, :post_date, :enter_date, :description
    )
    """
)

INSERT_SPLIT_SQL = text(
    """
    INSERT INTO splits (
        guid, tx_guid, account_guid, memo, action, reconcile_state,
        reconcile_date, value_num, value_denom, quantity_num,
        quantity_denom, lot_guid
    )
    VALUES (
        :guid, :tx_guid, :account_guid, :memo, :action, :reconcile_state,
        :reconcile_date, :value_num, :value_denom, :quantity_num,
        :quantity_denom, :lot_guid
    )
    """
)

INSERT_PRICE_SQL = text(
    """
    INSERT INTO prices (
        guid, commodity_guid, currency_guid, date, source, type,
        value_num, value_denom
    )
    VALUES (
        :guid, :commodity_guid, :currency_guid, :date, :source, :type,
        :value_num, :value_denom
    )
    """
)

INSERT_BUDGET_SQL = text(
    """
    INSERT INTO budgets (guid, name, description, num_periods)
    VALUES (:guid, :name, :description, :num_periods)
    """
)

INSERT_BUDGET_AMOUNT_SQL = text(
    """
    INSERT INTO budget_amounts (
        budget_guid, account_guid, period_num, amount_num, amount_denom
    )
    VALUES (
        :budget_guid, :account_guid, :period_num, :amount_num, :amount_denom
    )
    """
)

UPDATE_ACCOUNT_PARENT_SQL = text(
    "UPDATE accounts SET parent_guid = :parent_guid WHERE guid = :guid"
)

DELETE_ACCOUNT_SQL = text("DELETE FROM accounts WHERE guid = :guid")


class SqlAlchemyLedgerWriter(LedgerWriterPort):
    """Ledger writes bound to one open connection and transaction."""

    def __init__(self, conn: Connection, logger=None) -> None:
        self._conn = conn
        self._logger = logger or get_app_logger()

    def fetch_commodities(self) -> list[Commodity]:
        rows = self._conn.execute(SELECT_COMMODITIES_SQL).all()
        return [commodity_from_row(row) for row in rows]

    def fetch_account_parents(self) -> dict[str, str | None]:
        rows = self._conn.execute(SELECT_ACCOUNT_PARENTS_SQL).all()
        return {row.guid: row.parent_guid for row in rows}

    def fetch_account(self, guid: str) -> Account | None:
        row = self._conn.execute(SELECT_ACCOUNT_SQL, {"guid": guid}).first()
        return account_from_row(row) if row else None

    def count_splits(self, account_guid: str) -> int:
        return int(
            self._conn.execute(
                COUNT_SPLITS_SQL, {"guid": account_guid}
            ).scalar_one()
        )

    def count_children(self, account_guid: str) -> int:
        return int(
            self._conn.execute(
                COUNT_CHILDREN_SQL, {"guid": account_guid}
            ).scalar_one()
        )

    def insert_commodities(self, commodities: list[Commodity]) -> int:
        return self._insert_many(
            INSERT_COMMODITY_SQL,
            [commodity_params(item) for item in commodities],
            "commodities",
        )

    def insert_accounts(self, accounts: list[Account]) -> int:
        # Written row by row in the given order; parents must come first.
        for account in accounts:
            self._conn.execute(INSERT_ACCOUNT_SQL, account_params(account))
        if accounts:
            self._logger.debug(f"Inserted {len(accounts)} accounts")
        return len(accounts)

    def insert_book(self, book: Book) -> None:
        self._conn.execute(
            INSERT_BOOK_SQL,
            {
                "guid": book.guid,
                "root_account_guid": book.root_account_guid,
                "root_template_guid": book.root_template_guid
                or book.root_account_guid,
            },
        )

    def insert_transactions(self, transactions: list[Transaction]) -> int:
        count = self._insert_many(
            INSERT_TRANSACTION_SQL,
            [transaction_params(item) for item in transactions],
            "transactions",
        )
        self._insert_many(
            INSERT_SPLIT_SQL,
            [
                split_params(split)
                for item in transactions
                for split in item.splits
            ],
            "splits",
        )
        return count

    def insert_prices(self, prices: list[Price]) -> int:
        return self._insert_many(
            INSERT_PRICE_SQL,
            [price_params(item) for item in prices],
            "prices",
        )

    def insert_budgets(self, budgets: list[Budget]) -> int:
        count = self._insert_many(
            INSERT_BUDGET_SQL,
            [
                {
                    "guid": budget.guid,
                    "name": budget.name,
                    "description": budget.description,
                    "num_periods": budget.num_periods,
                }
                for budget in budgets
            ],
            "budgets",
        )
        self._insert_many(
            INSERT_BUDGET_AMOUNT_SQL,
            [
                {
                    "budget_guid": amount.budget_guid,
                    "account_guid": amount.account_guid,
                    "period_num": amount.period_num,
                    "amount_num": amount.amount.num,
                    "amount_denom": amount.amount.denom,
                }
                for budget in budgets
                for amount in budget.amounts
            ],
            "budget amounts",
        )
        return count

    def update_account_parent(self, guid: str, parent_guid: str) -> None:
        self._conn.execute(
            UPDATE_ACCOUNT_PARENT_SQL,
            {"guid": guid, "parent_guid": parent_guid},
        )

    def delete_account(self, guid: str) -> None:
        self._conn.execute(DELETE_ACCOUNT_SQL, {"guid": guid})

    def _insert_many(self, statement, params: list[dict], label: str) -> int:
        if not params:
            return 0
        self._conn.execute(statement, params)
        self._logger.debug(f"Inserted {len(params)} {label}")
        return len(params)


class SqlAlchemyLedgerUnitOfWork(LedgerUnitOfWorkPort):
    """Opens ``engine.begin()`` scopes yielding a ledger writer."""

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        """Initialize the unit of work.

        Args:
            db_port: Port providing access to the GnuCash engine.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._logger = logger or get_app_logger()

    @contextmanager
    def begin(self) -> Iterator[SqlAlchemyLedgerWriter]:
        engine = self._db_port.get_gnucash_engine()
        with engine.begin() as conn:
            yield SqlAlchemyLedgerWriter(conn, self._logger)


__all__ = ["SqlAlchemyLedgerWriter", "SqlAlchemyLedgerUnitOfWork"]
