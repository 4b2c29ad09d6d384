"""SQLAlchemy-backed read access to a GnuCash book."""

from collections import defaultdict
from datetime import datetime

from sqlalchemy import bindparam, text

from src.application.ports.book_scope import BookScopePort
from src.application.ports.database import DatabaseEnginePort
from src.application.ports.prices import PriceRepositoryPort
from src.application.ports.snapshot import BookSnapshotPort
from src.domain.constants import CURRENCY_NAMESPACE
from src.domain.models.ledger import (
    BookSnapshot,
    Budget,
    BudgetAmount,
    Commodity,
    Price,
)
from src.domain.models.numeric import GncNumeric
from src.domain.services.dates import format_sql_timestamp, parse_timestamp
from src.domain.services.hierarchy import collect_descendants
from src.infrastructure.gnucash_rows import (
    account_from_row,
    book_from_row,
    commodity_from_row,
    price_from_row,
    split_from_row,
    transaction_from_row,
)

# UNION (not UNION ALL) so a cyclic parent chain terminates.
BOOK_ACCOUNTS_CTE = """
WITH RECURSIVE book_accounts(guid) AS (
    SELECT guid FROM accounts WHERE guid = :root_guid
    UNION
    SELECT a.guid
    FROM accounts a
    JOIN book_accounts b ON a.parent_guid = b.guid
)
"""

BOOK_TRANSACTIONS_SUBQUERY = """
SELECT s.tx_guid
FROM splits s
JOIN book_accounts b ON b.guid = s.account_guid
"""

COMMODITY_COLUMNS = """
guid, namespace, mnemonic, fullname, cusip, fraction,
quote_flag, quote_source, quote_tz
"""

PRICE_COLUMNS = """
guid, commodity_guid, currency_guid, date, source, type,
value_num, value_denom
"""


class SqlAlchemyGnuCashRepository(
    PriceRepositoryPort,
    BookScopePort,
    BookSnapshotPort,
):
    """Repository backed by SQLAlchemy for GnuCash book reads."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the GnuCash engine.
        """
        self._db_port = db_port

    def fetch_latest_price(
        self,
        commodity_guid: str,
        currency_guid: str,
        as_of: datetime,
    ) -> Price | None:
        query = text(
            f"""
            SELECT {PRICE_COLUMNS}
            FROM prices
            WHERE commodity_guid = :commodity_guid
              AND currency_guid = :currency_guid
              AND date <= :as_of
            ORDER BY date DESC, guid DESC
            LIMIT 1
            """
        )
        params = {
            "commodity_guid": commodity_guid,
            "currency_guid": currency_guid,
            "as_of": format_sql_timestamp(as_of),
        }
        engine = self._db_port.get_gnucash_engine()
        with engine.connect() as conn:
            row = conn.execute(query, params).first()
        return price_from_row(row) if row else None

    def fetch_commodity(self, guid: str) -> Commodity | None:
        query = text(
            f"SELECT {COMMODITY_COLUMNS} FROM commodities WHERE guid = :guid"
        )
        engine = self._db_port.get_gnucash_engine()
        with engine.connect() as conn:
            row = conn.execute(query, {"guid": guid}).first()
        return commodity_from_row(row) if row else None

    def fetch_currency_by_mnemonic(self, mnemonic: str) -> Commodity | None:
        query = text(
            f"""
            SELECT {COMMODITY_COLUMNS}
            FROM commodities
            WHERE mnemonic = :mnemonic AND namespace = :namespace
            LIMIT 1
            """
        )
        params = {"mnemonic": mnemonic, "namespace": CURRENCY_NAMESPACE}
        engine = self._db_port.get_gnucash_engine()
        with engine.connect() as conn:
            row = conn.execute(query, params).first()
        return commodity_from_row(row) if row else None

    def fetch_currencies(self) -> list[Commodity]:
        query = text(
            f"""
            SELECT {COMMODITY_COLUMNS}
            FROM commodities
            WHERE namespace = :namespace
            ORDER BY mnemonic
            """
        )
        engine = self._db_port.get_gnucash_engine()
        with engine.connect() as conn:
            rows = conn.execute(
                query, {"namespace": CURRENCY_NAMESPACE}
            ).all()
        return [commodity_from_row(row) for row in rows]

    def fetch_default_root_guid(self) -> str | None:
        query = text(
            "SELECT root_account_guid FROM books ORDER BY guid LIMIT 1"
        )
        engine = self._db_port.get_gnucash_engine()
        with engine.connect() as conn:
            row = conn.execute(query).first()
        return row.root_account_guid if row else None

    def fetch_account_guids(self, root_guid: str) -> list[str]:
        query = text(
            BOOK_ACCOUNTS_CTE
            + """
            SELECT a.guid, a.name, a.parent_guid
            FROM accounts a
            JOIN book_accounts b ON b.guid = a.guid
            """
        )
        engine = self._db_port.get_gnucash_engine()
        with engine.connect() as conn:
            rows = conn.execute(query, {"root_guid": root_guid}).all()
        if not rows:
            return []
        return collect_descendants(rows, root_guid)

    def fetch_earliest_post_date(self, root_guid: str) -> datetime | None:
        query = text(
            BOOK_ACCOUNTS_CTE
            + f"""
            SELECT MIN(t.post_date) AS earliest
            FROM transactions t
            WHERE t.guid IN ({BOOK_TRANSACTIONS_SUBQUERY})
            """
        )
        engine = self._db_port.get_gnucash_engine()
        with engine.connect() as conn:
            row = conn.execute(query, {"root_guid": root_guid}).first()
        if row is None or row.earliest is None:
            return None
        return parse_timestamp(row.earliest)

    def fetch_book_snapshot(self, root_guid: str) -> BookSnapshot:
        """Read every entity of the book rooted at ``root_guid``.

        Transactions are those with at least one split in the book's
        accounts. Commodities are the ones referenced by accounts,
        transactions and the prices quoted in those commodities.

        Raises:
            LookupError: If no book has that root account.
        """
        params = {"root_guid": root_guid}
        engine = self._db_port.get_gnucash_engine()
        with engine.connect() as conn:
            book_row = conn.execute(
                text(
                    """
                    SELECT guid, root_account_guid, root_template_guid
                    FROM books
                    WHERE root_account_guid = :root_guid
                    """
                ),
                params,
            ).first()
            if book_row is None:
                raise LookupError(f"No book with root account {root_guid}")

            account_rows = conn.execute(
                text(
                    BOOK_ACCOUNTS_CTE
                    + """
                    SELECT a.guid, a.name, a.account_type, a.commodity_guid,
                           a.commodity_scu, a.non_std_scu, a.parent_guid,
                           a.code, a.description, a.hidden, a.placeholder
                    FROM accounts a
                    JOIN book_accounts b ON b.guid = a.guid
                    ORDER BY a.name, a.guid
                    """
                ),
                params,
            ).all()
            split_rows = conn.execute(
                text(
                    BOOK_ACCOUNTS_CTE
                    + f"""
                    SELECT s.guid, s.tx_guid, s.account_guid, s.memo,
                           s.action, s.reconcile_state, s.reconcile_date,
                           s.value_num, s.value_denom, s.quantity_num,
                           s.quantity_denom, s.lot_guid
                    FROM splits s
                    WHERE s.tx_guid IN ({BOOK_TRANSACTIONS_SUBQUERY})
                    ORDER BY s.tx_guid, s.guid
                    """
                ),
                params,
            ).all()
            transaction_rows = conn.execute(
                text(
                    BOOK_ACCOUNTS_CTE
                    + f"""
                    SELECT t.guid, t.currency_guid, t.num, t.post_date,
                           t.enter_date, t.description
                    FROM transactions t
                    WHERE t.guid IN ({BOOK_TRANSACTIONS_SUBQUERY})
                    ORDER BY t.post_date, t.guid
                    """
                ),
                params,
            ).all()

            accounts = [account_from_row(row) for row in account_rows]
            splits_by_tx = defaultdict(list)
            for row in split_rows:
                splits_by_tx[row.tx_guid].append(split_from_row(row))
            transactions = [
                transaction_from_row(row, splits_by_tx.get(row.guid, []))
                for row in transaction_rows
            ]

            referenced = {
                account.commodity_guid
                for account in accounts
                if account.commodity_guid
            }
            referenced.update(tx.currency_guid for tx in transactions)

            prices = self._fetch_prices_for(conn, referenced)
            for price in prices:
                referenced.add(price.commodity_guid)
                referenced.add(price.currency_guid)
            commodities = self._fetch_commodities(conn, referenced)
            budgets = self._fetch_budgets(conn, params)

        return BookSnapshot(
            book=book_from_row(book_row),
            commodities=commodities,
            accounts=accounts,
            transactions=transactions,
            prices=prices,
            budgets=budgets,
        )

    @staticmethod
    def _fetch_prices_for(conn, commodity_guids: set[str]) -> list[Price]:
        if not commodity_guids:
            return []
        query = text(
            f"""
            SELECT {PRICE_COLUMNS}
            FROM prices
            WHERE commodity_guid IN :commodity_guids
               OR currency_guid IN :currency_guids
            ORDER BY date, guid
            """
        ).bindparams(
            bindparam("commodity_guids", expanding=True),
            bindparam("currency_guids", expanding=True),
        )
        guids = sorted(commodity_guids)
        rows = conn.execute(
            query, {"commodity_guids": guids, "currency_guids": guids}
        ).all()
        return [price_from_row(row) for row in rows]

    @staticmethod
    def _fetch_commodities(conn, guids: set[str]) -> list[Commodity]:
        if not guids:
            return []
        query = text(
            f"""
            SELECT {COMMODITY_COLUMNS}
            FROM commodities
            WHERE guid IN :guids
            ORDER BY namespace, mnemonic
            """
        ).bindparams(bindparam("guids", expanding=True))
        rows = conn.execute(query, {"guids": sorted(guids)}).all()
        return [commodity_from_row(row) for row in rows]

    @staticmethod
    def _fetch_budgets(conn, params: dict) -> list[Budget]:
        budget_rows = conn.execute(
            text(
                """
                SELECT guid, name, description, num_periods
                FROM budgets
                ORDER BY name, guid
                """
            )
        ).all()
        if not budget_rows:
            return []
        amount_rows = conn.execute(
            text(
                BOOK_ACCOUNTS_CTE
                + """
                SELECT ba.budget_guid, ba.account_guid, ba.period_num,
                       ba.amount_num, ba.amount_denom
                FROM budget_amounts ba
                JOIN book_accounts b ON b.guid = ba.account_guid
                ORDER BY ba.budget_guid, ba.account_guid, ba.period_num
                """
            ),
            params,
        ).all()
        amounts = defaultdict(list)
        for row in amount_rows:
            denom = int(row.amount_denom or 0)
            amounts[row.budget_guid].append(
                BudgetAmount(
                    budget_guid=row.budget_guid,
                    account_guid=row.account_guid,
                    period_num=int(row.period_num),
                    amount=GncNumeric(int(row.amount_num or 0), denom)
                    if denom
                    else GncNumeric(0, 1),
                )
            )
        return [
            Budget(
                guid=row.guid,
                name=row.name,
                num_periods=int(row.num_periods),
                description=row.description,
                amounts=amounts.get(row.guid, []),
            )
            for row in budget_rows
        ]


__all__ = ["SqlAlchemyGnuCashRepository"]
