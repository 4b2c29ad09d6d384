"""SQLAlchemy-backed repository for per-account balances."""

from collections import defaultdict
from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy import bindparam, text

from src.application.ports.accounts_repository import AccountsRepositoryPort
from src.application.ports.database import DatabaseEnginePort
from src.domain.models.accounts import AccountBalance
from src.domain.models.numeric import GncNumeric, sum_numerics
from src.domain.services.dates import format_sql_timestamp


class SqlAlchemyAccountsRepository(AccountsRepositoryPort):
    """Repository summing split quantities per account.

    Amounts are added as fractions in Python; SQL division is avoided
    because SQLite truncates integer division.
    """

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the GnuCash engine.
        """
        self._db_port = db_port

    def fetch_account_balances(
        self,
        account_guids: list[str] | None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[AccountBalance]:
        """Return accounts with the sum of their own split quantities.

        Args:
            account_guids: Optional restriction to a set of accounts. An
                empty list returns no accounts.
            start_date: Optional inclusive lower bound for post dates.
            end_date: Optional inclusive upper bound for post dates.

        Returns:
            list[AccountBalance]: One row per account, zero when idle.
        """
        if account_guids is not None and not account_guids:
            return []
        accounts_query = self._build_accounts_query(account_guids)
        splits_query = self._build_splits_query(
            account_guids, start_date, end_date
        )
        params = self._build_date_params(start_date, end_date)
        if account_guids is not None:
            params["guids"] = list(account_guids)

        engine = self._db_port.get_gnucash_engine()
        with engine.connect() as conn:
            account_rows = conn.execute(accounts_query, params).all()
            split_rows = conn.execute(splits_query, params).all()

        amounts = defaultdict(list)
        for row in split_rows:
            denom = int(row.quantity_denom or 0)
            if denom == 0:
                continue
            amounts[row.account_guid].append(
                GncNumeric(int(row.quantity_num or 0), denom)
            )

        return [
            AccountBalance(
                guid=row.guid,
                name=row.name,
                account_type=row.account_type,
                parent_guid=row.parent_guid,
                balance=sum_numerics(amounts.get(row.guid, [])),
                commodity_guid=row.commodity_guid,
            )
            for row in account_rows
        ]

    @staticmethod
    def _build_date_params(
        start_date: date | None,
        end_date: date | None,
    ) -> dict:
        params: dict = {}
        if start_date:
            params["start_date"] = format_sql_timestamp(
                datetime.combine(start_date, time.min, timezone.utc)
            )
        if end_date:
            # Exclusive bound on the next day keeps the whole end date.
            params["end_date"] = format_sql_timestamp(
                datetime.combine(
                    end_date + timedelta(days=1), time.min, timezone.utc
                )
            )
        return params

    @staticmethod
    def _build_accounts_query(account_guids: list[str] | None):
        base_sql = """
        SELECT guid, name, account_type, parent_guid, commodity_guid
        FROM accounts
        """
        if account_guids is None:
            return text(base_sql)
        return text(base_sql + " WHERE guid IN :guids").bindparams(
            bindparam("guids", expanding=True)
        )

    @staticmethod
    def _build_splits_query(
        account_guids: list[str] | None,
        start_date: date | None,
        end_date: date | None,
    ):
        base_sql = """
        SELECT s.account_guid AS account_guid,
               s.quantity_num AS quantity_num,
               s.quantity_denom AS quantity_denom
        FROM splits s
        JOIN transactions t ON t.guid = s.tx_guid
        WHERE 1=1
        """
        if start_date:
            base_sql += " AND t.post_date >= :start_date"
        if end_date:
            base_sql += " AND t.post_date < :end_date"
        if account_guids is None:
            return text(base_sql)
        return text(base_sql + " AND s.account_guid IN :guids").bindparams(
            bindparam("guids", expanding=True)
        )


__all__ = ["SqlAlchemyAccountsRepository"]
