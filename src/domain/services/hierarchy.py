"""Account tree construction and balance roll-up."""

from collections import defaultdict
from collections.abc import Iterable
from logging import Logger

from src.domain.constants import ROOT_ACCOUNT_TYPE
from src.domain.models.accounts import AccountBalance, LineItem
from src.domain.models.numeric import sum_numerics


def _sort_key(account) -> tuple[str, str]:
    return ((account.name or "").lower(), account.guid)


def _children_map(accounts: list) -> dict[str, list]:
    known = {account.guid for account in accounts}
    children: dict[str, list] = defaultdict(list)
    for account in accounts:
        if account.parent_guid in known:
            children[account.parent_guid].append(account)
    for siblings in children.values():
        siblings.sort(key=_sort_key)
    return children


class _TreeBuilder:
    """Depth-first builder guarded against cyclic parent pointers.

    The walk keeps its own stack so arbitrarily deep account chains roll up
    without touching the interpreter's recursion limit.
    """

    def __init__(self, children: dict[str, list], logger: Logger | None):
        self._children = children
        self._logger = logger
        self._path: set[str] = set()
        self.visited: set[str] = set()

    def _enter(self, account: AccountBalance, depth: int) -> tuple:
        self._path.add(account.guid)
        self.visited.add(account.guid)
        pending = iter(self._children.get(account.guid, []))
        return account, depth, pending, []

    def build(self, account: AccountBalance, depth: int) -> LineItem:
        stack = [self._enter(account, depth)]
        while True:
            current, level, pending, items = stack[-1]
            child = next(pending, None)
            if child is not None:
                if child.guid in self._path or child.guid in self.visited:
                    if self._logger:
                        self._logger.warning(
                            "Skipping account already in the tree "
                            f"(cyclic parent): {child.guid}"
                        )
                    continue
                stack.append(self._enter(child, level + 1))
                continue

            stack.pop()
            self._path.discard(current.guid)
            item = _line_item(current, level, items)
            if not stack:
                return item
            stack[-1][3].append(item)


def _line_item(
    account: AccountBalance,
    depth: int,
    items: list[LineItem],
) -> LineItem:
    amount = sum_numerics([account.balance, *(i.amount for i in items)])
    previous = None
    if account.previous_balance is not None:
        previous = sum_numerics(
            [
                account.previous_balance,
                *(
                    item.previous_amount
                    for item in items
                    if item.previous_amount is not None
                ),
            ]
        )
    return LineItem(
        guid=account.guid,
        name=account.name,
        amount=amount,
        depth=depth,
        children=items,
        previous_amount=previous,
    )


def build_hierarchy(
    accounts: Iterable[AccountBalance],
    root_guid: str | None = None,
    logger: Logger | None = None,
) -> list[LineItem]:
    """Build rolled-up line items from a flat list of accounts.

    Each item's amount is the account's own balance plus the amounts of
    all its children. Accounts whose parent is not in the input become
    top-level items, so a slice of the tree still renders.

    Args:
        accounts: Accounts with their own (non-recursive) balances.
        root_guid: Optional root whose children form depth 0; the root
            itself is not returned.
        logger: Optional logger for cyclic-parent warnings.

    Returns:
        list[LineItem]: Top-level items ordered by name.
    """
    rows = list(accounts)
    by_guid = {account.guid: account for account in rows}
    children = _children_map(rows)

    tops = [
        account
        for account in rows
        if account.guid != root_guid and account.parent_guid not in by_guid
    ]
    if root_guid is not None:
        tops.extend(children.get(root_guid, []))
    tops.sort(key=_sort_key)

    builder = _TreeBuilder(children, logger)
    if root_guid is not None:
        builder.visited.add(root_guid)
    items = []
    for account in tops:
        if account.guid not in builder.visited:
            items.append(builder.build(account, 0))

    # Accounts reachable only through a parent cycle.
    stranded = sorted(
        (account for account in rows if account.guid not in builder.visited),
        key=_sort_key,
    )
    for account in stranded:
        if account.guid in builder.visited:
            continue
        if logger:
            logger.warning(
                f"Account {account.guid} is part of a parent cycle; "
                "listing it as a top-level item"
            )
        items.append(builder.build(account, 0))
    return items


def build_account_path_map(accounts: Iterable) -> dict[str, str]:
    """Map each account GUID to its colon-separated full name.

    ROOT accounts contribute no path segment. A parent cycle stops the walk
    at the first repeated account.

    Args:
        accounts: Objects with ``guid``, ``name``, ``account_type`` and
            ``parent_guid``.

    Returns:
        dict[str, str]: e.g. ``{"...": "Assets:Current Assets:Checking"}``.
    """
    rows = list(accounts)
    by_guid = {account.guid: account for account in rows}
    paths: dict[str, str] = {}
    for account in rows:
        names: list[str] = []
        seen: set[str] = set()
        current = account
        while current is not None and current.guid not in seen:
            seen.add(current.guid)
            if current.account_type != ROOT_ACCOUNT_TYPE:
                names.append(current.name)
            current = by_guid.get(current.parent_guid)
        paths[account.guid] = ":".join(reversed(names))
    return paths


def collect_descendants(
    accounts: Iterable,
    root_guid: str,
    include_root: bool = True,
) -> list[str]:
    """Return the GUIDs under ``root_guid`` in breadth-first order."""
    children = _children_map(list(accounts))
    ordered = [root_guid] if include_root else []
    seen = {root_guid}
    queue = [root_guid]
    while queue:
        current = queue.pop(0)
        for child in children.get(current, []):
            if child.guid in seen:
                continue
            seen.add(child.guid)
            ordered.append(child.guid)
            queue.append(child.guid)
    return ordered


__all__ = ["build_hierarchy", "build_account_path_map", "collect_descendants"]
