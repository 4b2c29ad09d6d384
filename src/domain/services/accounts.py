"""Lifecycle rules for re-parenting and deleting accounts."""

from src.domain.constants import ROOT_ACCOUNT_TYPE
from src.domain.exceptions import AccountDeletionError, InvalidAccountMoveError


def ensure_valid_move(
    account_guid: str,
    new_parent_guid: str,
    parents: dict[str, str | None],
    account_type: str | None = None,
) -> None:
    """Check that moving an account keeps the tree acyclic.

    Args:
        account_guid: Account being moved.
        new_parent_guid: Requested new parent.
        parents: Mapping of every known account GUID to its parent GUID.
        account_type: Type of the moved account, when known.

    Raises:
        InvalidAccountMoveError: If the parent is missing, is the account
            itself or one of its descendants, or the account is a ROOT.
    """
    if account_guid not in parents:
        raise InvalidAccountMoveError(f"Account not found: {account_guid}")
    if account_type == ROOT_ACCOUNT_TYPE:
        raise InvalidAccountMoveError("Cannot move a root account")
    if new_parent_guid not in parents:
        raise InvalidAccountMoveError(
            f"Parent account not found: {new_parent_guid}"
        )
    if new_parent_guid == account_guid:
        raise InvalidAccountMoveError("Cannot move an account under itself")

    seen: set[str] = set()
    current = parents.get(new_parent_guid)
    while current is not None and current not in seen:
        if current == account_guid:
            raise InvalidAccountMoveError(
                "Cannot move an account under one of its descendants"
            )
        seen.add(current)
        current = parents.get(current)


def ensure_deletable(account_guid: str, split_count: int, child_count: int):
    """Refuse deletion of accounts that still carry splits or children."""
    if split_count > 0:
        raise AccountDeletionError(
            f"Account {account_guid} has {split_count} splits"
        )
    if child_count > 0:
        raise AccountDeletionError(
            f"Account {account_guid} has {child_count} child accounts"
        )


__all__ = ["ensure_valid_move", "ensure_deletable"]
