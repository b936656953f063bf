"""
Account records -- the flat ledger input of the table engine.

Responsibility:
    Typed, immutable representation of one general-ledger account entry and
    the parser for its external (dict) shape.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  The ORM model in
    ``statement_kernel.models.account`` converts to ``AccountRecord`` before
    anything in the domain sees it.

Failure modes:
    - ``InvalidAccountRecordError`` when the external shape lacks an id or
      names an unknown account type.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from statement_kernel.exceptions import InvalidAccountRecordError


class AccountType(str, Enum):
    """Account-type buckets a statement groups its forests by."""

    CASH = "cash"
    ASSET = "asset"
    LIABILITY = "liability"
    CAPITAL = "capital"
    INCOME = "income"
    EXPENSE = "expense"
    OTHER_INCOME = "other_income"
    OTHER_EXPENSE = "other_expense"


# Keys of the external record shape that are not column values
_STRUCTURAL_KEYS = frozenset({"id", "subAccountId", "accountType"})


@dataclass(frozen=True)
class AccountRecord:
    """
    One ledger account with an optional parent reference.

    ``fields`` is the open-ended column-key -> raw value mapping.  Values are
    interpreted against the column schema at render time, never here.
    """

    account_id: str
    parent_id: str | None
    account_type: AccountType
    fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.fields, MappingProxyType):
            object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def value(self, key: str) -> Any:
        """Raw value for a column key, or None when the record has none."""
        return self.fields.get(key)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AccountRecord:
        """
        Parse the external ``{id, subAccountId, accountType, ...}`` shape.

        Raises:
            InvalidAccountRecordError: missing id or unknown account type.
        """
        raw_id = data.get("id")
        if raw_id is None or str(raw_id) == "":
            raise InvalidAccountRecordError(None, "missing id")
        account_id = str(raw_id)

        try:
            account_type = AccountType(data.get("accountType"))
        except ValueError:
            raise InvalidAccountRecordError(
                account_id, f"unknown account type {data.get('accountType')!r}",
            ) from None

        parent = data.get("subAccountId")
        parent_id = str(parent) if parent not in (None, "") else None

        return cls(
            account_id=account_id,
            parent_id=parent_id,
            account_type=account_type,
            fields={k: v for k, v in data.items() if k not in _STRUCTURAL_KEYS},
        )
