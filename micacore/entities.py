"""Database record types and the enumerations they use."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import ClassVar

__all__ = [
    "CollateralEventType",
    "SettlementStatus",
    "TabStatus",
    "WithdrawalStatus",
    "ENUM_TYPE_NAMES",
    "User",
    "Tab",
    "Guarantee",
    "CollateralEvent",
    "UserTransaction",
    "Withdrawal",
]


class CollateralEventType(str, Enum):
    """Kinds of collateral ledger events."""

    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"
    RESERVE = "RESERVE"
    CANCEL_RESERVE = "CANCEL_RESERVE"
    UNLOCK = "UNLOCK"
    REMUNERATE = "REMUNERATE"


class SettlementStatus(str, Enum):
    """Settlement state of a tab."""

    PENDING = "PENDING"
    SETTLED = "SETTLED"
    FAILED = "FAILED"
    REMUNERATED = "REMUNERATED"


class TabStatus(str, Enum):
    """Lifecycle state of a tab."""

    PENDING = "PENDING"
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class WithdrawalStatus(str, Enum):
    """State of a withdrawal request."""

    PENDING = "PENDING"
    EXECUTED = "EXECUTED"
    CANCELLED = "CANCELLED"


# Names of the database enum types backing each enumeration.
ENUM_TYPE_NAMES: dict[type[Enum], str] = {
    CollateralEventType: "collateral_event_type",
    SettlementStatus: "settlement_status",
    TabStatus: "tab_status",
    WithdrawalStatus: "withdrawal_status",
}


@dataclass
class User:
    """A user and their collateral balances (decimal strings)."""

    TABLE: ClassVar[str] = "User"
    PRIMARY_KEY: ClassVar[tuple[str, ...]] = ("address",)

    address: str
    version: int
    created_at: datetime
    updated_at: datetime
    collateral: str
    locked_collateral: str


@dataclass
class Tab:
    """A payment tab between a user and a server."""

    TABLE: ClassVar[str] = "Tabs"
    PRIMARY_KEY: ClassVar[tuple[str, ...]] = ("id",)

    id: str
    user_address: str
    server_address: str
    start_ts: datetime
    status: TabStatus
    settlement_status: SettlementStatus
    created_at: datetime
    updated_at: datetime
    ttl: int


@dataclass
class Guarantee:
    """A guarantee issued for one request within a tab."""

    TABLE: ClassVar[str] = "Guarantee"
    PRIMARY_KEY: ClassVar[tuple[str, ...]] = ("tab_id", "req_id")

    tab_id: str
    req_id: str
    from_address: str
    to_address: str
    value: str
    start_ts: datetime
    cert: str
    created_at: datetime
    updated_at: datetime


@dataclass
class CollateralEvent:
    """A change to a user's collateral."""

    TABLE: ClassVar[str] = "CollateralEvent"
    PRIMARY_KEY: ClassVar[tuple[str, ...]] = ("id",)

    id: str
    user_address: str
    amount: str
    event_type: CollateralEventType
    tab_id: str | None
    req_id: str | None
    tx_id: str | None
    created_at: datetime


@dataclass
class UserTransaction:
    """A payment transaction observed for a user."""

    TABLE: ClassVar[str] = "UserTransaction"
    PRIMARY_KEY: ClassVar[tuple[str, ...]] = ("tx_id",)

    tx_id: str
    user_address: str
    recipient_address: str
    amount: str
    verified: bool
    finalized: bool
    failed: bool
    created_at: datetime
    updated_at: datetime


@dataclass
class Withdrawal:
    """A collateral withdrawal request."""

    TABLE: ClassVar[str] = "Withdrawal"
    PRIMARY_KEY: ClassVar[tuple[str, ...]] = ("id",)

    id: str
    user_address: str
    requested_amount: str
    executed_amount: str
    request_ts: datetime
    status: WithdrawalStatus
    created_at: datetime
    updated_at: datetime