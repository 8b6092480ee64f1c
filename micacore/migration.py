"""Database schema migration creating the core tables, enum types and constraints."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Sequence

from micacore.entities import (
    ENUM_TYPE_NAMES,
    CollateralEvent,
    CollateralEventType,
    Guarantee,
    SettlementStatus,
    Tab,
    TabStatus,
    User,
    UserTransaction,
    Withdrawal,
    WithdrawalStatus,
)

__all__ = ["up_statements", "down_statements", "Migration", "Migrator"]

_TEXT = "varchar"
_TIMESTAMP = "timestamp"
_INTEGER = "integer"
_BIGINT = "bigint"
_BOOLEAN = "boolean"


def _quote(name: str) -> str:
    return f'"{name}"'


@dataclass(frozen=True)
class _Column:
    name: str
    sql_type: str
    nullable: bool = False
    primary_key: bool = False

    def render(self) -> str:
        parts = [_quote(self.name), self.sql_type, "NULL" if self.nullable else "NOT NULL"]
        if self.primary_key:
            parts.append("PRIMARY KEY")
        return " ".join(parts)


@dataclass(frozen=True)
class _ForeignKey:
    name: str
    column: str
    ref_table: str
    ref_column: str
    on_delete: str | None = None
    on_update: str | None = None

    def render(self) -> str:
        text = (
            f"CONSTRAINT {_quote(self.name)} FOREIGN KEY ({_quote(self.column)}) "
            f"REFERENCES {_quote(self.ref_table)} ({_quote(self.ref_column)})"
        )
        if self.on_delete:
            text += f" ON DELETE {self.on_delete}"
        if self.on_update:
            text += f" ON UPDATE {self.on_update}"
        return text


def _enum_column_type(enum_cls: type[Enum]) -> str:
    return _quote(ENUM_TYPE_NAMES[enum_cls])


def _create_enum(enum_cls: type[Enum]) -> str:
    values = ", ".join(f"'{member.value}'" for member in enum_cls)
    return f"CREATE TYPE {_quote(ENUM_TYPE_NAMES[enum_cls])} AS ENUM ({values})"


def _create_table(
    table: str,
    columns: Iterable[_Column],
    primary_key: Sequence[str] = (),
    foreign_keys: Iterable[_ForeignKey] = (),
) -> str:
    items = [column.render() for column in columns]
    if primary_key:
        items.append(f"PRIMARY KEY ({', '.join(_quote(c) for c in primary_key)})")
    items.extend(fk.render() for fk in foreign_keys)
    body = ",\n    ".join(items)
    return f"CREATE TABLE IF NOT EXISTS {_quote(table)} (\n    {body}\n)"


def _user_table() -> str:
    return _create_table(
        User.TABLE,
        [
            _Column("address", _TEXT, primary_key=True),
            _Column("version", _INTEGER),
            _Column("created_at", _TIMESTAMP),
            _Column("updated_at", _TIMESTAMP),
            _Column("collateral", _TEXT),
            _Column("locked_collateral", _TEXT),
        ],
    )


def _tabs_table() -> str:
    return _create_table(
        Tab.TABLE,
        [
            _Column("id", _TEXT, primary_key=True),
            _Column("user_address", _TEXT),
            _Column("server_address", _TEXT),
            _Column("start_ts", _TIMESTAMP),
            _Column("status", _enum_column_type(TabStatus)),
            _Column("settlement_status", _enum_column_type(SettlementStatus)),
            _Column("ttl", _BIGINT),
            _Column("created_at", _TIMESTAMP),
            _Column("updated_at", _TIMESTAMP),
        ],
        foreign_keys=[
            _ForeignKey(
                "fk_tabs_user_address",
                "user_address",
                User.TABLE,
                "address",
                on_delete="RESTRICT",
                on_update="CASCADE",
            )
        ],
    )


def _guarantee_table() -> str:
    return _create_table(
        Guarantee.TABLE,
        [
            _Column("tab_id", _TEXT),
            _Column("req_id", _TEXT),
            _Column("from_address", _TEXT),
            _Column("to_address", _TEXT),
            _Column("value", _TEXT),
            _Column("start_ts", _TIMESTAMP),
            _Column("cert", _TEXT, nullable=True),
            _Column("created_at", _TIMESTAMP),
            _Column("updated_at", _TIMESTAMP),
        ],
        primary_key=("tab_id", "req_id"),
        foreign_keys=[
            _ForeignKey("fk_guarantee_tabs", "tab_id", Tab.TABLE, "id"),
            _ForeignKey("fk_guarantee_user_from", "from_address", User.TABLE, "address"),
        ],
    )


def _user_transaction_table() -> str:
    return _create_table(
        UserTransaction.TABLE,
        [
            _Column("tx_id", _TEXT, primary_key=True),
            _Column("user_address", _TEXT),
            _Column("recipient_address", _TEXT),
            _Column("amount", _TEXT),
            _Column("verified", _BOOLEAN),
            _Column("finalized", _BOOLEAN),
            _Column("failed", _BOOLEAN),
            _Column("created_at", _TIMESTAMP),
            _Column("updated_at", _TIMESTAMP),
        ],
        foreign_keys=[_ForeignKey("fk_user_tx_user", "user_address", User.TABLE, "address")],
    )


def _withdrawal_table() -> str:
    return _create_table(
        Withdrawal.TABLE,
        [
            _Column("id", _TEXT, primary_key=True),
            _Column("user_address", _TEXT),
            _Column("requested_amount", _TEXT),
            _Column("executed_amount", _TEXT),
            _Column("request_ts", _TIMESTAMP),
            _Column("status", _enum_column_type(WithdrawalStatus)),
            _Column("created_at", _TIMESTAMP),
            _Column("updated_at", _TIMESTAMP),
        ],
        foreign_keys=[
            _ForeignKey("fk_withdrawal_user", "user_address", User.TABLE, "address")
        ],
    )


def _collateral_event_table() -> str:
    return _create_table(
        CollateralEvent.TABLE,
        [
            _Column("id", _TEXT, primary_key=True),
            _Column("user_address", _TEXT),
            _Column("amount", _TEXT),
            _Column("event_type", _enum_column_type(CollateralEventType)),
            _Column("tab_id", _TEXT, nullable=True),
            _Column("req_id", _TEXT, nullable=True),
            _Column("tx_id", _TEXT, nullable=True),
            _Column("created_at", _TIMESTAMP),
        ],
        foreign_keys=[
            _ForeignKey("fk_collateral_user", "user_address", User.TABLE, "address")
        ],
    )


def up_statements() -> list[str]:
    """SQL statements that create the schema, in execution order."""
    enums = [
        _create_enum(enum_cls)
        for enum_cls in (CollateralEventType, SettlementStatus, TabStatus, WithdrawalStatus)
    ]
    return [
        *enums,
        _user_table(),
        'ALTER TABLE "User" ADD CONSTRAINT user_locked_not_greater_than_total '
        "CHECK ((locked_collateral::numeric) <= (collateral::numeric))",
        _tabs_table(),
        _guarantee_table(),
        _user_transaction_table(),
        _withdrawal_table(),
        # At most one pending withdrawal per user.
        'CREATE UNIQUE INDEX uniq_user_pending_withdrawal ON "Withdrawal" (user_address) '
        "WHERE status = 'PENDING'",
        _collateral_event_table(),
        'CREATE UNIQUE INDEX uniq_tab_remunerate_event ON "CollateralEvent" (tab_id) '
        "WHERE event_type = 'REMUNERATE'",
    ]


def down_statements() -> list[str]:
    """SQL statements that remove the schema, in execution order."""
    tables = [
        CollateralEvent.TABLE,
        Withdrawal.TABLE,
        UserTransaction.TABLE,
        Guarantee.TABLE,
        Tab.TABLE,
        User.TABLE,
    ]
    return [
        *(f"DROP TABLE {_quote(table)}" for table in tables),
        'ALTER TABLE "User" DROP CONSTRAINT IF EXISTS user_locked_not_greater_than_total',
        f"DROP TYPE IF EXISTS {_quote(ENUM_TYPE_NAMES[WithdrawalStatus])}",
        "DROP INDEX IF EXISTS uniq_user_pending_withdrawal",
        f"DROP TYPE IF EXISTS {_quote(ENUM_TYPE_NAMES[TabStatus])}",
        f"DROP TYPE IF EXISTS {_quote(ENUM_TYPE_NAMES[SettlementStatus])}",
        f"DROP TYPE IF EXISTS {_quote(ENUM_TYPE_NAMES[CollateralEventType])}",
        "DROP INDEX IF EXISTS uniq_tab_remunerate_event",
    ]


def _execute_all(connection: Any, statements: Iterable[str]) -> None:
    """Run statements on a DB-API connection and commit; roll back on failure."""
    cursor = connection.cursor()
    try:
        for statement in statements:
            cursor.execute(statement)
    except BaseException:
        rollback = getattr(connection, "rollback", None)
        if rollback is not None:
            rollback()
        raise
    finally:
        cursor.close()
    connection.commit()


class Migration:
    """The initial migration creating every table."""

    name = "m20250901_000001_create_table"

    def up(self, connection: Any) -> None:
        """Create the schema on ``connection``."""
        _execute_all(connection, up_statements())

    def down(self, connection: Any) -> None:
        """Remove the schema from ``connection``."""
        _execute_all(connection, down_statements())

    def __repr__(self) -> str:
        return f"Migration({self.name!r})"


class Migrator:
    """Applies or reverts the known migrations in order."""

    def migrations(self) -> list[Migration]:
        """All migrations, oldest first."""
        return [Migration()]

    def up(self, connection: Any) -> None:
        """Apply every migration, oldest first."""
        for migration in self.migrations():
            migration.up(connection)

    def down(self, connection: Any) -> None:
        """Revert every migration, newest first."""
        for migration in reversed(self.migrations()):
            migration.down(connection)