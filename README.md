# micacore

The data layer for a collateral-backed payment network. It provides record
types for users, tabs, guarantees, collateral events, user transactions and
withdrawals, along with the status enumerations they use. It also has the error
types for transaction processing and a migration that creates the PostgreSQL
schema. It depends only on the standard library.

## Install

```
pip install micacore
```

To run the tests:

```
pip install "micacore[test]"
pytest
```

## Modules

- `micacore.entities`
  - The enumerations, all `str`-valued: `CollateralEventType`, `SettlementStatus`,
    `TabStatus` and `WithdrawalStatus`.
  - `ENUM_TYPE_NAMES`, which maps each enumeration to the name of its database
    enum type, such as `tab_status`.
  - The dataclass records `User`, `Tab`, `Guarantee`, `CollateralEvent`,
    `UserTransaction` and `Withdrawal`. Each record names its table in `TABLE`
    and its key columns in `PRIMARY_KEY`. Amounts are held as decimal strings.
- `micacore.errors`
  - `TxProcessingError` is the base class. Its subclasses are `RpcError(source)`,
    `Utf8DecodeError(source)`, `TransactionNotFound()`, `InvalidTxType()` and
    `InvalidParams(message)`.
- `micacore.migration`
  - `up_statements()` and `down_statements()` return the SQL text, in the order it
    runs.
  - `Migration` has `up(connection)` and `down(connection)`.
  - `Migrator` lists its migrations with `migrations()`. Its `up` applies them
    oldest first and its `down` reverts them newest first.

## Records

```python
from datetime import datetime
from micacore.entities import Tab, TabStatus, SettlementStatus

now = datetime.now()
tab = Tab(
    id="0x1",
    user_address="0x" + "11" * 20,
    server_address="0x" + "22" * 20,
    start_ts=now,
    status=TabStatus.PENDING,
    settlement_status=SettlementStatus.PENDING,
    created_at=now,
    updated_at=now,
    ttl=3600,
)
assert Tab.TABLE == "Tabs"
assert TabStatus("OPEN") is TabStatus.OPEN
```

## Creating the schema

The statements are written for PostgreSQL:

- the four enum types;
- the `User`, `Tabs`, `Guarantee`, `UserTransaction`, `Withdrawal` and
  `CollateralEvent` tables, with their foreign keys;
- a check that `locked_collateral` never exceeds `collateral`;
- a unique index allowing at most one `PENDING` withdrawal per user;
- a unique index allowing at most one `REMUNERATE` event per tab.

`Migration.up` and `Migration.down` take any DB-API connection. They run every
statement on a single cursor and then commit. If a statement fails, they call
the connection's `rollback` (when it has one) and re-raise the error.

```python
from micacore.migration import Migrator, up_statements

for sql in up_statements():
    print(sql, end=";\n")

# with an open PostgreSQL DB-API connection `conn`:
# Migrator().up(conn)
```

## What this package does not do

This package does not connect to a database and has no command-line tool for
migrations; you supply the connection. It has no queries or repository
functions for the records. It does not encode or sign payment guarantees, has no
RPC client or server, and does not talk to an Ethereum node. The classes in
`micacore.errors` are exception types only; nothing in this package raises them.