import dataclasses
from datetime import datetime

import pytest

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

NOW = datetime(2025, 1, 1, 12, 0, 0)


def _sample_entities():
    return [
        User(
            address="0xuser",
            version=0,
            created_at=NOW,
            updated_at=NOW,
            collateral="10",
            locked_collateral="0",
        ),
        Tab(
            id="0x1",
            user_address="0xuser",
            server_address="0xserver",
            start_ts=NOW,
            status=TabStatus("PENDING"),
            settlement_status=SettlementStatus("PENDING"),
            created_at=NOW,
            updated_at=NOW,
            ttl=3600,
        ),
        Guarantee(
            tab_id="0x1",
            req_id="0x0",
            from_address="0xa",
            to_address="0xb",
            value="5",
            start_ts=NOW,
            cert="{}",
            created_at=NOW,
            updated_at=NOW,
        ),
        CollateralEvent(
            id="e1",
            user_address="0xuser",
            amount="10",
            event_type=CollateralEventType("DEPOSIT"),
            tab_id=None,
            req_id=None,
            tx_id="0xtx",
            created_at=NOW,
        ),
        UserTransaction(
            tx_id="0xtx",
            user_address="0xuser",
            recipient_address="0xrecipient",
            amount="1",
            verified=False,
            finalized=False,
            failed=False,
            created_at=NOW,
            updated_at=NOW,
        ),
        Withdrawal(
            id="w1",
            user_address="0xuser",
            requested_amount="5",
            executed_amount="0",
            request_ts=NOW,
            status=WithdrawalStatus("PENDING"),
            created_at=NOW,
            updated_at=NOW,
        ),
    ]


def test_enum_lookup_by_database_value():
    assert CollateralEventType("CANCEL_RESERVE") is CollateralEventType.CANCEL_RESERVE
    assert SettlementStatus("REMUNERATED") is SettlementStatus.REMUNERATED
    assert WithdrawalStatus("CANCELLED") is WithdrawalStatus.CANCELLED


def test_enum_unknown_value_raises():
    with pytest.raises(ValueError):
        TabStatus("ARCHIVED")


def test_enum_member_order():
    assert list(TabStatus) == [TabStatus("PENDING"), TabStatus("OPEN"), TabStatus("CLOSED")]
    assert list(WithdrawalStatus) == [
        WithdrawalStatus("PENDING"),
        WithdrawalStatus("EXECUTED"),
        WithdrawalStatus("CANCELLED"),
    ]


def test_enum_compares_with_string():
    assert TabStatus("OPEN") == "OPEN"
    assert CollateralEventType("UNLOCK") == "UNLOCK"


def test_every_enum_has_a_type_name():
    enums = {CollateralEventType, SettlementStatus, TabStatus, WithdrawalStatus}
    assert set(ENUM_TYPE_NAMES) == enums
    assert len(set(ENUM_TYPE_NAMES.values())) == len(enums)


def test_primary_keys_name_real_fields():
    for instance in _sample_entities():
        values = dataclasses.asdict(instance)
        assert set(type(instance).PRIMARY_KEY) <= set(values)


def test_table_names_are_unique():
    tables = [type(instance).TABLE for instance in _sample_entities()]
    assert len(tables) == 6
    assert len(set(tables)) == len(tables)


def test_tab_equality_and_replace():
    tab = Tab(
        id="0x1",
        user_address="0xuser",
        server_address="0xserver",
        start_ts=NOW,
        status=TabStatus.PENDING,
        settlement_status=SettlementStatus.PENDING,
        created_at=NOW,
        updated_at=NOW,
        ttl=3600,
    )
    opened = dataclasses.replace(tab, status=TabStatus.OPEN)
    assert opened.status is TabStatus.OPEN
    assert tab.status is TabStatus.PENDING
    assert opened != tab
    assert dataclasses.replace(opened, status=TabStatus.PENDING) == tab


def test_collateral_event_optional_fields():
    event = CollateralEvent(
        id="e1",
        user_address="0xuser",
        amount="10",
        event_type=CollateralEventType.DEPOSIT,
        tab_id=None,
        req_id=None,
        tx_id="0xtx",
        created_at=NOW,
    )
    assert dataclasses.asdict(event)["tab_id"] is None
    assert dataclasses.asdict(event)["event_type"] == "DEPOSIT"


def test_guarantee_key_values():
    g = Guarantee(
        tab_id="0x1",
        req_id="0x0",
        from_address="0xa",
        to_address="0xb",
        value="5",
        start_ts=NOW,
        cert="{}",
        created_at=NOW,
        updated_at=NOW,
    )
    assert tuple(getattr(g, name) for name in Guarantee.PRIMARY_KEY) == ("0x1", "0x0")