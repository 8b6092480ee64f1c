import pytest

from micacore.errors import (
    InvalidParams,
    InvalidTxType,
    RpcError,
    TransactionNotFound,
    TxProcessingError,
    Utf8DecodeError,
)


def test_rpc_error_wraps_source():
    cause = ConnectionError("boom")
    err = RpcError(cause)
    assert err.source is cause
    assert str(err) == "RPC/provider error: boom"


def test_utf8_error_message():
    cause = ValueError("bad byte")
    err = Utf8DecodeError(cause)
    assert str(err) == "UTF-8 decode error: bad byte"
    assert err.source is cause


def test_fixed_messages():
    assert str(TransactionNotFound()) == "Transaction not found"
    assert str(InvalidTxType()) == "Invalid transaction type"


def test_invalid_params_message_is_verbatim():
    err = InvalidParams("sender mismatch")
    assert str(err) == "sender mismatch"
    assert err.message == "sender mismatch"


@pytest.mark.parametrize(
    ("factory", "expected"),
    [
        (lambda: RpcError("x"), "RPC/provider error: x"),
        (lambda: Utf8DecodeError("x"), "UTF-8 decode error: x"),
        (TransactionNotFound, "Transaction not found"),
        (InvalidTxType, "Invalid transaction type"),
        (lambda: InvalidParams("x"), "x"),
    ],
)
def test_all_caught_by_base(factory, expected):
    err = factory()
    with pytest.raises(TxProcessingError) as info:
        raise err
    assert info.value is err
    assert str(info.value) == expected


def _handler_for(err):
    try:
        raise err
    except TransactionNotFound:
        return "not_found"
    except InvalidTxType:
        return "invalid_type"
    except InvalidParams:
        return "invalid_params"
    except TxProcessingError:
        return "other"


@pytest.mark.parametrize(
    ("factory", "expected"),
    [
        (InvalidTxType, "invalid_type"),
        (TransactionNotFound, "not_found"),
        (lambda: InvalidParams("x"), "invalid_params"),
        (lambda: RpcError("x"), "other"),
        (lambda: Utf8DecodeError("x"), "other"),
    ],
)
def test_specific_catch_does_not_swallow_others(factory, expected):
    assert _handler_for(factory()) == expected