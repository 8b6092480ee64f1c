"""Errors raised while looking up and checking on-chain transactions."""

from __future__ import annotations

__all__ = [
    "TxProcessingError",
    "RpcError",
    "Utf8DecodeError",
    "TransactionNotFound",
    "InvalidTxType",
    "InvalidParams",
]


class TxProcessingError(Exception):
    """Base class for transaction processing failures."""


class RpcError(TxProcessingError):
    """Generic RPC or provider failure."""

    def __init__(self, source: object) -> None:
        self.source = source
        super().__init__(f"RPC/provider error: {source}")


class Utf8DecodeError(TxProcessingError):
    """Transaction input data is not valid UTF-8."""

    def __init__(self, source: object) -> None:
        self.source = source
        super().__init__(f"UTF-8 decode error: {source}")


class TransactionNotFound(TxProcessingError):
    """The transaction does not exist on chain."""

    def __init__(self) -> None:
        super().__init__("Transaction not found")


class InvalidTxType(TxProcessingError):
    """The transaction type is not supported."""

    def __init__(self) -> None:
        super().__init__("Invalid transaction type")


class InvalidParams(TxProcessingError):
    """User-supplied parameters are invalid."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)