"""Entity records, status enums, transaction-processing errors and the schema migration for a collateral-backed payment network."""

__version__ = "0.1.0"