"""Tamper-evident star registry ledger."""

__version__ = "0.1.0"
