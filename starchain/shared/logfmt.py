"""Helpers for structured log fields."""

from __future__ import annotations


def short_address(address: str | None) -> str:
    """Truncate address for log readability."""
    if not address or not isinstance(address, str):
        return "none"
    return address[:16]


__all__ = ["short_address"]
