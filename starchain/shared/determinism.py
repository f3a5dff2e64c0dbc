"""Canonical serialization and hashing.

Every digest in the ledger goes through here so the same logical data
always produces the same hash, independent of dict ordering.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any


def canonical_json(data: Any) -> str:
    """Serialize to compact JSON with sorted keys."""
    return json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)


def compute_hash(data: Any) -> str:
    """SHA256 hex digest of the canonical JSON form of ``data``."""
    return hashlib.sha256(canonical_json(data).encode()).hexdigest()


__all__ = ["canonical_json", "compute_hash"]
