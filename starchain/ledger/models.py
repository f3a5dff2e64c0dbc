"""Pydantic models for the payloads stored in blocks.

The ledger treats payloads as opaque bytes. This module owns the one
structured shape it knows about, the star claim, and its byte encoding.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from starchain.shared.determinism import canonical_json

GENESIS_PAYLOAD = b"Genesis Block"


class StarClaim(BaseModel):
    """A star registered by the owner of ``address``.

    ``message`` and ``signature`` are the signed challenge that proved
    ownership at submission time; they are kept so anyone can re-check it.
    """

    address: str = Field(min_length=1)
    message: str = Field(min_length=1)
    signature: str = Field(min_length=1)
    star: Any

    def encode(self) -> bytes:
        return canonical_json(self.model_dump(mode="json")).encode()

    @classmethod
    def decode(cls, payload: bytes) -> StarClaim | None:
        """Parse a block payload; None for anything that is not a claim."""
        try:
            data = json.loads(payload)
        except (UnicodeDecodeError, ValueError):
            return None
        if not isinstance(data, dict):
            return None
        try:
            return cls(**data)
        except ValidationError:
            return None


def decode_claim(payload: bytes) -> StarClaim | None:
    return StarClaim.decode(payload)


__all__ = ["GENESIS_PAYLOAD", "StarClaim", "decode_claim"]
