"""Block: one hash-linked entry in the ledger."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from starchain.shared.determinism import compute_hash

# previous_hash carried by the genesis block
GENESIS_PREVIOUS_HASH = ""


class Block(BaseModel):
    """Opaque payload plus chain metadata.

    Frozen: a block is never edited in place. ``Blockchain.append`` produces
    the stored block by sealing an unsealed one with ``sealed()``.
    """

    model_config = ConfigDict(frozen=True)

    payload: bytes
    height: int = -1
    timestamp: int = 0
    previous_hash: str = GENESIS_PREVIOUS_HASH
    hash: str = ""

    def _hash_fields(self) -> dict[str, Any]:
        return {
            "height": self.height,
            "timestamp": self.timestamp,
            "payload": self.payload.hex(),
            "previous_hash": self.previous_hash,
        }

    def compute_hash(self) -> str:
        """Digest over every field except ``hash`` itself."""
        return compute_hash(self._hash_fields())

    def validate(self) -> bool:
        """True when the stored hash matches the block's current fields."""
        return bool(self.hash) and self.hash == self.compute_hash()

    def sealed(self, *, height: int, timestamp: int, previous_hash: str) -> Block:
        """Copy with chain metadata assigned and the hash computed last."""
        block = self.model_copy(update={
            "previous_hash": previous_hash,
            "timestamp": timestamp,
            "height": height,
        })
        return block.model_copy(update={"hash": block.compute_hash()})

    def to_json(self) -> dict[str, Any]:
        """JSON-safe view; payload is hex encoded."""
        data = self._hash_fields()
        data["hash"] = self.hash
        return data


__all__ = ["GENESIS_PREVIOUS_HASH", "Block"]
