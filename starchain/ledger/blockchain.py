"""In-memory, hash-linked chain of blocks.

All chain state lives behind one lock. ``append`` holds it across
"read last block -> seal -> validate -> push" so two writers can never
produce blocks with the same height or previous_hash.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable

import bittensor as bt

from .block import GENESIS_PREVIOUS_HASH, Block
from .errors import (
    AppendRefused,
    IntegrityError,
    InvalidInput,
    LinkageError,
    ValidationError,
)
from .models import GENESIS_PAYLOAD, decode_claim


class Blockchain:
    """Append-only ledger. Created with its genesis block already in place.

    Args:
        clock: Returns epoch seconds. Block timestamps are ``int(clock())``.
        decoder: Turns a block payload into an object with ``address`` and
            ``star`` attributes, or None when the payload is not a claim.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        decoder: Callable[[bytes], Any] = decode_claim,
    ):
        self._clock = clock
        self._decoder = decoder
        self._chain: list[Block] = []
        self._height = -1
        self._lock = threading.Lock()
        self.initialize()

    def initialize(self) -> None:
        """Append the genesis block if the chain is empty."""
        with self._lock:
            if self._height == -1:
                genesis = self._append_locked(Block(payload=GENESIS_PAYLOAD))
                bt.logging.info({"ledger": {"event": "genesis_created", "hash": genesis.hash}})

    def get_height(self) -> int:
        with self._lock:
            return self._height

    # -- Writes --

    def append(self, block: Block | None) -> Block:
        """Seal ``block`` onto the end of the chain and return the stored block.

        Raises:
            InvalidInput: block is None.
            AppendRefused: the chain as it stands fails validation.
        """
        if block is None:
            raise InvalidInput("no block to append")
        with self._lock:
            stored = self._append_locked(block)
        bt.logging.info({"ledger": {"event": "block_appended", "height": stored.height, "hash": stored.hash[:16]}})
        return stored

    def _append_locked(self, block: Block) -> Block:
        previous_hash = self._chain[-1].hash if self._chain else GENESIS_PREVIOUS_HASH
        sealed = block.sealed(
            height=len(self._chain),
            timestamp=int(self._clock()),
            previous_hash=previous_hash,
        )

        errors = self._validate_locked()
        if errors:
            bt.logging.warning({"ledger": {"event": "append_refused", "errors": len(errors)}})
            raise AppendRefused(errors)

        self._chain.append(sealed)
        self._height += 1
        return sealed

    def simulate_tamper(self, height: int, payload: bytes) -> Block:
        """Replace a block's payload without re-hashing it.

        Exists only to exercise ``validate_chain``; never part of the write
        path.
        """
        with self._lock:
            if not 0 <= height < len(self._chain):
                raise InvalidInput(f"no block at height {height}")
            tampered = self._chain[height].model_copy(update={"payload": payload})
            self._chain[height] = tampered
        bt.logging.warning({"ledger": {"event": "tamper_simulated", "height": height}})
        return tampered

    # -- Reads --

    def get_block_by_hash(self, block_hash: str) -> Block | None:
        if not block_hash:
            raise InvalidInput("block hash is required")
        with self._lock:
            return next((b for b in self._chain if b.hash == block_hash), None)

    def get_block_by_height(self, height: int) -> Block | None:
        with self._lock:
            return next((b for b in self._chain if b.height == height), None)

    def get_payloads_by_owner(self, address: str) -> list[Any]:
        """Star data of every claim owned by ``address``, in chain order."""
        if not address:
            raise InvalidInput("address is required")
        with self._lock:
            blocks = list(self._chain)

        stars = []
        for block in blocks:
            claim = self._decoder(block.payload)
            # genesis and other non-claim payloads decode to None
            if claim is None:
                continue
            if claim.address == address:
                stars.append(claim.star)
        return stars

    def blocks(self) -> list[Block]:
        """Snapshot of the chain."""
        with self._lock:
            return list(self._chain)

    # -- Validation --

    def validate_chain(self) -> list[ValidationError]:
        """Every integrity and linkage defect in the chain. Read-only."""
        with self._lock:
            errors = self._validate_locked()
        if errors:
            bt.logging.warning({"ledger": {"event": "chain_invalid", "errors": [e.to_dict() for e in errors]}})
        return errors

    def _validate_locked(self) -> list[ValidationError]:
        errors: list[ValidationError] = []
        for i, block in enumerate(self._chain):
            if not block.validate():
                errors.append(IntegrityError(
                    height=block.height,
                    message=f"stored hash {block.hash[:16]}... does not match block contents",
                ))
            if i > 0:
                previous = self._chain[i - 1]
                if block.previous_hash != previous.hash:
                    errors.append(LinkageError(
                        height=block.height,
                        previous_height=previous.height,
                        message=f"previous_hash does not match hash of block {previous.height}",
                    ))
        return errors


__all__ = ["Blockchain"]
