"""Gated write path: challenge, signed submission, append.

Per claim the flow is linear with no retries:

    CHALLENGE_ISSUED -> (owner signs elsewhere) -> SUBMITTED -> ACCEPTED | REJECTED

Each ``submit`` call ends in exactly one outcome: the appended block, or
one raised ``LedgerError``.
"""

from __future__ import annotations

import time
from typing import Any, Callable

import bittensor as bt

from starchain.auth.verifier import OwnershipVerifier
from starchain.ledger.block import Block
from starchain.ledger.blockchain import Blockchain
from starchain.ledger.errors import (
    ExpiredChallenge,
    InvalidInput,
    MalformedMessage,
    VerificationFailed,
)
from starchain.ledger.models import StarClaim
from starchain.shared.logfmt import short_address

DEFAULT_CHALLENGE_TTL_SECONDS = 300


def parse_challenge(message: str) -> tuple[str, int, str]:
    """Split ``address:timestamp:tag``.

    Raises:
        MalformedMessage: wrong shape or non-integer timestamp.
    """
    if not isinstance(message, str):
        raise MalformedMessage(f"challenge message must be a string, got {type(message).__name__}")
    parts = message.split(":")
    if len(parts) != 3 or not all(parts):
        raise MalformedMessage(f"expected address:timestamp:tag, got {message!r}")
    address, issued, tag = parts
    try:
        issued_at = int(issued)
    except ValueError:
        raise MalformedMessage(f"challenge timestamp is not an integer: {issued!r}") from None
    return address, issued_at, tag


class ClaimWorkflow:
    """Orchestrates ownership proof and the append of a star claim."""

    def __init__(
        self,
        blockchain: Blockchain,
        verifier: OwnershipVerifier | None = None,
        clock: Callable[[], float] = time.time,
        challenge_ttl: int = DEFAULT_CHALLENGE_TTL_SECONDS,
    ):
        self.blockchain = blockchain
        self.verifier = verifier or OwnershipVerifier(clock=clock)
        self.challenge_ttl = challenge_ttl
        self._clock = clock

    def request_challenge(self, address: str) -> str:
        message = self.verifier.issue_challenge(address)
        bt.logging.debug({"claim": {"event": "challenge_issued", "address": short_address(address)}})
        return message

    def submit(self, address: str, message: str, signature: str, payload: Any) -> Block:
        """Verify a signed challenge and append ``payload`` as a star claim.

        Raises:
            InvalidInput: payload missing.
            MalformedMessage: message cannot be parsed, or is stamped in the future.
            ExpiredChallenge: challenge is ``challenge_ttl`` seconds old or more.
            VerificationFailed: signature does not prove ownership of ``address``.
            AppendRefused: the ledger is already corrupt.
        """
        if payload is None:
            raise InvalidInput("star payload is required")

        _, issued_at, _ = parse_challenge(message)

        elapsed = int(self._clock()) - issued_at
        # issue_challenge stamps the current time, so a future stamp was never issued here
        if elapsed < 0:
            bt.logging.warning({"claim": {"event": "rejected", "address": short_address(address), "reason": "future_timestamp", "elapsed": elapsed}})
            raise MalformedMessage(f"challenge timestamp {issued_at} is in the future")
        if elapsed >= self.challenge_ttl:
            bt.logging.warning({"claim": {"event": "rejected", "address": short_address(address), "reason": "expired", "elapsed": elapsed}})
            raise ExpiredChallenge(elapsed=elapsed, ttl=self.challenge_ttl)

        if not self.verifier.verify(message, address, signature):
            bt.logging.warning({"claim": {"event": "rejected", "address": short_address(address), "reason": "bad_signature"}})
            raise VerificationFailed(f"signature does not verify for {address}")

        claim = StarClaim(address=address, message=message, signature=signature, star=payload)
        block = self.blockchain.append(Block(payload=claim.encode()))
        bt.logging.info({"claim": {"event": "accepted", "address": short_address(address), "height": block.height}})
        return block


__all__ = ["DEFAULT_CHALLENGE_TTL_SECONDS", "ClaimWorkflow", "parse_challenge"]
