"""Proof of address ownership via signed challenge messages.

An address is an SS58-encoded sr25519 public key. The owner proves control
of it by signing a challenge string issued here with the matching private
key (see ``starchain.auth.signer``).
"""

from __future__ import annotations

import time
from typing import Callable

import bittensor as bt

from starchain.ledger.errors import InvalidInput

DEFAULT_PURPOSE_TAG = "starRegistry"


class OwnershipVerifier:
    """Issues challenges and checks signatures over them. Stateless."""

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        purpose_tag: str = DEFAULT_PURPOSE_TAG,
    ):
        self._clock = clock
        self.purpose_tag = purpose_tag

    def issue_challenge(self, address: str) -> str:
        """Build the message the owner of ``address`` must sign."""
        if not address:
            raise InvalidInput("address is required")
        return f"{address}:{int(self._clock())}:{self.purpose_tag}"

    def verify(self, message: str, address: str, signature: str) -> bool:
        """True if ``signature`` over ``message`` was made by ``address``'s key.

        Malformed signatures and addresses are a failed verification, not an
        exception.
        """
        if not all(isinstance(v, str) and v for v in (message, address, signature)):
            return False

        sig_hex = signature[2:] if signature.startswith("0x") else signature
        try:
            sig_bytes = bytes.fromhex(sig_hex)
        except ValueError:
            return False

        try:
            keypair = bt.Keypair(ss58_address=address)
            return bool(keypair.verify(message.encode(), sig_bytes))
        except Exception:
            return False


__all__ = ["DEFAULT_PURPOSE_TAG", "OwnershipVerifier"]
