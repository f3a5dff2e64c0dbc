"""Client-side signing of challenge messages with bittensor keypairs."""

from __future__ import annotations

from typing import Any

from starchain.ledger.errors import InvalidInput


def sign_challenge(message: str, signer: Any) -> str:
    """Sign a challenge message.

    Args:
        message: The challenge returned by ``request_challenge``.
        signer: A ``bt.Keypair``, or a wallet whose hotkey is used.

    Returns:
        Hex-encoded signature string.
    """
    if not message:
        raise InvalidInput("message is required")
    keypair = getattr(signer, "hotkey", signer)
    signature = keypair.sign(message.encode())
    return signature.hex() if isinstance(signature, bytes) else str(signature)


__all__ = ["sign_challenge"]
