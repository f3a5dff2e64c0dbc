"""Challenge issuance, signing and ownership verification."""

from .signer import sign_challenge
from .verifier import DEFAULT_PURPOSE_TAG, OwnershipVerifier

__all__ = ["DEFAULT_PURPOSE_TAG", "OwnershipVerifier", "sign_challenge"]
