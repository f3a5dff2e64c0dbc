"""Hash-linked in-memory ledger.

A ``Blockchain`` owns an ordered list of ``Block`` objects. Each block's
hash covers its own fields and its predecessor's hash, so editing any
block is visible to ``validate_chain``.
"""

from .block import GENESIS_PREVIOUS_HASH, Block
from .blockchain import Blockchain
from .errors import (
    AppendRefused,
    ExpiredChallenge,
    IntegrityError,
    InvalidInput,
    LedgerError,
    LinkageError,
    MalformedMessage,
    ValidationError,
    VerificationFailed,
)
from .models import GENESIS_PAYLOAD, StarClaim, decode_claim

__all__ = [
    "AppendRefused",
    "Block",
    "Blockchain",
    "ExpiredChallenge",
    "GENESIS_PAYLOAD",
    "GENESIS_PREVIOUS_HASH",
    "IntegrityError",
    "InvalidInput",
    "LedgerError",
    "LinkageError",
    "MalformedMessage",
    "StarClaim",
    "ValidationError",
    "VerificationFailed",
    "decode_claim",
]
