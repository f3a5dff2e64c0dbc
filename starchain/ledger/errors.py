"""Error kinds raised by the ledger and the claim workflow.

Operations that fail raise a ``LedgerError`` subclass. Chain validation
findings are plain values (``ValidationError``) collected into a list so
callers see every defect at once.
"""

from __future__ import annotations

from dataclasses import dataclass


class LedgerError(Exception):
    """Base class for ledger failures."""

    kind = "ledger_error"


class InvalidInput(LedgerError, ValueError):
    """A required argument was missing or empty."""

    kind = "invalid_input"


class MalformedMessage(LedgerError):
    """Challenge message does not parse as ``address:timestamp:tag``."""

    kind = "malformed_message"


class ExpiredChallenge(LedgerError):
    """Challenge was submitted outside its validity window."""

    kind = "expired_challenge"

    def __init__(self, elapsed: int, ttl: int):
        super().__init__(f"challenge expired: {elapsed}s elapsed, limit {ttl}s")
        self.elapsed = elapsed
        self.ttl = ttl


class VerificationFailed(LedgerError):
    """Signature does not match the claimed address."""

    kind = "verification_failed"


class AppendRefused(LedgerError):
    """Append aborted because the existing chain failed validation."""

    kind = "append_refused"

    def __init__(self, errors: list[ValidationError]):
        heights = sorted({e.height for e in errors})
        super().__init__(f"chain invalid at heights {heights}; append refused")
        self.errors = errors


# ---------------------------------------------------------------------------
# Validation findings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ValidationError:
    """One defect found by ``Blockchain.validate_chain``."""

    height: int
    message: str

    kind = "validation_error"

    def to_dict(self) -> dict:
        return {"kind": self.kind, "height": self.height, "message": self.message}


@dataclass(frozen=True)
class IntegrityError(ValidationError):
    """Stored hash differs from the hash recomputed from the block's fields."""

    kind = "integrity_error"


@dataclass(frozen=True)
class LinkageError(ValidationError):
    """previous_hash does not point at the predecessor's hash."""

    previous_height: int = -1

    kind = "linkage_error"

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["previous_height"] = self.previous_height
        return data


__all__ = [
    "AppendRefused",
    "ExpiredChallenge",
    "IntegrityError",
    "InvalidInput",
    "LedgerError",
    "LinkageError",
    "MalformedMessage",
    "ValidationError",
    "VerificationFailed",
]
