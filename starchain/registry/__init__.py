"""Star claim registration on top of the ledger."""

from .workflow import DEFAULT_CHALLENGE_TTL_SECONDS, ClaimWorkflow, parse_challenge

__all__ = ["DEFAULT_CHALLENGE_TTL_SECONDS", "ClaimWorkflow", "parse_challenge"]
