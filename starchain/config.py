"""Runtime settings for the notary service.

Defaults live on the pydantic models below. Environment variables of the
form ``STARCHAIN_<SECTION>__<FIELD>`` override them, and CLI flags added by
``add_args`` override defaults but not the environment.
"""

from __future__ import annotations

import argparse
import os
from typing import Mapping

from pydantic import BaseModel, Field

from starchain.auth.verifier import DEFAULT_PURPOSE_TAG
from starchain.registry.workflow import DEFAULT_CHALLENGE_TTL_SECONDS

ENV_PREFIX = "STARCHAIN_"


class ClaimSettings(BaseModel):
    challenge_ttl_seconds: int = Field(default=DEFAULT_CHALLENGE_TTL_SECONDS, gt=0)
    purpose_tag: str = Field(default=DEFAULT_PURPOSE_TAG, min_length=1, pattern=r"^[^:]+$")


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=0, le=65535)


class NotarySettings(BaseModel):
    claim: ClaimSettings = Field(default_factory=ClaimSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)


def load_settings(env: Mapping[str, str] | None = None) -> NotarySettings:
    """Build settings from ``STARCHAIN_SECTION__FIELD`` variables."""
    env = os.environ if env is None else env
    sections: dict[str, dict[str, str]] = {}
    for key, value in env.items():
        if not key.startswith(ENV_PREFIX) or "__" not in key:
            continue
        section, _, name = key[len(ENV_PREFIX):].lower().partition("__")
        if section in NotarySettings.model_fields:
            sections.setdefault(section, {})[name] = value
    return NotarySettings(**sections)


def add_args(parser: argparse.ArgumentParser) -> None:
    """Add notary arguments to the parser."""

    parser.add_argument(
        "--server.host",
        type=str,
        help="Interface the HTTP API binds to.",
        default=None,
    )

    parser.add_argument(
        "--server.port",
        type=int,
        help="Port the HTTP API listens on.",
        default=None,
    )

    parser.add_argument(
        "--claim.challenge_ttl",
        type=int,
        help="Seconds a challenge stays valid after issuance.",
        default=None,
    )


def apply_args(
    settings: NotarySettings,
    args: argparse.Namespace,
    env: Mapping[str, str] | None = None,
) -> NotarySettings:
    """Fold CLI values into settings. Environment variables win over CLI."""
    env = os.environ if env is None else env
    overrides = {
        ("server", "host"): getattr(args, "server.host", None),
        ("server", "port"): getattr(args, "server.port", None),
        ("claim", "challenge_ttl_seconds"): getattr(args, "claim.challenge_ttl", None),
    }
    data = settings.model_dump()
    for (section, name), value in overrides.items():
        env_key = f"{ENV_PREFIX}{section.upper()}__{name.upper()}"
        if value is None or env_key in env:
            continue
        data[section][name] = value
    return NotarySettings(**data)


__all__ = [
    "ClaimSettings",
    "NotarySettings",
    "ServerSettings",
    "add_args",
    "apply_args",
    "load_settings",
]
