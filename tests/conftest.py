"""Shared fixtures: deterministic clock and real sr25519 keypairs."""

import pytest


class FakeClock:
    """Callable clock whose time only moves when a test moves it."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def keypair():
    import bittensor as bt
    return bt.Keypair.create_from_uri("//Alice")


@pytest.fixture
def other_keypair():
    import bittensor as bt
    return bt.Keypair.create_from_uri("//Bob")
