"""Tests for Block hashing and self-validation."""

import pytest
from pydantic import ValidationError

from starchain.ledger.block import GENESIS_PREVIOUS_HASH, Block
from starchain.shared.determinism import compute_hash


def _sealed(**overrides) -> Block:
    fields = dict(height=3, timestamp=1_700_000_000, previous_hash="ab" * 32)
    fields.update(overrides)
    return Block(payload=b"payload").sealed(**fields)


class TestComputeHash:

    def test_deterministic(self):
        block = _sealed()
        assert block.compute_hash() == block.compute_hash()

    def test_matches_canonical_digest(self):
        block = _sealed()
        expected = compute_hash({
            "height": 3,
            "timestamp": 1_700_000_000,
            "payload": b"payload".hex(),
            "previous_hash": "ab" * 32,
        })
        assert block.compute_hash() == expected
        assert block.hash == expected

    def test_hash_excludes_hash_field(self):
        block = _sealed()
        rehashed = block.model_copy(update={"hash": "0" * 64})
        assert rehashed.compute_hash() == block.compute_hash()

    @pytest.mark.parametrize("field,value", [
        ("payload", b"other payload"),
        ("timestamp", 1_700_000_001),
        ("height", 4),
        ("previous_hash", "cd" * 32),
    ])
    def test_every_field_changes_hash(self, field, value):
        block = _sealed()
        changed = block.model_copy(update={field: value})
        assert changed.compute_hash() != block.compute_hash()


class TestValidate:

    def test_sealed_block_is_valid(self):
        assert _sealed().validate()

    def test_unsealed_block_is_invalid(self):
        assert not Block(payload=b"x").validate()

    def test_tampered_payload_detected(self):
        block = _sealed()
        tampered = block.model_copy(update={"payload": b"forged"})
        assert tampered.hash == block.hash
        assert not tampered.validate()


class TestImmutability:

    def test_fields_cannot_be_assigned(self):
        block = _sealed()
        with pytest.raises(ValidationError):
            block.hash = "0" * 64
        with pytest.raises(ValidationError):
            block.height = 0

    def test_sealed_returns_new_block(self):
        raw = Block(payload=b"x")
        sealed = raw.sealed(height=0, timestamp=1, previous_hash=GENESIS_PREVIOUS_HASH)
        assert raw.hash == ""
        assert raw.height == -1
        assert sealed.height == 0
        assert sealed.previous_hash == GENESIS_PREVIOUS_HASH

    def test_to_json_hex_encodes_payload(self):
        data = _sealed().to_json()
        assert data["payload"] == b"payload".hex()
        assert data["height"] == 3
        assert set(data) == {"height", "timestamp", "payload", "previous_hash", "hash"}
