"""HTTP transport integration test.

Spins up a real NotaryHTTPServer on localhost and drives it with a
NotaryClient: challenge, sign, submit, then read the chain back over the
wire.
"""

from __future__ import annotations

import asyncio

import pytest

from starchain.api.http_client import NotaryClient
from starchain.api.http_server import NotaryHTTPServer
from starchain.auth.signer import sign_challenge
from starchain.ledger.blockchain import Blockchain
from starchain.registry.workflow import ClaimWorkflow


def _build_server(port: int) -> NotaryHTTPServer:
    blockchain = Blockchain()
    workflow = ClaimWorkflow(blockchain)
    return NotaryHTTPServer(blockchain, workflow, host="127.0.0.1", port=port)


@pytest.mark.asyncio
class TestHTTPTransport:
    """End-to-end HTTP tests with real server + client."""

    async def test_submit_and_read_back(self, keypair):
        server = _build_server(18961)
        try:
            await server.start()
            await asyncio.sleep(0.2)

            client = NotaryClient("http://127.0.0.1:18961", keypair=keypair, timeout=10.0)
            try:
                genesis = await client.get_block_by_height(0)
                assert genesis is not None
                assert genesis["previous_hash"] == ""

                block = await client.submit_star({"story": "Vega"})
                assert block["height"] == 1
                assert block["previous_hash"] == genesis["hash"]

                assert await client.get_height() == 1
                assert await client.get_block_by_hash(block["hash"]) == block
                assert await client.get_stars_by_owner(keypair.ss58_address) == [{"story": "Vega"}]

                report = await client.validate_chain()
                assert report["valid"] is True
                assert report["errors"] == []
            finally:
                await client.close()
        finally:
            await server.stop()

    async def test_forged_signature_rejected(self, keypair, other_keypair):
        server = _build_server(18962)
        try:
            await server.start()
            await asyncio.sleep(0.2)

            client = NotaryClient("http://127.0.0.1:18962", timeout=10.0)
            try:
                address = keypair.ss58_address
                message = await client.request_challenge(address)
                forged = sign_challenge(message, other_keypair)

                with pytest.raises(ConnectionError, match="401"):
                    await client.submit_signed(address, message, forged, {"story": "stolen"})

                assert await client.get_height() == 0
            finally:
                await client.close()
        finally:
            await server.stop()

    async def test_error_statuses(self, keypair):
        server = _build_server(18963)
        try:
            await server.start()
            await asyncio.sleep(0.2)

            client = NotaryClient("http://127.0.0.1:18963", timeout=10.0)
            try:
                address = keypair.ss58_address

                # expired challenge
                stale = f"{address}:1000:starRegistry"
                with pytest.raises(ConnectionError, match="410"):
                    await client.submit_signed(address, stale, sign_challenge(stale, keypair), {"story": "x"})

                # malformed challenge
                with pytest.raises(ConnectionError, match="400"):
                    await client.submit_signed(address, "garbage", "00", {"story": "x"})

                # missing star
                message = await client.request_challenge(address)
                with pytest.raises(ConnectionError, match="400"):
                    await client.submit_signed(address, message, sign_challenge(message, keypair), None)

                # unknown blocks are absent, not errors
                assert await client.get_block_by_height(99) is None
                assert await client.get_block_by_hash("f" * 64) is None
                assert await client.get_stars_by_owner(address) == []
            finally:
                await client.close()
        finally:
            await server.stop()

    async def test_non_string_fields_rejected(self, keypair):
        server = _build_server(18965)
        try:
            await server.start()
            await asyncio.sleep(0.2)

            client = NotaryClient("http://127.0.0.1:18965", timeout=10.0)
            try:
                address = keypair.ss58_address
                message = await client.request_challenge(address)
                bad_bodies = [
                    {"address": address, "message": 123, "signature": "00", "star": {}},
                    {"address": address, "message": message, "signature": 5, "star": {}},
                    {"address": ["x"], "message": message, "signature": "00", "star": {}},
                    ["not", "an", "object"],
                ]
                for body in bad_bodies:
                    resp = await client._client.post("http://127.0.0.1:18965/submitstar", json=body)
                    assert resp.status_code == 400
                    assert resp.json() == {"error": "invalid_body"}

                for body in [{"address": 42}, "plain string"]:
                    resp = await client._client.post("http://127.0.0.1:18965/requestValidation", json=body)
                    assert resp.status_code == 400
                    assert resp.json() == {"error": "invalid_body"}

                resp = await client._client.post(
                    "http://127.0.0.1:18965/submitstar",
                    content=b"{not json",
                    headers={"Content-Type": "application/json"},
                )
                assert resp.status_code == 400

                assert await client.get_height() == 0
            finally:
                await client.close()
        finally:
            await server.stop()

    async def test_future_dated_challenge_rejected(self, keypair):
        server = _build_server(18966)
        try:
            await server.start()
            await asyncio.sleep(0.2)

            client = NotaryClient("http://127.0.0.1:18966", timeout=10.0)
            try:
                address = keypair.ss58_address
                future = f"{address}:32503680000:starRegistry"
                with pytest.raises(ConnectionError, match="400"):
                    await client.submit_signed(address, future, sign_challenge(future, keypair), {"story": "x"})
                assert await client.get_height() == 0
            finally:
                await client.close()
        finally:
            await server.stop()

    async def test_tampered_chain_reported_and_locked(self, keypair):
        server = _build_server(18964)
        try:
            await server.start()
            await asyncio.sleep(0.2)

            client = NotaryClient("http://127.0.0.1:18964", keypair=keypair, timeout=10.0)
            try:
                await client.submit_star({"story": "Vega"})
                server.blockchain.simulate_tamper(1, b"forged")

                report = await client.validate_chain()
                assert report["valid"] is False
                assert report["errors"] == [{
                    "kind": "integrity_error",
                    "height": 1,
                    "message": report["errors"][0]["message"],
                }]

                with pytest.raises(ConnectionError, match="409"):
                    await client.submit_star({"story": "Sirius"})
                assert await client.get_height() == 1
            finally:
                await client.close()
        finally:
            await server.stop()
