"""HTTP client for the notary API.

Wraps the challenge -> sign -> submit dance so callers only hand over a
keypair and the star data.
"""

from __future__ import annotations

from typing import Any

import bittensor as bt
import httpx

from starchain.auth.signer import sign_challenge


class NotaryClient:
    """Client for a ``NotaryHTTPServer``.

    Args:
        base_url: Root URL of the notary, e.g. ``http://127.0.0.1:8000``.
        keypair: ``bt.Keypair`` (or wallet) used to sign challenges. Only
            needed for ``submit_star``.
    """

    def __init__(
        self,
        base_url: str,
        keypair: Any = None,
        timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.keypair = keypair
        self._client = httpx.AsyncClient(timeout=timeout)

    @property
    def address(self) -> str:
        signer = getattr(self.keypair, "hotkey", self.keypair)
        return signer.ss58_address

    async def close(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str) -> httpx.Response:
        return await self._client.get(f"{self.base_url}{path}")

    async def _post(self, path: str, body: dict[str, Any]) -> httpx.Response:
        return await self._client.post(f"{self.base_url}{path}", json=body)

    # -- Claims --

    async def request_challenge(self, address: str | None = None) -> str:
        resp = await self._post("/requestValidation", {"address": address or self.address})
        if resp.status_code != 200:
            raise ConnectionError(f"Challenge request failed: {resp.status_code} {resp.text}")
        return resp.json()["message"]

    async def submit_star(self, star: Any) -> dict[str, Any]:
        """Request a challenge, sign it and submit ``star``. Returns the block JSON."""
        if self.keypair is None:
            raise ValueError("a keypair is required to submit stars")

        address = self.address
        message = await self.request_challenge(address)
        signature = sign_challenge(message, self.keypair)
        return await self.submit_signed(address, message, signature, star)

    async def submit_signed(
        self, address: str, message: str, signature: str, star: Any,
    ) -> dict[str, Any]:
        """Submit an already signed challenge."""
        resp = await self._post("/submitstar", {
            "address": address,
            "message": message,
            "signature": signature,
            "star": star,
        })
        if resp.status_code != 200:
            bt.logging.warning({"notary_client": {"event": "submit_failed", "status": resp.status_code}})
            raise ConnectionError(f"Star submission failed: {resp.status_code} {resp.text}")
        return resp.json()

    # -- Reads --

    async def get_height(self) -> int:
        resp = await self._get("/height")
        resp.raise_for_status()
        return resp.json()["height"]

    async def get_block_by_height(self, height: int) -> dict[str, Any] | None:
        resp = await self._get(f"/block/height/{height}")
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return resp.json()

    async def get_block_by_hash(self, block_hash: str) -> dict[str, Any] | None:
        resp = await self._get(f"/block/hash/{block_hash}")
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return resp.json()

    async def get_stars_by_owner(self, address: str) -> list[Any]:
        resp = await self._get(f"/blocks/{address}")
        resp.raise_for_status()
        return resp.json()["stars"]

    async def validate_chain(self) -> dict[str, Any]:
        resp = await self._get("/validateChain")
        resp.raise_for_status()
        return resp.json()


__all__ = ["NotaryClient"]
