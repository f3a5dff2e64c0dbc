"""HTTP API exposing the star registry ledger.

Runs in the notary's event loop. Routes:
  GET  /height                   - current chain height
  GET  /block/height/{height}    - block at a height
  GET  /block/hash/{hash}        - block with a hash
  POST /requestValidation        - challenge message for an address
  POST /submitstar               - signed star claim, appended on success
  GET  /blocks/{address}         - stars owned by an address
  GET  /validateChain            - integrity report for the whole chain
"""

from __future__ import annotations

from typing import Any

import bittensor as bt
from aiohttp import web
from pydantic import BaseModel, ValidationError

from starchain.ledger.blockchain import Blockchain
from starchain.ledger.errors import (
    AppendRefused,
    ExpiredChallenge,
    InvalidInput,
    LedgerError,
    MalformedMessage,
    VerificationFailed,
)
from starchain.registry.workflow import ClaimWorkflow
from starchain.shared.logfmt import short_address

_STATUS_BY_ERROR: dict[type[LedgerError], int] = {
    InvalidInput: 400,
    MalformedMessage: 400,
    VerificationFailed: 401,
    AppendRefused: 409,
    ExpiredChallenge: 410,
}


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------


class ChallengeRequest(BaseModel):
    """Body of POST /requestValidation."""

    address: str = ""


class SubmitStarRequest(BaseModel):
    """Body of POST /submitstar. Non-string fields are rejected."""

    address: str = ""
    message: str = ""
    signature: str = ""
    star: Any = None


def _error_response(endpoint: str, exc: LedgerError) -> web.Response:
    status = _STATUS_BY_ERROR.get(type(exc), 400)
    bt.logging.warning({"notary_request": {"endpoint": endpoint, "status": status, "error": exc.kind}})
    body: dict[str, Any] = {"error": exc.kind, "detail": str(exc)}
    if isinstance(exc, AppendRefused):
        body["errors"] = [e.to_dict() for e in exc.errors]
    return web.json_response(body, status=status)


class NotaryHTTPServer:
    """Lightweight async HTTP server in front of a ledger and its claim workflow."""

    def __init__(
        self,
        blockchain: Blockchain,
        workflow: ClaimWorkflow,
        host: str = "0.0.0.0",
        port: int = 8000,
    ):
        self.blockchain = blockchain
        self.workflow = workflow
        self.host = host
        self.port = port
        self._app: web.Application | None = None
        self._runner: web.AppRunner | None = None

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/height", self._handle_height)
        app.router.add_get("/block/height/{height}", self._handle_block_by_height)
        app.router.add_get("/block/hash/{hash}", self._handle_block_by_hash)
        app.router.add_post("/requestValidation", self._handle_request_validation)
        app.router.add_post("/submitstar", self._handle_submit_star)
        app.router.add_get("/blocks/{address}", self._handle_stars_by_owner)
        app.router.add_get("/validateChain", self._handle_validate_chain)
        return app

    async def start(self) -> None:
        """Start the HTTP server."""
        self._app = self.build_app()
        self._runner = web.AppRunner(self._app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        bt.logging.info({"notary_http": {"status": "started", "host": self.host, "port": self.port}})

    async def stop(self) -> None:
        """Stop the HTTP server."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            bt.logging.info({"notary_http": "stopped"})

    # -- Read routes --

    async def _handle_height(self, request: web.Request) -> web.Response:
        return web.json_response({"height": self.blockchain.get_height()})

    async def _handle_block_by_height(self, request: web.Request) -> web.Response:
        try:
            height = int(request.match_info["height"])
        except ValueError:
            return web.json_response({"error": "invalid_height"}, status=400)

        block = self.blockchain.get_block_by_height(height)
        if block is None:
            bt.logging.debug({"notary_request": {"endpoint": "block/height", "status": 404, "height": height}})
            return web.json_response({"error": "not_found"}, status=404)
        return web.json_response(block.to_json())

    async def _handle_block_by_hash(self, request: web.Request) -> web.Response:
        block_hash = request.match_info["hash"]
        try:
            block = self.blockchain.get_block_by_hash(block_hash)
        except LedgerError as e:
            return _error_response("block/hash", e)

        if block is None:
            bt.logging.debug({"notary_request": {"endpoint": "block/hash", "status": 404}})
            return web.json_response({"error": "not_found"}, status=404)
        return web.json_response(block.to_json())

    async def _handle_stars_by_owner(self, request: web.Request) -> web.Response:
        address = request.match_info["address"]
        try:
            stars = self.blockchain.get_payloads_by_owner(address)
        except LedgerError as e:
            return _error_response("blocks", e)

        bt.logging.info({"notary_request": {"endpoint": "blocks", "address": short_address(address), "status": 200, "count": len(stars)}})
        return web.json_response({"address": address, "stars": stars})

    async def _handle_validate_chain(self, request: web.Request) -> web.Response:
        errors = self.blockchain.validate_chain()
        return web.json_response({
            "valid": not errors,
            "height": self.blockchain.get_height(),
            "errors": [e.to_dict() for e in errors],
        })

    # -- Claim routes --

    async def _handle_request_validation(self, request: web.Request) -> web.Response:
        try:
            body = ChallengeRequest.model_validate(await request.json())
        except (ValueError, ValidationError):
            bt.logging.warning({"notary_request": {"endpoint": "requestValidation", "status": 400, "error": "invalid_body"}})
            return web.json_response({"error": "invalid_body"}, status=400)

        try:
            message = self.workflow.request_challenge(body.address)
        except LedgerError as e:
            return _error_response("requestValidation", e)

        bt.logging.info({"notary_request": {"endpoint": "requestValidation", "address": short_address(body.address), "status": 200}})
        return web.json_response({"message": message})

    async def _handle_submit_star(self, request: web.Request) -> web.Response:
        try:
            body = SubmitStarRequest.model_validate(await request.json())
        except (ValueError, ValidationError):
            bt.logging.warning({"notary_request": {"endpoint": "submitstar", "status": 400, "error": "invalid_body"}})
            return web.json_response({"error": "invalid_body"}, status=400)

        try:
            block = self.workflow.submit(body.address, body.message, body.signature, body.star)
        except LedgerError as e:
            return _error_response("submitstar", e)

        bt.logging.info({"notary_request": {"endpoint": "submitstar", "address": short_address(body.address), "status": 200, "height": block.height}})
        return web.json_response(block.to_json())


__all__ = ["NotaryHTTPServer"]
