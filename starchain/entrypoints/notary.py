"""Notary entrypoint.

Builds an in-memory star registry ledger and serves it over HTTP until
interrupted. The chain lives only in this process; restarting it starts a
fresh chain from genesis.
"""

import argparse
import asyncio
import os
import signal

import bittensor as bt
from dotenv import load_dotenv

from starchain.auth.verifier import OwnershipVerifier
from starchain.config import add_args, apply_args, load_settings
from starchain.ledger.blockchain import Blockchain
from starchain.registry.workflow import ClaimWorkflow
from starchain.api.http_server import NotaryHTTPServer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Star registry notary")
    bt.logging.add_args(parser)
    add_args(parser)
    return parser


async def _serve(server: NotaryHTTPServer, stop_event: asyncio.Event) -> None:
    await server.start()
    try:
        await stop_event.wait()
    finally:
        await server.stop()


def main() -> None:
    # Load .env if not in test mode
    if os.environ.get("STARCHAIN_TEST_MODE") != "true":
        load_dotenv()

    parser = build_parser()
    args = parser.parse_args()
    bt.logging(config=bt.Config(parser))

    settings = apply_args(load_settings(), args)
    bt.logging.info({"notary_config": settings.model_dump()})

    blockchain = Blockchain()
    verifier = OwnershipVerifier(purpose_tag=settings.claim.purpose_tag)
    workflow = ClaimWorkflow(
        blockchain,
        verifier=verifier,
        challenge_ttl=settings.claim.challenge_ttl_seconds,
    )
    server = NotaryHTTPServer(
        blockchain,
        workflow,
        host=settings.server.host,
        port=settings.server.port,
    )

    loop = asyncio.new_event_loop()
    stop_event = asyncio.Event()

    def _signal_handler(sig, frame):
        bt.logging.info({"notary": "shutdown_signal_received"})
        loop.call_soon_threadsafe(stop_event.set)

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    try:
        loop.run_until_complete(_serve(server, stop_event))
    except KeyboardInterrupt:
        bt.logging.info({"notary": "keyboard_interrupt"})
    finally:
        loop.close()
        bt.logging.info({"notary": "stopped", "height": blockchain.get_height()})


if __name__ == "__main__":
    main()
