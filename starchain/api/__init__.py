"""HTTP surface of the notary: aiohttp server and httpx client."""

from .http_client import NotaryClient
from .http_server import NotaryHTTPServer

__all__ = ["NotaryClient", "NotaryHTTPServer"]
