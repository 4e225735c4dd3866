"""Wit API client package: async HTTP interface to the Wit.ai NLU service.

WHY: Speech, streamed speech and text queries share auth, query encoding
and error handling. This package keeps all Wit communication behind one
client class and three one-shot coroutines.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. Context hints are
typed by the WitContext dataclass in models.py.

RULES:
- All HTTP calls go through WitClient (no direct httpx usage elsewhere)
- Authentication is via Bearer token from config or the caller
"""

from wit_client.api.client import (
    QueryLengthError,
    WitAPIError,
    WitClient,
    WitError,
    WitResponseError,
    speech,
    stream,
    text,
)
from wit_client.api.models import WitContext, encode_context

__all__ = [
    "QueryLengthError",
    "WitAPIError",
    "WitClient",
    "WitContext",
    "WitError",
    "WitResponseError",
    "encode_context",
    "speech",
    "stream",
    "text",
]
