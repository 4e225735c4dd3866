"""Wit Client: a thin async binding for the Wit.ai speech and message API.

WHY: Applications want intents and entities from an utterance, spoken or
typed, without hand-building HTTP requests or decoding Wit's error shape.

HOW: speech(), stream() and text() each send one request and either
return the parsed JSON or raise. WitClient lets callers reuse a
connection across several requests.

RULES:
- Results are returned exactly as the service sent them
- Transport errors propagate unchanged; API errors raise WitAPIError
"""

from wit_client.api import (
    QueryLengthError,
    WitAPIError,
    WitClient,
    WitContext,
    WitError,
    WitResponseError,
    speech,
    stream,
    text,
)

__version__ = "0.1.0"

__all__ = [
    "QueryLengthError",
    "WitAPIError",
    "WitClient",
    "WitContext",
    "WitError",
    "WitResponseError",
    "speech",
    "stream",
    "text",
]
