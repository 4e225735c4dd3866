"""Shared test fixtures for the wit_client test suite.

WHY: Most tests need a fake Wit server that answers with a canned body
and lets the test inspect exactly what request was sent. Centralizing
it here keeps every test module on the same stub.

HOW: The wit_stub fixture returns a factory that builds an
httpx.MockTransport around a canned response. Every request the
transport sees is appended to a list returned alongside it.

RULES:
- The real Wit service is never contacted (see test_e2e.py for that)
- Sample bodies follow the shapes documented for /message and /speech
"""

from typing import Any, Dict, List, Tuple

import httpx
import pytest

SAMPLE_MESSAGE_RESPONSE: Dict[str, Any] = {
    "text": "wake me up tomorrow at 7am",
    "intents": [
        {"id": "1701608719981716", "name": "wake_up", "confidence": 0.9853},
    ],
    "entities": {
        "wit$datetime:datetime": [
            {
                "id": "535a80e9-f4b4-4d4c-9a1b-4d3f1e2b8a10",
                "name": "wit$datetime",
                "role": "datetime",
                "start": 15,
                "end": 30,
                "body": "tomorrow at 7am",
                "confidence": 0.9576,
                "type": "value",
                "grain": "hour",
                "value": "2014-10-31T07:00:00.000-07:00",
                "entities": {},
            }
        ]
    },
    "traits": {},
}

# A minimal RIFF/WAVE header followed by a few silent samples
SAMPLE_WAV = (
    b"RIFF$\x00\x00\x00WAVEfmt \x10\x00\x00\x00\x01\x00\x01\x00"
    b"\x80>\x00\x00\x00}\x00\x00\x02\x00\x10\x00data\x00\x00\x00\x00"
    + b"\x00\x00" * 64
)


@pytest.fixture
def wit_stub():
    """Factory for a fake Wit server.

    Usage::

        transport, requests = wit_stub({"text": "hi"}, status_code=200)

    Pass ``raw=`` instead of a payload to answer with a non-JSON body.
    """

    def _make(
        payload: Any = None,
        status_code: int = 200,
        raw: bytes = None,
    ) -> Tuple[httpx.MockTransport, List[httpx.Request]]:
        requests: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if raw is not None:
                return httpx.Response(status_code, content=raw)
            return httpx.Response(status_code, json=payload)

        return httpx.MockTransport(handler), requests

    return _make


@pytest.fixture
def sample_message_response():
    """A successful /message body with one intent and one entity."""
    return dict(SAMPLE_MESSAGE_RESPONSE)


@pytest.fixture
def sample_wav():
    """A tiny but well-formed WAV payload."""
    return SAMPLE_WAV
