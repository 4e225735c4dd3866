"""Tests for the command-line interface.

WHY: The CLI is the quickest way to poke a Wit app by hand. It must send
the same requests the library does, keep stdout clean JSON, and exit
non-zero with a readable message when anything fails.

HOW: wit_client.cli.WitClient is replaced with a factory that builds a
real WitClient around an httpx.MockTransport, so the whole path from
argv to request runs without touching the network. Output is captured
with capsys.

RULES:
- The real Wit API is never called
- stdout must contain only the JSON result
"""

import argparse
import json

import httpx
import pytest

from wit_client import cli
from wit_client.api.client import WitClient
from wit_client.api.models import WitContext


@pytest.fixture
def patched_client(monkeypatch, wit_stub):
    """Install a stubbed WitClient in the CLI and return its request log."""

    def _install(payload, status_code=200):
        transport, requests = wit_stub(payload, status_code=status_code)
        monkeypatch.setattr(
            cli,
            "WitClient",
            lambda token: WitClient(token or "cli-token", transport=transport),
        )
        return requests

    return _install


class TestTextCommand:

    def test_prints_json_result(self, patched_client, capsys, sample_message_response):
        requests = patched_client(sample_message_response)

        cli.main(["text", "wake me up tomorrow at 7am", "--token", "t0k"])

        out = capsys.readouterr().out
        assert json.loads(out) == sample_message_response
        assert requests[0].url.params["q"] == "wake me up tomorrow at 7am"
        assert requests[0].headers["authorization"] == "Bearer t0k"

    def test_options_reach_query_string(self, patched_client, capsys):
        requests = patched_client({"text": "hi"})

        cli.main([
            "text", "hi",
            "--msg-id", "m1",
            "--thread-id", "th1",
            "-n", "2",
            "--verbose",
            "--timezone", "Europe/Stockholm",
        ])

        params = requests[0].url.params
        assert params["msg_id"] == "m1"
        assert params["thread_id"] == "th1"
        assert params["n"] == "2"
        assert params["verbose"] == "true"
        assert json.loads(params["context"]) == {"timezone": "Europe/Stockholm"}

    def test_api_error_exits_1(self, patched_client, capsys):
        patched_client({"code": "bad-auth", "error": "invalid token"}, status_code=400)

        with pytest.raises(SystemExit) as exc_info:
            cli.main(["text", "hello"])

        captured = capsys.readouterr()
        assert exc_info.value.code == 1
        assert "bad-auth: invalid token" in captured.err
        assert captured.out == ""

    def test_bad_context_json_exits_1(self, patched_client, capsys):
        patched_client({"text": "hi"})

        with pytest.raises(SystemExit) as exc_info:
            cli.main(["text", "hi", "--context", "[1, 2]"])

        assert exc_info.value.code == 1
        assert "JSON object" in capsys.readouterr().err

    def test_transport_error_exits_1(self, monkeypatch, capsys):
        def handler(request):
            raise httpx.ConnectError("Connection refused")

        transport = httpx.MockTransport(handler)
        monkeypatch.setattr(cli, "WitClient", lambda token: WitClient("t", transport=transport))

        with pytest.raises(SystemExit) as exc_info:
            cli.main(["text", "hello"])

        assert exc_info.value.code == 1
        assert "Connection refused" in capsys.readouterr().err


class TestAudioCommands:

    def test_speech_sends_whole_file(self, patched_client, capsys, tmp_path, sample_wav):
        audio = tmp_path / "clip.wav"
        audio.write_bytes(sample_wav)
        requests = patched_client({"text": "hello"})

        cli.main(["speech", str(audio)])

        assert json.loads(capsys.readouterr().out) == {"text": "hello"}
        assert requests[0].content == sample_wav
        assert "transfer-encoding" not in requests[0].headers

    def test_stream_sends_chunked(self, patched_client, capsys, tmp_path, sample_wav):
        audio = tmp_path / "clip.wav"
        audio.write_bytes(sample_wav)
        requests = patched_client({"text": "hello"})

        cli.main(["stream", str(audio), "--msg-id", "s1"])

        assert json.loads(capsys.readouterr().out) == {"text": "hello"}
        assert requests[0].content == sample_wav
        assert requests[0].headers["transfer-encoding"] == "chunked"
        assert requests[0].url.params["msg_id"] == "s1"

    def test_missing_file_exits_1(self, patched_client, capsys, tmp_path):
        requests = patched_client({"text": "hello"})

        with pytest.raises(SystemExit) as exc_info:
            cli.main(["speech", str(tmp_path / "nope.wav")])

        assert exc_info.value.code == 1
        assert "File not found" in capsys.readouterr().err
        assert requests == []


class TestBuildContext:

    def _args(self, **overrides):
        values = {"context": None, "reference_time": None, "timezone": None, "locale": None}
        values.update(overrides)
        return argparse.Namespace(**values)

    def test_no_flags_means_no_context(self):
        assert cli._build_context(self._args()) is None

    def test_raw_json_wins(self):
        ctx = cli._build_context(self._args(context='{"locale": "en_US"}', timezone="UTC"))
        assert ctx == {"locale": "en_US"}

    def test_individual_flags_build_wit_context(self):
        ctx = cli._build_context(self._args(locale="sv_SE", timezone="Europe/Stockholm"))
        assert ctx == WitContext(timezone="Europe/Stockholm", locale="sv_SE")


def test_subcommand_is_required(capsys):
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])
    assert exc_info.value.code == 2
