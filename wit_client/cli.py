"""Command-line interface for the Wit client.

WHY: Quick manual checks of a Wit app (does this sentence resolve to the
right intent? does this recording?) should not need a script. The CLI
exposes the three operations directly from the terminal.

HOW: argparse with one sub-command per operation (text, speech, stream).
Shared options build the context hint and request ids. The coroutine is
run with asyncio.run(); the parsed JSON response is pretty-printed to
stdout.

RULES:
- Status and error messages go to stderr, the JSON result to stdout
- Exit status 1 on any Wit, transport, validation or file error
- --context (raw JSON object) wins over --reference-time/--timezone/--locale
- --debug turns on DEBUG logging for the client's request log
- stream opens the file and uploads it chunked; speech reads it whole
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

import httpx

from wit_client.api.client import WitClient, WitError
from wit_client.api.models import ContextLike, WitContext


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def _build_context(args: argparse.Namespace) -> ContextLike:
    """Build the context hint from CLI options.

    RULES:
    - --context must decode to a JSON object, else ValueError
    - Without --context, any of the individual flags yields a WitContext
    - No flags at all means no context parameter
    """
    if args.context:
        data = json.loads(args.context)
        if not isinstance(data, dict):
            raise ValueError("--context must be a JSON object")
        return data

    if args.reference_time or args.timezone or args.locale:
        return WitContext(
            reference_time=args.reference_time,
            timezone=args.timezone,
            locale=args.locale,
        )
    return None


def _resolve_audio_file(raw_path: str) -> Path:
    path = Path(raw_path).resolve()
    if not path.is_file():
        print("Error: File not found: {}".format(path), file=sys.stderr)
        sys.exit(1)
    return path


async def _run_command(args: argparse.Namespace) -> Any:
    """Execute the selected operation and return the parsed response."""
    context = _build_context(args)

    async with WitClient(args.token) as client:
        if args.command == "text":
            _status("Sending text query...")
            return await client.text(
                args.query, context, args.msg_id, args.thread_id, args.n_best, args.verbose
            )

        audio_path = Path(args.file)

        if args.command == "speech":
            _status("Sending {} ({} bytes)...".format(audio_path.name, audio_path.stat().st_size))
            return await client.speech(
                audio_path.read_bytes(), context, args.msg_id, args.thread_id, args.n_best
            )

        _status("Streaming {}...".format(audio_path.name))
        with open(audio_path, "rb") as f:
            return await client.stream(f, context, args.msg_id, args.thread_id, args.n_best)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one sub-command per operation."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--token",
        default=None,
        help="Wit access token (default: WIT_ACCESS_TOKEN from the environment).",
    )
    common.add_argument(
        "--context",
        default=None,
        help="Context hint as a raw JSON object, sent unmodified.",
    )
    common.add_argument("--reference-time", default=None, help="ISO-8601 reference time.")
    common.add_argument("--timezone", default=None, help="IANA timezone, e.g. Europe/Stockholm.")
    common.add_argument("--locale", default=None, help="Locale, e.g. en_US.")
    common.add_argument("--msg-id", default=None, help="Id to assign to the processed message.")
    common.add_argument("--thread-id", default=None, help="Id grouping requests of one conversation.")
    common.add_argument(
        "-n",
        "--n-best",
        type=int,
        default=None,
        help="Number of n-best trait entities to return.",
    )
    common.add_argument("--debug", action="store_true", help="Log outgoing requests to stderr.")

    parser = argparse.ArgumentParser(
        prog="wit_client",
        description="Extract meaning from text or WAV audio with the Wit.ai API.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    text_cmd = sub.add_parser("text", parents=[common], help="Send a text query.")
    text_cmd.add_argument("query", help="The user's query (1-255 characters).")
    text_cmd.add_argument(
        "--verbose",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Ask for auxiliary information about entities.",
    )

    speech_cmd = sub.add_parser("speech", parents=[common], help="Send a whole WAV file.")
    speech_cmd.add_argument("file", help="Path to the WAV file.")

    stream_cmd = sub.add_parser("stream", parents=[common], help="Stream a WAV file chunked.")
    stream_cmd.add_argument("file", help="Path to the WAV file.")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    if args.command in ("speech", "stream"):
        args.file = str(_resolve_audio_file(args.file))

    try:
        result = asyncio.run(_run_command(args))
    except (WitError, httpx.HTTPError, ValueError, TypeError, OSError) as exc:
        print("Error: {}".format(exc), file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
