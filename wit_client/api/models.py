"""Context hint dataclass and its query-string encoding.

WHY: Every Wit endpoint accepts an optional ``context`` query parameter
carrying the reference time, timezone, locale, and coordinates used to
resolve relative expressions ("tomorrow at 5"). A typed record makes the
known fields explicit while still letting callers pass a raw dict.

HOW: WitContext maps 1:1 to the JSON object the service expects.
encode_context() turns whatever the caller supplied into the single
string that goes into the query string.

RULES:
- All WitContext fields are optional; unset fields are not sent
- Plain dicts are passed through unmodified (only JSON-encoded)
- Pre-encoded strings are sent as-is
- None means "no context parameter at all"
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union


@dataclass
class WitContext:
    """Structured context hint for a Wit request.

    RULES:
    - reference_time: ISO-8601 timestamp, e.g. "2014-10-30T12:18:45-07:00"
    - timezone: IANA zone name, e.g. "America/Los_Angeles"
    - locale: language_REGION, e.g. "en_US"
    - coords: {"lat": float, "long": float}
    """

    reference_time: Optional[str] = None
    timezone: Optional[str] = None
    locale: Optional[str] = None
    coords: Optional[Dict[str, float]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON-ready dict, dropping fields that are not set."""
        data: Dict[str, Any] = {}
        if self.reference_time is not None:
            data["reference_time"] = self.reference_time
        if self.timezone is not None:
            data["timezone"] = self.timezone
        if self.locale is not None:
            data["locale"] = self.locale
        if self.coords is not None:
            data["coords"] = dict(self.coords)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> WitContext:
        """Build a WitContext from a plain dict; unknown keys are ignored."""
        return cls(
            reference_time=data.get("reference_time"),
            timezone=data.get("timezone"),
            locale=data.get("locale"),
            coords=data.get("coords"),
        )


ContextLike = Union[WitContext, Dict[str, Any], str, None]


def encode_context(context: ContextLike) -> Optional[str]:
    """Encode a context hint into its query-string value.

    WHY: The service reads ``context`` as a JSON document inside a single
    query parameter, so nested objects must be serialized first.

    HOW: None stays None (parameter omitted). Strings are assumed to be
    already encoded. Dicts and WitContext become compact JSON.

    RULES:
    - Dict contents are not validated or rewritten
    - Raises TypeError for any other type
    """
    if context is None:
        return None
    if isinstance(context, str):
        return context
    if isinstance(context, WitContext):
        context = context.to_dict()
    if isinstance(context, dict):
        return json.dumps(context, separators=(",", ":"))
    raise TypeError(
        "context must be a WitContext, dict, str or None, got {}".format(
            type(context).__name__
        )
    )
