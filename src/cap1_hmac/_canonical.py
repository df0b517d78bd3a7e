"""Canonical forms of request headers, query strings and paths for CAP1 signing.

Signer and verifier must produce byte-identical output from these helpers, so every
function here is pure and depends only on its arguments.
"""

from __future__ import annotations

import base64
import hashlib
import posixpath
import re
import urllib.parse
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

# Headers that only describe the current connection; intermediaries may rewrite them.
HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
    }
)

CAP_DATE_HEADER = "X-Cap-Date"

# quote() always keeps A-Z a-z 0-9 _ . - ~; these complete the unreserved URI component set
_URI_COMPONENT_SAFE = "!*'()"

_CAP_DATE_FORMAT = "%Y%m%dT%H%M%SZ"

# ECMAScript WhiteSpace and LineTerminator; narrower than str.isspace() (no \x1c-\x1f or \x85)
_WHITESPACE = (
    "\t\n\x0b\x0c\r \xa0\u1680"
    + "".join(chr(c) for c in range(0x2000, 0x200B))
    + "\u2028\u2029\u202f\u205f\u3000\ufeff"
)

_WHITESPACE_RE = re.compile(f"[{re.escape(_WHITESPACE)}]+")


def to_url_safe_base64(raw: bytes) -> str:
    """Base64-encode *raw* with ``-``/``_`` substitutions and no ``=`` padding."""
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def url_safe_sha512(text: str) -> str:
    return to_url_safe_base64(hashlib.sha512(text.encode("utf-8")).digest())


def encode_uri_component(value: str) -> str:
    """Percent-encode everything outside the unreserved URI component set (``/`` included)."""
    return urllib.parse.quote(value, safe=_URI_COMPONENT_SAFE)


def trim_all(value: Any) -> str:
    """Collapse whitespace runs to one space outside double-quoted segments and strip the ends.

    The value is split on ``"``; even-index segments are outside quotes, odd-index
    segments are inside, kept verbatim and re-wrapped in quotes, so an unmatched
    quote is closed at the end of the value.
    """
    parts = str(value).split('"')
    rebuilt = "".join(
        f'"{part}"' if i % 2 else _WHITESPACE_RE.sub(" ", part) for i, part in enumerate(parts)
    )
    return rebuilt.strip(_WHITESPACE)


def lowercase_headers(headers: Mapping[str, Any]) -> dict[str, Any]:
    """Lower-case header names; a repeated name keeps the last value seen."""
    lowered: dict[str, Any] = {}
    for name, value in headers.items():
        lowered[name.lower()] = value
    return lowered


def strip_hop_by_hop(headers: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of *headers* without hop-by-hop headers."""
    return {name: value for name, value in headers.items() if name.lower() not in HOP_BY_HOP_HEADERS}


def find_header(headers: Mapping[str, Any], name: str) -> Any | None:
    """Case-insensitive header lookup; the last matching entry wins."""
    wanted = name.lower()
    found = None
    for key, value in headers.items():
        if key.lower() == wanted:
            found = value
    return found


def create_canonical_headers(headers: Mapping[str, Any]) -> str:
    lowered = lowercase_headers(headers)
    return "".join(f"{name}:{trim_all(lowered[name])}\n" for name in sorted(lowered))


def create_signed_headers(headers: Mapping[str, Any]) -> str:
    return ";".join(sorted(lowercase_headers(headers)))


def create_canonical_query_string(query_string: str | None) -> str:
    """Decode and re-encode each ``name=value`` pair, then sort the encoded pairs.

    Only the first ``=`` of a pair separates name from value; a pair with no ``=``
    has an empty value.
    """
    if not query_string:
        return ""
    pairs = []
    for pair in query_string.split("&"):
        name, _, value = pair.partition("=")
        name = encode_uri_component(urllib.parse.unquote(name))
        value = encode_uri_component(urllib.parse.unquote(value))
        pairs.append(f"{name}={value}")
    return "&".join(sorted(pairs))


def normalize_path(path: str) -> str:
    """Resolve ``.``, ``..`` and repeated separators, keeping any trailing slash."""
    if not path:
        return "."
    normalized = posixpath.normpath(path)
    # normpath() preserves exactly two leading slashes (POSIX implementation-defined)
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    if path.endswith("/") and not normalized.endswith("/"):
        normalized += "/"
    return normalized


def create_canonical_uri(path: str) -> str:
    return encode_uri_component(normalize_path(urllib.parse.unquote(path)))


def create_canonical_request(
    *,
    method: str,
    canonical_uri: str,
    canonical_query_string: str,
    canonical_headers: str,
    signed_headers: str,
) -> str:
    return "\n".join(
        [
            method.upper(),
            canonical_uri,
            canonical_query_string,
            canonical_headers,
            signed_headers,
        ]
    )


def as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def format_cap_date(moment: datetime) -> str:
    """Format *moment* as ``YYYYMMDDTHHMMSSZ``; naive datetimes are taken as UTC."""
    return as_utc(moment).strftime(_CAP_DATE_FORMAT)


def parse_cap_date(value: Any) -> datetime:
    """Parse a ``YYYYMMDDTHHMMSSZ`` value into an aware UTC datetime.

    Raises ``ValueError`` if *value* is not in that form.
    """
    return datetime.strptime(str(value), _CAP_DATE_FORMAT).replace(tzinfo=timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


def date_only(cap_date: str) -> str:
    """Return the ``YYYYMMDD`` part of a compact date."""
    return cap_date.partition("T")[0]
