"""Parsing of received ``Authorization: CAP1-HMAC-SHA512 ...`` header values.

Wire format::

    CAP1-HMAC-SHA512 Credential=<keyId>/<date>/<host>/cap1_request,SignedHeaders=<h1;h2>,Signature=<sig>

The values come straight from the network, so nothing here raises on malformed input;
failures are reported as ``None`` or an empty list.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from cap1_hmac._signing_key import ALGORITHM

_PREFIX = f"{ALGORITHM} "

_CREDENTIAL_PREFIX = "Credential="

_SIGNATURE_PREFIX = "Signature="

_SIGNED_HEADERS_RE = re.compile(r"SignedHeaders=(.+),Signature")


@dataclass(frozen=True)
class ParsedAuthorization:
    """Parsed components of a CAP1 Authorization header."""

    algorithm: str
    key_id: str
    credential_scope: str
    signed_headers: tuple[str, ...]
    signature: str


def _split_components(authorization: str | None) -> list[str] | None:
    """Split the text after the algorithm into its three comma-separated components."""
    if not authorization or not authorization.startswith(_PREFIX):
        return None
    parts = authorization[len(_PREFIX):].strip().split(",")
    if len(parts) != 3:
        return None
    return parts


def _credential_segments(credential: str) -> list[str] | None:
    if not credential.startswith(_CREDENTIAL_PREFIX):
        return None
    segments = credential[len(_CREDENTIAL_PREFIX):].split("/")
    if len(segments) != 4 or not segments[0]:
        return None
    return segments


def parse_key_id(authorization: str | None) -> str | None:
    """Return the keyId of a well-formed Authorization value, else ``None``."""
    parts = _split_components(authorization)
    if parts is None:
        return None
    segments = _credential_segments(parts[0])
    if segments is None:
        return None
    return segments[0]


def parse_signed_headers(authorization: str | None) -> list[str]:
    """Return the ``SignedHeaders`` names, or an empty list if none can be found."""
    if not authorization:
        return []
    match = _SIGNED_HEADERS_RE.search(authorization)
    if not match:
        return []
    return match.group(1).split(";")


def parse_authorization(authorization: str | None) -> ParsedAuthorization | None:
    """Parse every component of an Authorization value; ``None`` on any malformation."""
    parts = _split_components(authorization)
    if parts is None:
        return None
    segments = _credential_segments(parts[0])
    if segments is None:
        return None
    signature = parts[2]
    if not signature.startswith(_SIGNATURE_PREFIX):
        return None
    return ParsedAuthorization(
        algorithm=ALGORITHM,
        key_id=segments[0],
        credential_scope="/".join(segments[1:]),
        signed_headers=tuple(parse_signed_headers(authorization)),
        signature=signature[len(_SIGNATURE_PREFIX):],
    )
