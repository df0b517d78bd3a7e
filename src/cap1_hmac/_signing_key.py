"""Credential scope, signing-key derivation and the final CAP1 signature."""

from __future__ import annotations

import hashlib
import hmac

from cap1_hmac._canonical import date_only, to_url_safe_base64, url_safe_sha512

ALGORITHM = "CAP1-HMAC-SHA512"

CREDENTIAL_TERMINATION_STRING = "cap1_request"

_KEY_PREFIX = b"CAP1"


def _to_bytes(value: str | bytes) -> bytes:
    if isinstance(value, bytes):
        return value
    return str(value).encode("utf-8")


def hmac_sha512(key: bytes, data: str | bytes) -> bytes:
    return hmac.new(key, _to_bytes(data), hashlib.sha512).digest()


def create_credential_scope(*, cap_date: str, host: str) -> str:
    return f"{date_only(cap_date)}/{host.lower()}/{CREDENTIAL_TERMINATION_STRING}"


def create_credential(*, key_id: str, credential_scope: str) -> str:
    return f"{key_id}/{credential_scope}"


def create_string_to_sign(*, cap_date: str, credential_scope: str, canonical_request: str) -> str:
    """Join algorithm, date, scope and the hashed canonical request with ``\\n``."""
    return "\n".join(
        [
            ALGORITHM,
            cap_date,
            credential_scope,
            url_safe_sha512(canonical_request),
        ]
    )


def derive_signing_key(*, secret: str | bytes, cap_date: str, host: str) -> bytes:
    """Run the HMAC ladder ``CAP1+secret -> date -> host -> cap1_request``.

    Each step keys the next one with its raw digest. *host* is used as received;
    only the credential scope lower-cases it.
    """
    k_date = hmac_sha512(_KEY_PREFIX + _to_bytes(secret), date_only(cap_date))
    k_host = hmac_sha512(k_date, host)
    return hmac_sha512(k_host, CREDENTIAL_TERMINATION_STRING)


def compute_signature(*, signing_key: bytes, string_to_sign: str) -> str:
    return to_url_safe_base64(hmac_sha512(signing_key, string_to_sign))
