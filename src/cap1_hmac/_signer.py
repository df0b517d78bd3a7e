"""CAP1-HMAC-SHA512 request signing.

Builds the canonical request from the caller's headers, method, path and query string,
derives the per-(secret, date, host) signing key and assembles the ``Authorization``
value. The caller's header mapping is never modified; all work happens on a copy.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from cap1_hmac._canonical import (
    CAP_DATE_HEADER,
    create_canonical_headers,
    create_canonical_query_string,
    create_canonical_request,
    create_canonical_uri,
    create_signed_headers,
    find_header,
    format_cap_date,
    parse_cap_date,
    strip_hop_by_hop,
    utc_now,
)
from cap1_hmac._errors import InvalidDateError, MissingHostHeaderError
from cap1_hmac._signing_key import (
    ALGORITHM,
    compute_signature,
    create_credential,
    create_credential_scope,
    create_string_to_sign,
    derive_signing_key,
)

logger = logging.getLogger(__name__)

DEFAULT_METHOD = "GET"
DEFAULT_PATH = "/"


@dataclass(frozen=True)
class SignatureResult:
    """Everything a client needs to attach a CAP1 signature to a request."""

    algorithm: str
    authorization: str
    credential: str
    x_cap_date: str
    signed_headers: str
    signature: str

    def as_headers(self) -> dict[str, str]:
        """Return the ``Authorization`` and ``X-Cap-Date`` headers to send."""
        return {"Authorization": self.authorization, CAP_DATE_HEADER: self.x_cap_date}

    def as_dict(self) -> dict[str, str]:
        return {
            "algorithm": self.algorithm,
            "authorization": self.authorization,
            "credential": self.credential,
            "x-cap-date": self.x_cap_date,
            "signedHeaders": self.signed_headers,
            "signature": self.signature,
        }


def sign(
    *,
    headers: Mapping[str, Any],
    key: str | bytes,
    key_id: str,
    method: str | None = DEFAULT_METHOD,
    path: str | None = DEFAULT_PATH,
    query_string: str | None = "",
    date: datetime | None = None,
) -> SignatureResult:
    """Sign a request.

    If *headers* carry an ``X-Cap-Date`` it is used as the signing date; otherwise *date*
    (default: the current UTC time) is used and signed as ``X-Cap-Date``. Either way the
    date is returned in the result so the caller can attach it. Verification passes the
    received request's date as *date* so it never signs with a fresh timestamp.

    Raises ``MissingHostHeaderError`` when no ``Host`` header is present and
    ``InvalidDateError`` when a supplied ``X-Cap-Date`` is malformed.
    """
    host = find_header(headers, "host")
    if not host:
        raise MissingHostHeaderError()
    host = str(host)

    signing_headers = strip_hop_by_hop(headers)

    supplied_date = find_header(headers, CAP_DATE_HEADER)
    if supplied_date is not None:
        try:
            cap_date = format_cap_date(parse_cap_date(supplied_date))
        except ValueError as exc:
            raise InvalidDateError(f"Invalid {CAP_DATE_HEADER} header: {supplied_date!r}") from exc
    else:
        cap_date = format_cap_date(date if date is not None else utc_now())
        signing_headers[CAP_DATE_HEADER] = cap_date

    canonical_headers = create_canonical_headers(signing_headers)
    signed_headers = create_signed_headers(signing_headers)
    credential_scope = create_credential_scope(cap_date=cap_date, host=host)
    credential = create_credential(key_id=key_id, credential_scope=credential_scope)

    canonical_request = create_canonical_request(
        method=method or DEFAULT_METHOD,
        canonical_uri=create_canonical_uri(DEFAULT_PATH if path is None else path),
        canonical_query_string=create_canonical_query_string(query_string),
        canonical_headers=canonical_headers,
        signed_headers=signed_headers,
    )
    string_to_sign = create_string_to_sign(
        cap_date=cap_date,
        credential_scope=credential_scope,
        canonical_request=canonical_request,
    )

    signing_key = derive_signing_key(secret=key, cap_date=cap_date, host=host)
    signature = compute_signature(signing_key=signing_key, string_to_sign=string_to_sign)

    authorization = f"{ALGORITHM} Credential={credential},SignedHeaders={signed_headers},Signature={signature}"
    logger.debug("Signed request for credential %s over headers %s", credential, signed_headers)

    return SignatureResult(
        algorithm=ALGORITHM,
        authorization=authorization,
        credential=credential,
        x_cap_date=cap_date,
        signed_headers=signed_headers,
        signature=signature,
    )
