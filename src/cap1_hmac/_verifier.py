"""CAP1-HMAC-SHA512 request verification.

Every failure reachable from request content yields ``False`` with no further detail;
the reason is only logged. The single suspension point is the secret lookup.
"""

from __future__ import annotations

import hmac
import inspect
import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta
from typing import Any

from cap1_hmac._authorization import parse_key_id, parse_signed_headers
from cap1_hmac._canonical import CAP_DATE_HEADER, as_utc, find_header, parse_cap_date, utc_now
from cap1_hmac._errors import ConfigurationError
from cap1_hmac._signer import DEFAULT_METHOD, DEFAULT_PATH, sign

logger = logging.getLogger(__name__)

DEFAULT_MAX_CLOCK_SKEW = timedelta(minutes=15)


async def _resolve_secret(secret_resolver: Callable[[str], Any], key_id: str) -> str | bytes | None:
    secret = secret_resolver(key_id)
    if inspect.isawaitable(secret):
        secret = await secret
    return secret


async def verify(
    *,
    headers: Mapping[str, str],
    secret_resolver: Callable[[str], Any],
    method: str | None = DEFAULT_METHOD,
    path: str | None = DEFAULT_PATH,
    query_string: str | None = "",
    now: datetime | None = None,
    max_clock_skew: timedelta = DEFAULT_MAX_CLOCK_SKEW,
) -> bool:
    """Return whether the request described by the arguments carries a valid CAP1 signature.

    *secret_resolver* is called with the keyId from the ``Authorization`` header and may
    return the secret directly or an awaitable of it. Raises ``TypeError`` only when
    *secret_resolver* is not callable.
    """
    if not callable(secret_resolver):
        raise TypeError("secret_resolver is not callable")

    authorization = find_header(headers, "authorization")
    cap_date_value = find_header(headers, CAP_DATE_HEADER)
    if cap_date_value is None:
        logger.debug("Rejected request without %s header", CAP_DATE_HEADER)
        return False
    try:
        cap_date = parse_cap_date(cap_date_value)
    except ValueError:
        logger.debug("Rejected request with malformed %s header", CAP_DATE_HEADER)
        return False

    reference = as_utc(now) if now is not None else utc_now()
    if abs(reference - cap_date) > max_clock_skew:
        logger.debug("Rejected request dated %s outside the %s window", cap_date_value, max_clock_skew)
        return False

    key_id = parse_key_id(authorization)
    if key_id is None:
        logger.debug("Rejected request with malformed Authorization header")
        return False

    # Authorization never names itself, so it drops out here
    signed = set(parse_signed_headers(authorization))
    signed_request_headers = {name: value for name, value in headers.items() if name.lower() in signed}

    try:
        secret = await _resolve_secret(secret_resolver, key_id)
    except Exception:
        logger.warning("Secret lookup failed for key %r", key_id, exc_info=True)
        return False
    if not secret:
        logger.debug("Rejected request for unknown key %r", key_id)
        return False

    try:
        expected = sign(
            headers=signed_request_headers,
            key=secret,
            key_id=key_id,
            method=method,
            path=path,
            query_string=query_string,
            date=cap_date,
        )
    except ConfigurationError as exc:
        logger.debug("Rejected request for key %r: %s", key_id, exc)
        return False

    authorized = hmac.compare_digest(expected.authorization.encode("utf-8"), str(authorization).encode("utf-8"))
    if not authorized:
        logger.debug("Rejected request for key %r: signature mismatch", key_id)
    return authorized
