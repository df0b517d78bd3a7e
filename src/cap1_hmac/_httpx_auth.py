"""``httpx`` authentication flow that signs outgoing requests with CAP1-HMAC-SHA512."""

from __future__ import annotations

from collections.abc import Generator

import httpx

from cap1_hmac._canonical import CAP_DATE_HEADER
from cap1_hmac._signer import sign


class Cap1Auth(httpx.Auth):
    """Sign each request and attach ``Authorization`` and ``X-Cap-Date``.

    Usage::

        client = httpx.Client(auth=Cap1Auth("someId", "mySecret"))
    """

    def __init__(self, key_id: str, key: str | bytes) -> None:
        self._key_id = key_id
        self._key = key

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        path, _, _ = request.url.raw_path.decode("ascii").partition("?")
        result = sign(
            headers=dict(request.headers.items()),
            key=self._key,
            key_id=self._key_id,
            method=request.method,
            path=path,
            query_string=request.url.query.decode("ascii"),
        )
        request.headers["Authorization"] = result.authorization
        if CAP_DATE_HEADER not in request.headers:
            request.headers[CAP_DATE_HEADER] = result.x_cap_date
        yield request
