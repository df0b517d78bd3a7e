from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from fastapi.testclient import TestClient

from cap1_hmac._app import create_app
from cap1_hmac._key_store import MemoryKeyStore
from cap1_hmac._signer import sign

SECRETS = {"someId": "mySecret"}

CAP_DATE = "20170702T204657Z"


def make_signed_headers(
    headers: dict[str, Any] | None = None,
    *,
    key: str = "mySecret",
    key_id: str = "someId",
    method: str = "GET",
    path: str = "/somewhere",
    query_string: str = "page=12",
    cap_date: str | None = CAP_DATE,
) -> dict[str, Any]:
    """Return a copy of *headers* carrying a valid Authorization and X-Cap-Date."""
    request_headers = dict(headers if headers is not None else {"host": "localhost:8888", "connection": "close"})
    if cap_date is not None:
        request_headers["x-cap-date"] = cap_date
    result = sign(
        headers=request_headers,
        key=key,
        key_id=key_id,
        method=method,
        path=path,
        query_string=query_string,
    )
    request_headers["authorization"] = result.authorization
    request_headers["x-cap-date"] = result.x_cap_date
    return request_headers


@pytest.fixture()
def key_store() -> MemoryKeyStore:
    return MemoryKeyStore(SECRETS)


@pytest.fixture()
def counting_resolver() -> Callable[[str], Any]:
    """Resolver over ``SECRETS`` that records every keyId it is asked for."""

    async def resolve(key_id: str) -> str | None:
        resolve.calls.append(key_id)  # type: ignore[attr-defined]
        return SECRETS.get(key_id)

    resolve.calls = []  # type: ignore[attr-defined]
    return resolve


@pytest.fixture()
def test_client(key_store: MemoryKeyStore) -> TestClient:
    return TestClient(create_app(key_store))


@pytest.fixture()
def signed_headers() -> Callable[..., dict[str, Any]]:
    return make_signed_headers
