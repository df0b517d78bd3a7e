"""Tests for the package's public surface."""

from __future__ import annotations

import cap1_hmac
from cap1_hmac._httpx_auth import Cap1Auth
from cap1_hmac._signer import sign
from cap1_hmac._verifier import verify


class TestPublicApi:
    def test_reexports(self) -> None:
        assert cap1_hmac.sign is sign
        assert cap1_hmac.verify is verify
        assert cap1_hmac.Cap1Auth is Cap1Auth
        assert cap1_hmac.ALGORITHM == "CAP1-HMAC-SHA512"

    def test_all_names_resolve(self) -> None:
        for name in cap1_hmac.__all__:
            assert hasattr(cap1_hmac, name)

    def test_sign_from_package(self) -> None:
        result = cap1_hmac.sign(headers={"Host": "foo.com", "X-Cap-Date": "20170701T221547Z"}, key="k", key_id="i")
        assert result.credential == "i/20170701/foo.com/cap1_request"
