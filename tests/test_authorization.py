"""Tests for Authorization header parsing."""

from __future__ import annotations

import pytest

from cap1_hmac._authorization import parse_authorization, parse_key_id, parse_signed_headers

VALID = (
    "CAP1-HMAC-SHA512 Credential=someId/20170702/localhost:8888/cap1_request,"
    "SignedHeaders=host;x-cap-date,Signature=abc-_123"
)


class TestParseKeyId:
    def test_valid(self) -> None:
        assert parse_key_id(VALID) == "someId"

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing(self, value: str | None) -> None:
        assert parse_key_id(value) is None

    @pytest.mark.parametrize(
        "value",
        [
            VALID.replace("CAP1-HMAC-SHA512 ", "CAP1-HMAC-SHA256 "),
            VALID.replace("CAP1-HMAC-SHA512 ", "cap1-hmac-sha512 "),
            VALID.replace("CAP1-HMAC-SHA512 ", "CAP1-HMAC-SHA512"),
            "Bearer token123",
        ],
    )
    def test_wrong_algorithm_prefix(self, value: str) -> None:
        assert parse_key_id(value) is None

    def test_empty_key_id(self) -> None:
        assert parse_key_id(VALID.replace("Credential=someId/", "Credential=/")) is None

    @pytest.mark.parametrize(
        "credential",
        [
            "Credential=someId/20170702/cap1_request",
            "Credential=someId/20170702/localhost:8888/cap1_request/extra",
        ],
    )
    def test_wrong_segment_count(self, credential: str) -> None:
        value = VALID.replace("Credential=someId/20170702/localhost:8888/cap1_request", credential)
        assert parse_key_id(value) is None

    def test_wrong_component_count(self) -> None:
        assert parse_key_id(VALID + ",Extra=1") is None
        assert parse_key_id(VALID.replace(",Signature=abc-_123", "")) is None

    def test_credential_must_come_first(self) -> None:
        value = (
            "CAP1-HMAC-SHA512 SignedHeaders=host;x-cap-date,"
            "Credential=someId/20170702/localhost:8888/cap1_request,Signature=abc"
        )
        assert parse_key_id(value) is None

    def test_surrounding_whitespace_ignored(self) -> None:
        value = VALID.replace("CAP1-HMAC-SHA512 ", "CAP1-HMAC-SHA512   ") + "  "
        assert parse_key_id(value) == "someId"


class TestParseSignedHeaders:
    def test_valid(self) -> None:
        assert parse_signed_headers(VALID) == ["host", "x-cap-date"]

    @pytest.mark.parametrize("value", [None, "", "Bearer token", VALID.replace(",Signature=", ",Sig=")])
    def test_malformed_is_empty(self, value: str | None) -> None:
        assert parse_signed_headers(value) == []


class TestParseAuthorization:
    def test_valid(self) -> None:
        parsed = parse_authorization(VALID)
        assert parsed is not None
        assert parsed.algorithm == "CAP1-HMAC-SHA512"
        assert parsed.key_id == "someId"
        assert parsed.credential_scope == "20170702/localhost:8888/cap1_request"
        assert parsed.signed_headers == ("host", "x-cap-date")
        assert parsed.signature == "abc-_123"

    def test_malformed_key_id(self) -> None:
        assert parse_authorization(VALID.replace("Credential=someId/", "Credential=/")) is None

    def test_missing_signature_label(self) -> None:
        assert parse_authorization(VALID.replace("Signature=", "Sig=")) is None

    def test_never_raises(self) -> None:
        for value in ["CAP1-HMAC-SHA512 ", "CAP1-HMAC-SHA512 ,,", "CAP1-HMAC-SHA512 Credential=////,,"]:
            assert parse_authorization(value) is None
