"""CAP1-HMAC-SHA512 canonical-request signing and verification for HTTP."""

from cap1_hmac._authorization import ParsedAuthorization, parse_authorization
from cap1_hmac._errors import Cap1Error, ConfigurationError, InvalidDateError, MissingHostHeaderError
from cap1_hmac._httpx_auth import Cap1Auth
from cap1_hmac._key_store import MemoryKeyStore, SecretResolver
from cap1_hmac._signer import SignatureResult, sign
from cap1_hmac._signing_key import ALGORITHM
from cap1_hmac._verifier import verify

__all__ = [
    "ALGORITHM",
    "Cap1Auth",
    "Cap1Error",
    "ConfigurationError",
    "InvalidDateError",
    "MemoryKeyStore",
    "MissingHostHeaderError",
    "ParsedAuthorization",
    "SecretResolver",
    "SignatureResult",
    "parse_authorization",
    "sign",
    "verify",
]
