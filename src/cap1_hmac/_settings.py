"""Environment-variable configuration for the verifying app."""

from __future__ import annotations

import json
import os
from datetime import timedelta

from cap1_hmac._errors import ConfigurationError


def get_secrets() -> dict[str, str]:
    """Return the ``keyId -> secret`` map from ``CAP1_SECRETS_JSON`` (default: empty)."""
    raw = os.environ.get("CAP1_SECRETS_JSON", "").strip()
    if not raw:
        return {}
    try:
        secrets = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"CAP1_SECRETS_JSON is not valid JSON: {exc}") from exc
    if not isinstance(secrets, dict):
        raise ConfigurationError("CAP1_SECRETS_JSON must be a JSON object of keyId -> secret")
    return {str(key_id): str(secret) for key_id, secret in secrets.items()}


def get_max_clock_skew() -> timedelta:
    """Return the accepted clock skew from ``CAP1_MAX_CLOCK_SKEW_SECONDS`` (default: 900)."""
    raw = os.environ.get("CAP1_MAX_CLOCK_SKEW_SECONDS", "900")
    try:
        seconds = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"CAP1_MAX_CLOCK_SKEW_SECONDS must be an integer, got {raw!r}") from exc
    if seconds < 0:
        raise ConfigurationError("CAP1_MAX_CLOCK_SKEW_SECONDS must not be negative")
    return timedelta(seconds=seconds)
