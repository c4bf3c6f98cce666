from __future__ import annotations

from dataclasses import dataclass
import os


DEFAULT_MIN_KEY_BITS = 2048


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must be >= 0")
    return value


@dataclass(frozen=True)
class Settings:
    """
    Knobs for parsing untrusted signature requests.

    min_key_bits: smallest RSA modulus accepted for a voter key
    max_request_bytes: reject raw requests larger than this (0 = no limit)
    """
    min_key_bits: int = DEFAULT_MIN_KEY_BITS
    max_request_bytes: int = 0


def load_settings() -> Settings:
    """
    Reads settings from the environment:
      CRYPTOBALLOT_MIN_KEY_BITS
      CRYPTOBALLOT_MAX_REQUEST_BYTES
    """
    return Settings(
        min_key_bits=_int_env("CRYPTOBALLOT_MIN_KEY_BITS", DEFAULT_MIN_KEY_BITS),
        max_request_bytes=_int_env("CRYPTOBALLOT_MAX_REQUEST_BYTES", 0),
    )
