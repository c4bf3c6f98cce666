"""
Canonical wire form for signature requests.

Five fields in fixed order, separated by a blank line:

  ElectionID \\n\\n RequestID \\n\\n PublicKey \\n\\n Ballot \\n\\n Signature

The same join (minus the Signature field) is the transcript the voter signs.
"""
from __future__ import annotations

from typing import List, Optional, Sequence, Union

from cryptoballot.errors import FormatError


DELIMITER = b"\n\n"

FIELD_NAMES = ("election_id", "request_id", "public_key", "ballot", "signature")
FIELD_COUNT = len(FIELD_NAMES)


def _as_bytes(v: Union[str, bytes, bytearray]) -> bytes:
    if isinstance(v, str):
        return v.encode("utf-8")
    if isinstance(v, (bytes, bytearray)):
        return bytes(v)
    raise TypeError(f"expected str or bytes, got {type(v).__name__}")


def split_fields(raw: Union[str, bytes, bytearray], *, max_bytes: int = 0) -> List[bytes]:
    raw = _as_bytes(raw)
    if max_bytes and len(raw) > max_bytes:
        raise FormatError(f"Signature request too large ({len(raw)} > {max_bytes} bytes)")
    parts = raw.split(DELIMITER)
    if len(parts) != FIELD_COUNT:
        raise FormatError(
            f"Cannot read signature request: expected {FIELD_COUNT} fields, got {len(parts)}"
        )
    return parts


def join_fields(fields: Sequence[Union[str, bytes, bytearray]], *, expected: Optional[int] = None) -> bytes:
    if expected is not None and len(fields) != expected:
        raise ValueError(f"expected {expected} fields, got {len(fields)}")
    return DELIMITER.join(_as_bytes(f) for f in fields)
