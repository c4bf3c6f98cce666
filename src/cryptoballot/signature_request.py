"""
Signature Requests

A voter asks the election authority to countersign a (possibly blinded) ballot.
The request is five fields on the wire (see cryptoballot.wire):

  - election_id: authority-assigned election tag
  - request_id:  hex SHA-512 of the voter's public key (canonical string form)
  - public_key:  voter public key, base64 DER
  - ballot:      base64 ballot blob, blinded or not; never inspected here
  - signature:   voter signature over the first four fields joined by the delimiter

Untrusted bytes become a SignatureRequest only through SignatureRequest.parse
(or check_signature_request), which runs every check in a fixed order and
stops at the first failure:

  1. public key parses                -> InvalidPublicKey
  2. request_id == public_key.sha512  -> IdentityMismatch
  3. ballot is base64                 -> InvalidBallotEncoding
  4. signature parses                 -> InvalidSignatureFormat
  5. signature verifies               -> SignatureVerificationFailed

Countersigning (sign_ballot) happens after the authority's own policy decision
and produces a new Signature; the request is never mutated.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union
import hashlib
import hmac
import logging

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa, utils

from cryptoballot.errors import (
    CheckOutcome,
    FormatError,
    IdentityMismatch,
    InvalidBallotEncoding,
    InvalidPublicKey,
    InvalidSignatureFormat,
    SignatureRequestError,
    SignatureVerificationFailed,
    SigningError,
)
from cryptoballot.keys import DEFAULT_SCHEME, KeyScheme, PublicKey, RSASignature, Signature, b64decode_strict
from cryptoballot.settings import Settings, load_settings
from cryptoballot.wire import DELIMITER, join_fields, split_fields


log = logging.getLogger(__name__)

_PARSE_ERRORS = (ValueError, TypeError, UnsupportedAlgorithm)


def transcript_bytes(election_id: str, request_id: bytes, public_key: PublicKey, ballot: bytes) -> bytes:
    """The exact bytes a voter signs: four fields, signature excluded."""
    return join_fields([election_id, request_id, public_key.canonical_string(), ballot])


def verify_request_signature(
    *,
    election_id: str,
    request_id: bytes,
    public_key: PublicKey,
    ballot: bytes,
    signature: Signature,
) -> None:
    message = transcript_bytes(election_id, request_id, public_key, ballot)
    try:
        signature.verify(public_key, message)
    except InvalidSignature as e:
        raise SignatureVerificationFailed(
            "Invalid signature. The signature provided does not sign this request "
            "or does not match the public key provided.",
            cause=e,
        )
    except _PARSE_ERRORS as e:
        raise SignatureVerificationFailed(f"Invalid signature: {e}", cause=e)


def check_ballot_encoding(ballot: bytes) -> bytes:
    try:
        return b64decode_strict(ballot)
    except ValueError as e:
        raise InvalidBallotEncoding("Ballot must be base64 encoded.", cause=e)


@dataclass(frozen=True)
class SignatureRequest:
    election_id: str
    request_id: bytes
    public_key: PublicKey
    ballot: bytes
    signature: Signature

    def __post_init__(self) -> None:
        if not self.election_id:
            raise FormatError("Election ID must not be empty")
        for name, value in (("election_id", self.election_id.encode("utf-8")),
                            ("request_id", self.request_id),
                            ("ballot", self.ballot)):
            if DELIMITER in value:
                raise FormatError(f"{name} must not contain the field delimiter")
            # a trailing LF merges with the delimiter and shifts the split
            if value.endswith(b"\n"):
                raise FormatError(f"{name} must not end with a line feed")

    @classmethod
    def parse(
        cls,
        raw: Union[str, bytes, bytearray],
        *,
        settings: Optional[Settings] = None,
        scheme: KeyScheme = DEFAULT_SCHEME,
    ) -> "SignatureRequest":
        """
        Decode and fully validate an untrusted signature request.
        Raises a SignatureRequestError subclass; never returns a partial request.

        With no explicit settings the environment is read on every call; a
        malformed CRYPTOBALLOT_* variable raises a plain ValueError (a deployment
        fault, not a request fault). Long-running callers should load_settings()
        once and pass the result.
        """
        settings = settings or load_settings()
        try:
            return cls._parse(raw, settings=settings, scheme=scheme)
        except SignatureRequestError as e:
            log.debug("rejected signature request: %s (%s)", e.kind.value, e)
            raise

    @classmethod
    def _parse(cls, raw: Union[str, bytes, bytearray], *, settings: Settings, scheme: KeyScheme) -> "SignatureRequest":
        election_raw, request_id, public_key_raw, ballot, signature_raw = split_fields(
            raw, max_bytes=settings.max_request_bytes
        )

        if not election_raw:
            raise FormatError("Election ID must not be empty")
        try:
            election_id = election_raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FormatError("Election ID must be UTF-8 text", cause=e)

        try:
            public_key = scheme.parse_public_key(public_key_raw, settings)
        except _PARSE_ERRORS as e:
            raise InvalidPublicKey(f"Invalid public key: {e}", cause=e)

        if not hmac.compare_digest(request_id, public_key.sha512()):
            raise IdentityMismatch(
                "Invalid Request ID. A Request ID must be the (hex encoded) SHA-512 of the voter's public key."
            )

        check_ballot_encoding(ballot)

        try:
            signature = scheme.parse_signature(signature_raw, settings)
        except _PARSE_ERRORS as e:
            raise InvalidSignatureFormat(f"Invalid signature format: {e}", cause=e)

        req = cls(
            election_id=election_id,
            request_id=request_id,
            public_key=public_key,
            ballot=ballot,
            signature=signature,
        )
        req.verify_signature()
        return req

    def transcript(self) -> bytes:
        return transcript_bytes(self.election_id, self.request_id, self.public_key, self.ballot)

    def verify_signature(self) -> None:
        """Verify the voter's signature over the request transcript."""
        verify_request_signature(
            election_id=self.election_id,
            request_id=self.request_id,
            public_key=self.public_key,
            ballot=self.ballot,
            signature=self.signature,
        )

    def encode(self) -> bytes:
        return join_fields([
            self.election_id,
            self.request_id,
            self.public_key.canonical_string(),
            self.ballot,
            str(self.signature),
        ])

    def __str__(self) -> str:
        return self.encode().decode("utf-8")

    def raw_ballot(self) -> bytes:
        return check_ballot_encoding(self.ballot)

    def sign_ballot(self, private_key: Any) -> RSASignature:
        """Countersign this request's ballot with the authority key."""
        return sign_ballot(self.raw_ballot(), private_key)


def check_signature_request(
    raw: Union[str, bytes, bytearray],
    *,
    settings: Optional[Settings] = None,
    scheme: KeyScheme = DEFAULT_SCHEME,
) -> CheckOutcome:
    """
    Like SignatureRequest.parse but returns a CheckOutcome for request faults.
    Settings are resolved before any request is looked at, so a bad environment
    raises ValueError instead of being reported as a rejected request.
    """
    settings = settings or load_settings()
    try:
        return CheckOutcome(request=SignatureRequest.parse(raw, settings=settings, scheme=scheme))
    except SignatureRequestError as e:
        return CheckOutcome(error=e)


def sign_ballot(raw_ballot: bytes, private_key: Any) -> RSASignature:
    """
    Authority countersignature: RSA PKCS#1 v1.5 over SHA-512(raw_ballot).

    raw_ballot is the base64-decoded ballot; it is treated as opaque bytes since
    a blinded ballot must stay unreadable to the authority. RSA blinding
    randomness comes from the OS CSPRNG inside the cryptography backend.
    """
    if not isinstance(raw_ballot, (bytes, bytearray)):
        raise TypeError("raw_ballot must be bytes")
    if not isinstance(private_key, rsa.RSAPrivateKey):
        raise SigningError(f"authority key must be an RSA private key, got {type(private_key).__name__}")

    digest = hashlib.sha512(bytes(raw_ballot)).digest()
    try:
        raw_signature = private_key.sign(digest, padding.PKCS1v15(), utils.Prehashed(hashes.SHA512()))
    except _PARSE_ERRORS as e:
        raise SigningError(f"Could not sign ballot: {e}", cause=e)

    log.info("countersigned ballot with %d-bit authority key", private_key.key_size)
    return RSASignature.from_bytes(raw_signature)
