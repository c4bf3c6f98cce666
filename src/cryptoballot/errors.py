"""
Error taxonomy for signature requests.

Every rejection carries an ErrorKind so callers can branch on which contract
was violated without parsing messages. Kinds are listed in the order the
validator checks them.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from cryptoballot.signature_request import SignatureRequest


class ErrorKind(str, Enum):
    FORMAT = "format_error"
    INVALID_PUBLIC_KEY = "invalid_public_key"
    IDENTITY_MISMATCH = "identity_mismatch"
    INVALID_BALLOT_ENCODING = "invalid_ballot_encoding"
    INVALID_SIGNATURE_FORMAT = "invalid_signature_format"
    SIGNATURE_VERIFICATION_FAILED = "signature_verification_failed"
    SIGNING_ERROR = "signing_error"


class SignatureRequestError(ValueError):
    kind: ErrorKind

    def __init__(self, message: str, *, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class FormatError(SignatureRequestError):
    kind = ErrorKind.FORMAT


class InvalidPublicKey(SignatureRequestError):
    kind = ErrorKind.INVALID_PUBLIC_KEY


class IdentityMismatch(SignatureRequestError):
    kind = ErrorKind.IDENTITY_MISMATCH


class InvalidBallotEncoding(SignatureRequestError):
    kind = ErrorKind.INVALID_BALLOT_ENCODING


class InvalidSignatureFormat(SignatureRequestError):
    kind = ErrorKind.INVALID_SIGNATURE_FORMAT


class SignatureVerificationFailed(SignatureRequestError):
    kind = ErrorKind.SIGNATURE_VERIFICATION_FAILED


class SigningError(SignatureRequestError):
    kind = ErrorKind.SIGNING_ERROR


@dataclass(frozen=True)
class CheckOutcome:
    """
    Tagged result of checking untrusted bytes.
    Exactly one of request / error is set.
    """
    request: Optional["SignatureRequest"] = None
    error: Optional[SignatureRequestError] = None

    def __post_init__(self) -> None:
        if (self.request is None) == (self.error is None):
            raise ValueError("CheckOutcome needs exactly one of request / error")

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error is not None else None
