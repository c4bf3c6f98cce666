"""cryptoballot - signature requests for blind-signature voting.

A voter submits a self-signed request carrying a (possibly blinded) ballot; the
authority validates it and countersigns the ballot bytes without reading them.
"""

from cryptoballot.errors import (
    CheckOutcome,
    ErrorKind,
    FormatError,
    IdentityMismatch,
    InvalidBallotEncoding,
    InvalidPublicKey,
    InvalidSignatureFormat,
    SignatureRequestError,
    SignatureVerificationFailed,
    SigningError,
)
from cryptoballot.keys import DEFAULT_SCHEME, KeyScheme, RSAPublicKey, RSASignature, get_scheme
from cryptoballot.settings import Settings, load_settings
from cryptoballot.signature_request import (
    SignatureRequest,
    check_signature_request,
    sign_ballot,
    transcript_bytes,
    verify_request_signature,
)
from cryptoballot.wire import DELIMITER, join_fields, split_fields

__all__ = [
    "CheckOutcome",
    "DEFAULT_SCHEME",
    "DELIMITER",
    "ErrorKind",
    "FormatError",
    "IdentityMismatch",
    "InvalidBallotEncoding",
    "InvalidPublicKey",
    "InvalidSignatureFormat",
    "KeyScheme",
    "RSAPublicKey",
    "RSASignature",
    "Settings",
    "SignatureRequest",
    "SignatureRequestError",
    "SignatureVerificationFailed",
    "SigningError",
    "check_signature_request",
    "get_scheme",
    "join_fields",
    "load_settings",
    "sign_ballot",
    "split_fields",
    "transcript_bytes",
    "verify_request_signature",
]
