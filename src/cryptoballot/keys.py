"""
Public key / signature capabilities.

The signature request only needs a narrow contract from its key material:

  PublicKey.parse(raw, settings=) -> PublicKey  (raises ValueError)
  PublicKey.canonical_string()    -> str        (the text embedded on the wire)
  PublicKey.sha512()              -> bytes      (hex SHA-512 of canonical_string)
  Signature.parse(raw, settings=) -> Signature  (raises ValueError)
  str(Signature)                  -> str
  Signature.verify(pk, message)   -> None       (raises on mismatch)

parse takes the active Settings so a scheme can enforce its own limits (RSA
keys check min_key_bits); schemes without limits ignore it.

RSA + SHA-512 (PKCS#1 v1.5) is the only scheme implemented. Other schemes plug
in as another KeyScheme without touching the request code.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar, Mapping, Optional, Protocol, Type, Union
import base64
import binascii
import hashlib

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from cryptoballot.settings import Settings, load_settings


RSA_SHA512 = "rsa-sha512"


def _as_text(raw: Union[str, bytes, bytearray]) -> str:
    if isinstance(raw, (bytes, bytearray)):
        try:
            return bytes(raw).decode("ascii")
        except UnicodeDecodeError:
            raise ValueError("expected ASCII text") from None
    if isinstance(raw, str):
        return raw
    raise TypeError(f"expected str or bytes, got {type(raw).__name__}")


def b64decode_strict(raw: Union[str, bytes, bytearray]) -> bytes:
    """
    Standard-alphabet, padded base64. Line breaks are ignored (wrapped encodings
    are common); any other non-alphabet byte is an error.
    """
    text = _as_text(raw).replace("\r", "").replace("\n", "")
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error as e:
        raise ValueError(f"invalid base64: {e}") from None


class PublicKey(Protocol):
    scheme: ClassVar[str]

    @classmethod
    def parse(cls, raw: Union[str, bytes, bytearray], *, settings: Optional[Settings] = None) -> "PublicKey":
        ...

    def canonical_string(self) -> str:
        ...

    def sha512(self) -> bytes:
        ...


class Signature(Protocol):
    scheme: ClassVar[str]

    @classmethod
    def parse(cls, raw: Union[str, bytes, bytearray], *, settings: Optional[Settings] = None) -> "Signature":
        ...

    def to_bytes(self) -> bytes:
        ...

    def verify(self, public_key: PublicKey, message: bytes) -> None:
        ...

    def __str__(self) -> str:
        ...


@dataclass(frozen=True, eq=False)
class RSAPublicKey:
    key: rsa.RSAPublicKey
    scheme: ClassVar[str] = RSA_SHA512

    @classmethod
    def parse(cls, raw: Union[str, bytes, bytearray], *, settings: Optional[Settings] = None) -> "RSAPublicKey":
        """
        Accepts base64 of a DER SubjectPublicKeyInfo (the wire form) or PEM text.
        """
        settings = settings or load_settings()
        text = _as_text(raw).strip()
        if not text:
            raise ValueError("empty public key")

        if text.startswith("-----BEGIN"):
            key = serialization.load_pem_public_key(text.encode("ascii"))
        else:
            key = serialization.load_der_public_key(b64decode_strict(text))

        if not isinstance(key, rsa.RSAPublicKey):
            raise ValueError(f"public key is not an RSA key ({type(key).__name__})")
        if key.key_size < settings.min_key_bits:
            raise ValueError(f"RSA key too small: {key.key_size} bits < {settings.min_key_bits}")
        return cls(key=key)

    @classmethod
    def from_key(cls, key: Any) -> "RSAPublicKey":
        if isinstance(key, rsa.RSAPrivateKey):
            key = key.public_key()
        if not isinstance(key, rsa.RSAPublicKey):
            raise TypeError("expected an RSA key")
        return cls(key=key)

    @property
    def key_size(self) -> int:
        return self.key.key_size

    def der(self) -> bytes:
        return self.key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

    def canonical_string(self) -> str:
        return base64.b64encode(self.der()).decode("ascii")

    def sha512(self) -> bytes:
        return hashlib.sha512(self.canonical_string().encode("ascii")).hexdigest().encode("ascii")

    def __str__(self) -> str:
        return self.canonical_string()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RSAPublicKey):
            return NotImplemented
        return self.der() == other.der()

    def __hash__(self) -> int:
        return hash(self.der())


@dataclass(frozen=True)
class RSASignature:
    raw: bytes = field(repr=False)
    scheme: ClassVar[str] = RSA_SHA512

    @classmethod
    def parse(cls, raw: Union[str, bytes, bytearray], *, settings: Optional[Settings] = None) -> "RSASignature":
        sig = b64decode_strict(_as_text(raw).strip())
        if not sig:
            raise ValueError("empty signature")
        return cls(raw=sig)

    @classmethod
    def from_bytes(cls, raw: bytes) -> "RSASignature":
        if not raw:
            raise ValueError("empty signature")
        return cls(raw=bytes(raw))

    def to_bytes(self) -> bytes:
        return self.raw

    def verify(self, public_key: PublicKey, message: bytes) -> None:
        """
        PKCS#1 v1.5 over SHA-512(message).
        Raises cryptography.exceptions.InvalidSignature on mismatch.
        """
        if not isinstance(public_key, RSAPublicKey):
            raise ValueError(f"{self.scheme} signature requires an RSA public key")
        public_key.key.verify(self.raw, message, padding.PKCS1v15(), hashes.SHA512())

    def __str__(self) -> str:
        return base64.b64encode(self.raw).decode("ascii")


@dataclass(frozen=True)
class KeyScheme:
    name: str
    public_key: Type[Any]
    signature: Type[Any]

    def parse_public_key(self, raw: Union[str, bytes, bytearray], settings: Optional[Settings] = None) -> PublicKey:
        return self.public_key.parse(raw, settings=settings)

    def parse_signature(self, raw: Union[str, bytes, bytearray], settings: Optional[Settings] = None) -> Signature:
        return self.signature.parse(raw, settings=settings)


DEFAULT_SCHEME = KeyScheme(name=RSA_SHA512, public_key=RSAPublicKey, signature=RSASignature)

SCHEMES: Mapping[str, KeyScheme] = MappingProxyType({DEFAULT_SCHEME.name: DEFAULT_SCHEME})


def get_scheme(name: str) -> KeyScheme:
    scheme = SCHEMES.get(name)
    if scheme is None:
        raise ValueError(f"Unknown key scheme: {name}")
    return scheme
