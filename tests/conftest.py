import base64
import hashlib
from typing import Callable, List, Optional

import pytest
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

DELIM = b"\n\n"


def _rsa_key(bits: int = 2048) -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=bits)


def _pub_text(private_key) -> bytes:
    der = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return base64.b64encode(der)


@pytest.fixture(scope="session")
def voter_key() -> rsa.RSAPrivateKey:
    return _rsa_key()


@pytest.fixture(scope="session")
def other_voter_key() -> rsa.RSAPrivateKey:
    return _rsa_key()


@pytest.fixture(scope="session")
def authority_key() -> rsa.RSAPrivateKey:
    return _rsa_key()


@pytest.fixture
def request_fields(voter_key) -> Callable[..., List[bytes]]:
    """
    Builds the five wire fields for a voter-signed request, independently of the
    library under test. The signature covers ElectionID, RequestID, PublicKey, Ballot.
    """
    def build(
        *,
        key=None,
        election_id: bytes = b"E1",
        ballot: bytes = base64.b64encode(b"myvote"),
        request_id: Optional[bytes] = None,
    ) -> List[bytes]:
        key = key or voter_key
        pk = _pub_text(key)
        rid = request_id if request_id is not None else hashlib.sha512(pk).hexdigest().encode("ascii")
        transcript = DELIM.join([election_id, rid, pk, ballot])
        sig = key.sign(transcript, padding.PKCS1v15(), hashes.SHA512())
        return [election_id, rid, pk, ballot, base64.b64encode(sig)]

    return build
