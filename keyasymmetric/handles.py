"""Loaded key handles.

A format loader returns exactly one of two variants: ``PrivateKeyHandle`` or
``PublicKeyHandle``. The variant is chosen at the moment a key decodes, so the
key kind is never guessed from the format afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed448, ed25519, rsa

from keyasymmetric.exceptions import UnsupportedAlgorithmError

PRIVATE = "private"
PUBLIC = "public"

PrivateKeyTypes = Union[
    rsa.RSAPrivateKey,
    ec.EllipticCurvePrivateKey,
    ed25519.Ed25519PrivateKey,
    ed448.Ed448PrivateKey,
    dsa.DSAPrivateKey,
]
PublicKeyTypes = Union[
    rsa.RSAPublicKey,
    ec.EllipticCurvePublicKey,
    ed25519.Ed25519PublicKey,
    ed448.Ed448PublicKey,
    dsa.DSAPublicKey,
]

# Edwards curves are reported as "EC", like the Weierstrass curves.
_ALGORITHM_FOR_TYPE = [
    ((rsa.RSAPrivateKey, rsa.RSAPublicKey), "RSA"),
    (
        (
            ec.EllipticCurvePrivateKey,
            ec.EllipticCurvePublicKey,
            ed25519.Ed25519PrivateKey,
            ed25519.Ed25519PublicKey,
            ed448.Ed448PrivateKey,
            ed448.Ed448PublicKey,
        ),
        "EC",
    ),
    ((dsa.DSAPrivateKey, dsa.DSAPublicKey), "DSA"),
]

_PRIVATE_TYPES = (
    rsa.RSAPrivateKey,
    ec.EllipticCurvePrivateKey,
    ed25519.Ed25519PrivateKey,
    ed448.Ed448PrivateKey,
    dsa.DSAPrivateKey,
)


def algorithm_of(key) -> str:
    """Return "RSA", "EC" or "DSA" for a pyca/cryptography key object.

    Raises UnsupportedAlgorithmError for any other key type (e.g. X25519).
    """
    for types, algorithm in _ALGORITHM_FOR_TYPE:
        if isinstance(key, types):
            return algorithm

    raise UnsupportedAlgorithmError(f"unsupported key '{type(key)}'")


@dataclass(frozen=True)
class KeyHandle:
    """A key decoded from one specific format.

    Attributes:
        key: pyca/cryptography key object.
        algorithm: "RSA", "EC" or "DSA".
        format: Name of the format the key was decoded from, e.g. "PKCS8".
        comment: Comment embedded in the serialization, if the format has one.
    """

    KIND: ClassVar[str]

    key: Union[PrivateKeyTypes, PublicKeyTypes]
    algorithm: str
    format: str
    comment: Optional[str] = None


@dataclass(frozen=True)
class PrivateKeyHandle(KeyHandle):
    KIND: ClassVar[str] = PRIVATE

    def public_key(self) -> PublicKeyTypes:
        return self.key.public_key()  # type: ignore[union-attr]


@dataclass(frozen=True)
class PublicKeyHandle(KeyHandle):
    KIND: ClassVar[str] = PUBLIC

    def public_key(self) -> PublicKeyTypes:
        return self.key  # type: ignore[return-value]


def make_handle(
    key, key_format: str, algorithm: str, comment: Optional[str] = None
) -> KeyHandle:
    """Wrap a decoded key in the handle variant matching its kind.

    Raises:
        UnsupportedAlgorithmError: 'key' is not a key of 'algorithm'. Loaders
            use this to reject keys decoded while trying another algorithm.
    """
    actual = algorithm_of(key)
    if actual != algorithm:
        raise UnsupportedAlgorithmError(
            f"{key_format} value holds a {actual} key, not {algorithm}"
        )

    if isinstance(key, _PRIVATE_TYPES):
        return PrivateKeyHandle(key, algorithm, key_format, comment)

    return PublicKeyHandle(key, algorithm, key_format, comment)
