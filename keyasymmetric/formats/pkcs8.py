"""PKCS8 private keys (RFC 5208/5958) and X.509 SubjectPublicKeyInfo public
keys, in PEM, DER or bare base64 DER."""

from __future__ import annotations

from typing import Optional

from cryptography.hazmat.primitives.serialization import (
    load_der_private_key,
    load_der_public_key,
    load_pem_private_key,
    load_pem_public_key,
)

from keyasymmetric._internal.utils import decode_binary, pem_label
from keyasymmetric.exceptions import FormatError
from keyasymmetric.formats import _der
from keyasymmetric.formats._common import load_private
from keyasymmetric.handles import PRIVATE, PUBLIC, KeyHandle, make_handle

NAME = "PKCS8"

_PRIVATE_LABELS = ("PRIVATE KEY", "ENCRYPTED PRIVATE KEY")
_PUBLIC_LABELS = ("PUBLIC KEY",)


def load(data: bytes, password: Optional[bytes], algorithm: str) -> KeyHandle:
    """Load a PKCS8 key of 'algorithm' from 'data'.

    Raises:
        FormatError: 'data' is not PKCS8.
        UnsupportedAlgorithmError: the key is not an 'algorithm' key.
        ValueError, TypeError: pyca/cryptography deserialization failed,
            e.g. wrong or missing password.
    """
    label = pem_label(data)
    if label is None:
        der = decode_binary(data)
        kind = _der.structure_kind(der, _der.PKCS8_PRIVATE, _der.PKCS8_PUBLIC)
        if kind == PRIVATE:
            key = load_private(load_der_private_key, der, password)
        elif kind == PUBLIC:
            key = load_der_public_key(der)
        else:
            raise FormatError("Value is not a PKCS8 structure")

    elif label in _PRIVATE_LABELS:
        key = load_private(load_pem_private_key, data, password)

    elif label in _PUBLIC_LABELS:
        key = load_pem_public_key(data)

    else:
        raise FormatError(f"PEM label '{label}' is not PKCS8")

    return make_handle(key, NAME, algorithm)
