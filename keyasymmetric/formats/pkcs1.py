"""PKCS1 RSA keys and the other "traditional" OpenSSL structures: SEC1 EC
private keys and OpenSSL DSA private keys. Legacy encrypted PEM
("Proc-Type: 4,ENCRYPTED") is supported."""

from __future__ import annotations

from typing import Optional

from cryptography.hazmat.primitives.serialization import (
    load_der_private_key,
    load_der_public_key,
    load_pem_private_key,
    load_pem_public_key,
)

from keyasymmetric._internal.utils import decode_binary, pem_label
from keyasymmetric.exceptions import FormatError, UnsupportedAlgorithmError
from keyasymmetric.formats import _der
from keyasymmetric.formats._common import load_private
from keyasymmetric.handles import PRIVATE, PUBLIC, KeyHandle, make_handle

NAME = "PKCS1"

_PRIVATE_LABELS = ("RSA PRIVATE KEY", "EC PRIVATE KEY", "DSA PRIVATE KEY")
_PUBLIC_LABELS = ("RSA PUBLIC KEY",)


def load(data: bytes, password: Optional[bytes], algorithm: str) -> KeyHandle:
    """Load a PKCS1 (or SEC1 / OpenSSL DSA) key of 'algorithm' from 'data'.

    Raises:
        FormatError: 'data' is not one of the traditional structures.
        UnsupportedAlgorithmError: the key is not an 'algorithm' key.
        ValueError, TypeError: pyca/cryptography deserialization failed.
    """
    label = pem_label(data)
    if label is None:
        der = decode_binary(data)
        kind = _der.structure_kind(der, _der.PKCS1_PRIVATE, _der.PKCS1_PUBLIC)
        if kind == PRIVATE:
            key = load_private(load_der_private_key, der, password)
        elif kind == PUBLIC:
            key = load_der_public_key(der)
        else:
            raise FormatError("Value is not a PKCS1 structure")

        return make_handle(key, NAME, algorithm)

    if label not in _PRIVATE_LABELS + _PUBLIC_LABELS:
        raise FormatError(f"PEM label '{label}' is not PKCS1")

    # The label names the algorithm, so the wrong one is rejected unparsed.
    if label.split(" ", 1)[0] != algorithm:
        raise UnsupportedAlgorithmError(f"PEM label '{label}' is not {algorithm}")

    if label in _PRIVATE_LABELS:
        key = load_private(load_pem_private_key, data, password)
    else:
        key = load_pem_public_key(data)

    return make_handle(key, NAME, algorithm)
