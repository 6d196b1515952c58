"""DER structure sniffing with pyasn1.

pyca/cryptography's DER loaders accept PKCS8 and "traditional" (PKCS1/SEC1)
structures alike, so the structure is identified here before a loader claims
a format.
"""

from __future__ import annotations

from typing import Optional, Sequence

from pyasn1.codec.der import decoder as der_decoder
from pyasn1.error import PyAsn1Error
from pyasn1.type import namedtype, univ
from pyasn1_modules import rfc2437, rfc5208, rfc5280, rfc5915, rfc5958

from keyasymmetric.handles import PRIVATE, PUBLIC


class DSAPrivateKey(univ.Sequence):
    """OpenSSL's traditional DSA private key, as written by
    'openssl dsa -traditional'."""

    componentType = namedtype.NamedTypes(
        namedtype.NamedType("version", univ.Integer()),
        namedtype.NamedType("p", univ.Integer()),
        namedtype.NamedType("q", univ.Integer()),
        namedtype.NamedType("g", univ.Integer()),
        namedtype.NamedType("pub", univ.Integer()),
        namedtype.NamedType("priv", univ.Integer()),
    )


PKCS8_PRIVATE = (rfc5958.OneAsymmetricKey, rfc5208.EncryptedPrivateKeyInfo)
PKCS8_PUBLIC = (rfc5280.SubjectPublicKeyInfo,)

PKCS1_PRIVATE = (rfc2437.RSAPrivateKey, rfc5915.ECPrivateKey, DSAPrivateKey)
PKCS1_PUBLIC = (rfc2437.RSAPublicKey,)


def matches(der: bytes, asn1_type) -> bool:
    """Return True if 'der' decodes as exactly one 'asn1_type' structure."""
    try:
        _, rest = der_decoder.decode(der, asn1Spec=asn1_type())
    except (PyAsn1Error, ValueError, TypeError):
        return False

    return not rest


def structure_kind(
    der: bytes, private_types: Sequence, public_types: Sequence
) -> Optional[str]:
    """Return PRIVATE or PUBLIC depending on which of the given structures
    'der' matches, or None if it matches neither."""
    if any(matches(der, asn1_type) for asn1_type in private_types):
        return PRIVATE

    if any(matches(der, asn1_type) for asn1_type in public_types):
        return PUBLIC

    return None
