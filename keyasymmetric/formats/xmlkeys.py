"""XML key values: .NET 'RSAKeyValue' / 'DSAKeyValue' documents and their
XML-DSig (RFC 3275) equivalents, optionally wrapped in a 'KeyValue'
element."""

from __future__ import annotations

from typing import Dict, Optional
from xml.etree import ElementTree

from cryptography.hazmat.primitives.asymmetric import dsa, rsa

from keyasymmetric._internal.utils import int_from_b64
from keyasymmetric.exceptions import FormatError, UnsupportedAlgorithmError
from keyasymmetric.handles import KeyHandle, make_handle

NAME = "XML"

_ROOT_FOR_ALGORITHM = {"RSA": "RSAKeyValue", "DSA": "DSAKeyValue"}


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _key_value(data: bytes, algorithm: str) -> Dict[str, int]:
    """Return the integer children of the '<algorithm>KeyValue' element."""
    try:
        root = ElementTree.fromstring(data.strip())
    except ElementTree.ParseError as e:
        raise FormatError("Value is not XML") from e

    wanted = _ROOT_FOR_ALGORITHM[algorithm]
    for element in root.iter():
        name = _local_name(element.tag)
        if name == wanted:
            return {
                _local_name(child.tag): int_from_b64("".join((child.text or "").split()))
                for child in element
            }
        if name in _ROOT_FOR_ALGORITHM.values():
            raise UnsupportedAlgorithmError(f"XML value holds a {name}, not {wanted}")

    raise FormatError(f"XML value has no {wanted} element")


def _rsa_key(values: Dict[str, int]):
    public_numbers = rsa.RSAPublicNumbers(values["Exponent"], values["Modulus"])
    if "D" not in values:
        return public_numbers.public_key()

    d = values["D"]
    if "P" in values and "Q" in values:
        p, q = values["P"], values["Q"]
    else:
        p, q = rsa.rsa_recover_prime_factors(public_numbers.n, public_numbers.e, d)

    return rsa.RSAPrivateNumbers(
        p,
        q,
        d,
        values.get("DP") or rsa.rsa_crt_dmp1(d, p),
        values.get("DQ") or rsa.rsa_crt_dmq1(d, q),
        values.get("InverseQ") or rsa.rsa_crt_iqmp(p, q),
        public_numbers,
    ).private_key()


def _dsa_key(values: Dict[str, int]):
    public_numbers = dsa.DSAPublicNumbers(
        values["Y"],
        dsa.DSAParameterNumbers(values["P"], values["Q"], values["G"]),
    )
    if "X" not in values:
        return public_numbers.public_key()

    return dsa.DSAPrivateNumbers(values["X"], public_numbers).private_key()


def load(data: bytes, password: Optional[bytes], algorithm: str) -> KeyHandle:
    """Load an RSA or DSA key from its XML key value. 'password' is unused.

    Raises:
        FormatError: 'data' is not an XML key value.
        UnsupportedAlgorithmError: the XML holds a key of another algorithm.
        KeyError, ValueError: required numbers are missing or inconsistent.
    """
    if algorithm not in _ROOT_FOR_ALGORITHM:
        raise UnsupportedAlgorithmError(f"{NAME} does not hold {algorithm} keys")

    if not data.lstrip().startswith(b"<"):
        raise FormatError("Value is not XML")

    values = _key_value(data, algorithm)
    key = _rsa_key(values) if algorithm == "RSA" else _dsa_key(values)
    return make_handle(key, NAME, algorithm)
