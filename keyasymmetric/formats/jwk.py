"""JSON Web Keys (RFC 7517): RSA, EC (NIST curves) and OKP (Ed25519/Ed448)
keys, given as a single key or as a key set holding exactly one key."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from cryptography.hazmat.primitives.asymmetric import ec, ed448, ed25519, rsa

from keyasymmetric._internal.utils import b64dec, int_from_b64
from keyasymmetric.exceptions import FormatError, UnsupportedAlgorithmError
from keyasymmetric.handles import KeyHandle, make_handle

NAME = "JWK"

_ALGORITHM_FOR_KTY = {"RSA": "RSA", "EC": "EC", "OKP": "EC"}

_CURVES = {
    "P-256": ec.SECP256R1,
    "P-384": ec.SECP384R1,
    "P-521": ec.SECP521R1,
    "secp256k1": ec.SECP256K1,
}

_OKP_CURVES = {
    "Ed25519": (ed25519.Ed25519PrivateKey, ed25519.Ed25519PublicKey),
    "Ed448": (ed448.Ed448PrivateKey, ed448.Ed448PublicKey),
}


def _parse(data: bytes) -> Dict[str, Any]:
    text = data.strip()
    if not text.startswith(b"{"):
        raise FormatError("Value is not a JSON object")

    try:
        jwk = json.loads(text)
    except ValueError as e:
        raise FormatError("Value is not valid JSON") from e

    if "keys" in jwk:
        if not isinstance(jwk["keys"], list) or len(jwk["keys"]) != 1:
            raise FormatError("JWK set must hold exactly one key")
        jwk = jwk["keys"][0]

    if not isinstance(jwk, dict) or "kty" not in jwk:
        raise FormatError("Value is not a JWK")

    return jwk


def _rsa_key(jwk: Dict[str, Any]):
    public_numbers = rsa.RSAPublicNumbers(int_from_b64(jwk["e"]), int_from_b64(jwk["n"]))
    if "d" not in jwk:
        return public_numbers.public_key()

    d = int_from_b64(jwk["d"])
    if "p" in jwk and "q" in jwk:
        p, q = int_from_b64(jwk["p"]), int_from_b64(jwk["q"])
    else:
        p, q = rsa.rsa_recover_prime_factors(public_numbers.n, public_numbers.e, d)

    return rsa.RSAPrivateNumbers(
        p,
        q,
        d,
        int_from_b64(jwk["dp"]) if "dp" in jwk else rsa.rsa_crt_dmp1(d, p),
        int_from_b64(jwk["dq"]) if "dq" in jwk else rsa.rsa_crt_dmq1(d, q),
        int_from_b64(jwk["qi"]) if "qi" in jwk else rsa.rsa_crt_iqmp(p, q),
        public_numbers,
    ).private_key()


def _ec_key(jwk: Dict[str, Any]):
    curve = _CURVES.get(jwk.get("crv"))
    if curve is None:
        raise UnsupportedAlgorithmError(f"Unsupported JWK curve '{jwk.get('crv')}'")

    public_numbers = ec.EllipticCurvePublicNumbers(
        int_from_b64(jwk["x"]), int_from_b64(jwk["y"]), curve()
    )
    if "d" not in jwk:
        return public_numbers.public_key()

    return ec.EllipticCurvePrivateNumbers(
        int_from_b64(jwk["d"]), public_numbers
    ).private_key()


def _okp_key(jwk: Dict[str, Any]):
    if jwk.get("crv") not in _OKP_CURVES:
        raise UnsupportedAlgorithmError(f"Unsupported JWK curve '{jwk.get('crv')}'")

    private_type, public_type = _OKP_CURVES[jwk["crv"]]
    public_key = public_type.from_public_bytes(b64dec(jwk["x"]))
    if "d" not in jwk:
        return public_key

    private_key = private_type.from_private_bytes(b64dec(jwk["d"]))
    if private_key.public_key().public_bytes_raw() != public_key.public_bytes_raw():
        raise ValueError("JWK private key does not match its public key")

    return private_key


def load(data: bytes, password: Optional[bytes], algorithm: str) -> KeyHandle:
    """Load a key of 'algorithm' from a JWK. 'password' is unused; encrypted
    (JWE-wrapped) keys are not supported.

    Raises:
        FormatError: 'data' is not a JWK.
        UnsupportedAlgorithmError: the JWK holds a key of another algorithm
            or an unsupported curve.
        KeyError, ValueError: members are missing or inconsistent.
    """
    jwk = _parse(data)
    kty = jwk["kty"]
    if _ALGORITHM_FOR_KTY.get(kty) != algorithm:
        raise UnsupportedAlgorithmError(f"JWK key type '{kty}' is not {algorithm}")

    if kty == "RSA":
        key = _rsa_key(jwk)
    elif kty == "EC":
        key = _ec_key(jwk)
    else:
        key = _okp_key(jwk)

    return make_handle(key, NAME, algorithm)
