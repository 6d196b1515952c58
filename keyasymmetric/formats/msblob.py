"""Microsoft CryptoAPI RSA key BLOBs (PUBLICKEYBLOB / PRIVATEKEYBLOB), as
exported by .NET's RSACryptoServiceProvider.ExportCspBlob(), either raw or
base64 encoded."""

from __future__ import annotations

import struct
from typing import Optional

from cryptography.hazmat.primitives.asymmetric import rsa

from keyasymmetric._internal.utils import decode_binary
from keyasymmetric.exceptions import FormatError, UnsupportedAlgorithmError
from keyasymmetric.handles import KeyHandle, make_handle

NAME = "MSBLOB"

PUBLICKEYBLOB = 0x06
PRIVATEKEYBLOB = 0x07
CUR_BLOB_VERSION = 0x02

CALG_RSA_KEYX = 0x0000A400
CALG_RSA_SIGN = 0x00002400

RSA1 = 0x31415352
RSA2 = 0x32415352

_HEADER = struct.Struct("<BBHIIII")


def _read_le(blob: bytes, offset: int, length: int) -> tuple:
    end = offset + length
    if end > len(blob):
        raise FormatError("MSBLOB truncated")

    return int.from_bytes(blob[offset:end], "little"), end


def load(data: bytes, password: Optional[bytes], algorithm: str) -> KeyHandle:
    """Load an RSA key from a CryptoAPI BLOB. 'password' is unused: BLOBs
    are never encrypted.

    Raises:
        FormatError: 'data' is not a CryptoAPI RSA BLOB.
        UnsupportedAlgorithmError: 'algorithm' is not "RSA".
        ValueError: the key numbers are inconsistent.
    """
    if algorithm != "RSA":
        raise UnsupportedAlgorithmError(f"{NAME} only holds RSA keys")

    blob = decode_binary(data)
    if len(blob) < _HEADER.size:
        raise FormatError("Value is too short for an MSBLOB")

    blob_type, version, _, key_alg, magic, bitlen, pubexp = _HEADER.unpack_from(blob)
    if version != CUR_BLOB_VERSION or key_alg not in (CALG_RSA_KEYX, CALG_RSA_SIGN):
        raise FormatError("Value is not an RSA MSBLOB")

    if (blob_type, magic) not in ((PUBLICKEYBLOB, RSA1), (PRIVATEKEYBLOB, RSA2)):
        raise FormatError("MSBLOB type and magic do not match")

    if not bitlen or bitlen % 16:
        raise FormatError(f"Invalid MSBLOB key length {bitlen}")

    offset = _HEADER.size
    modulus, offset = _read_le(blob, offset, bitlen // 8)
    public_numbers = rsa.RSAPublicNumbers(pubexp, modulus)
    if blob_type == PUBLICKEYBLOB:
        return make_handle(public_numbers.public_key(), NAME, algorithm)

    half = bitlen // 16
    p, offset = _read_le(blob, offset, half)
    q, offset = _read_le(blob, offset, half)
    dmp1, offset = _read_le(blob, offset, half)
    dmq1, offset = _read_le(blob, offset, half)
    iqmp, offset = _read_le(blob, offset, half)
    d, offset = _read_le(blob, offset, bitlen // 8)

    key = rsa.RSAPrivateNumbers(p, q, d, dmp1, dmq1, iqmp, public_numbers).private_key()
    return make_handle(key, NAME, algorithm)
