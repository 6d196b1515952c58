"""Internal utilities"""

from __future__ import annotations

import base64
import binascii
import re

_PEM_BEGIN_RE = re.compile(rb"-----BEGIN ([A-Z0-9 ]+)-----")


def b64enc(data: bytes) -> str:
    """To encode byte sequence into base64 string

    Arguments:
        data: Byte sequence to encode

    Exceptions:
        TypeError: If "data" is not byte sequence

    Returns:
        base64 string
    """

    return base64.standard_b64encode(data).decode("utf-8")


def b64dec(string: str | bytes) -> bytes:
    """To decode byte sequence from base64 string

    Missing padding is tolerated, since JWK and some hand-edited values omit
    it.

    Arguments:
        string: base64 string to decode

    Raises:
        binascii.Error: If invalid base64-encoded string

    Returns:
        A byte sequence
    """

    data = string.encode("utf-8") if isinstance(string, str) else string
    data += b"=" * (-len(data) % 4)
    try:
        return base64.b64decode(data, validate=True)
    except binascii.Error:
        # altchars for urlsafe encoded base64 - instead of + and _ instead of /
        return base64.b64decode(data, altchars=b"-_", validate=True)


def to_bytes(value: str | bytes) -> bytes:
    """Return 'value' as bytes, encoding text as utf-8."""
    if isinstance(value, str):
        return value.encode("utf-8")

    return value


def pem_label(data: bytes) -> str | None:
    """Return the label of the first PEM block in 'data' ("PUBLIC KEY",
    "RSA PRIVATE KEY", ...), or None if 'data' is not PEM armored."""
    match = _PEM_BEGIN_RE.search(data)
    if not match:
        return None

    return match.group(1).decode("ascii")


def decode_binary(data: bytes) -> bytes:
    """Return the binary structure 'data' stands for.

    'data' may be bare base64 (whitespace and line breaks are ignored) or
    already binary, in which case it is returned unchanged.
    """
    compact = b"".join(data.split())
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError):
        return data


def int_from_b64(string: str | bytes) -> int:
    """Decode a base64 (or base64url) big-endian unsigned integer."""
    return int.from_bytes(b64dec(string), "big")
