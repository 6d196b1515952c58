"""
Key format loaders

Every module in this package loads keys from one serialization and exposes
``load(data, password, algorithm)``, which returns a
``keyasymmetric.handles.KeyHandle`` or raises. ``FORMATS`` below is the table
of what each format can hold: the algorithms it supports and whether it
embeds a comment.
"""

from __future__ import annotations

from typing import Callable, Dict, NamedTuple, Optional, Tuple

from keyasymmetric.formats import jwk, msblob, openssh, pkcs1, pkcs8, putty, xmlkeys
from keyasymmetric.handles import KeyHandle

Loader = Callable[[bytes, Optional[bytes], str], KeyHandle]


class KeyFormat(NamedTuple):
    name: str
    algorithms: Tuple[str, ...]
    load: Loader
    has_comment: bool


# Registered formats, keyed by name. Users may add their own.
FORMATS: Dict[str, KeyFormat] = {
    fmt.name: fmt
    for fmt in [
        KeyFormat(pkcs8.NAME, ("RSA", "EC", "DSA"), pkcs8.load, False),
        KeyFormat(pkcs1.NAME, ("RSA", "EC", "DSA"), pkcs1.load, False),
        KeyFormat(openssh.NAME, ("RSA", "EC", "DSA"), openssh.load, True),
        KeyFormat(putty.NAME, ("RSA", "EC", "DSA"), putty.load, True),
        KeyFormat(msblob.NAME, ("RSA",), msblob.load, False),
        KeyFormat(xmlkeys.NAME, ("RSA", "DSA"), xmlkeys.load, False),
        KeyFormat(jwk.NAME, ("RSA", "EC"), jwk.load, False),
    ]
}
