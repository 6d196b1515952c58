"""
This module contains functions to load OpenSSH keys: 'openssh-key-v1'
private keys and single-line public keys.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.serialization.ssh import (
    load_ssh_private_key,
    load_ssh_public_key,
)

from keyasymmetric._internal.ssh import SSHReader
from keyasymmetric._internal.utils import b64dec
from keyasymmetric.exceptions import FormatError, UnsupportedLibraryError
from keyasymmetric.formats._common import load_private
from keyasymmetric.handles import KeyHandle, make_handle

BCRYPT_IMPORT_ERROR = None
try:
    import bcrypt
except ImportError:
    BCRYPT_IMPORT_ERROR = "Encrypted OpenSSH private keys require bcrypt"

logger = logging.getLogger(__name__)

NAME = "OpenSSH"

openssh_text_format_marker_re = re.compile(
    rb"^-{2,}BEGIN OPENSSH PRIVATE KEY-{2,}$"
)

_MAGIC = b"openssh-key-v1\x00"

# Number of key fields that precede the comment in the private section.
_PRIVATE_FIELD_COUNT = {
    b"ssh-rsa": 6,
    b"ssh-dss": 5,
    b"ssh-ed25519": 2,
    b"ecdsa-sha2-nistp256": 3,
    b"ecdsa-sha2-nistp384": 3,
    b"ecdsa-sha2-nistp521": 3,
}

# Cipher name: (key length, mode). All use a 16 byte IV.
_CIPHERS = {
    b"aes128-ctr": (16, modes.CTR),
    b"aes192-ctr": (24, modes.CTR),
    b"aes256-ctr": (32, modes.CTR),
    b"aes128-cbc": (16, modes.CBC),
    b"aes192-cbc": (24, modes.CBC),
    b"aes256-cbc": (32, modes.CBC),
}


def _decrypt_private_section(
    ciphername: bytes,
    kdfname: bytes,
    kdfoptions: bytes,
    section: bytes,
    password: Optional[bytes],
) -> Optional[bytes]:
    """Decrypt the private section of an encrypted key, or return None if
    the cipher is not one of '_CIPHERS' or no password is given."""
    if ciphername not in _CIPHERS or kdfname != b"bcrypt" or not password:
        return None

    if BCRYPT_IMPORT_ERROR:
        raise UnsupportedLibraryError(BCRYPT_IMPORT_ERROR)

    options = SSHReader(kdfoptions)
    salt = options.read_string()
    rounds = options.read_uint32()

    key_length, mode = _CIPHERS[ciphername]
    material = bcrypt.kdf(
        password, salt, key_length + 16, rounds, ignore_few_rounds=True
    )
    decryptor = Cipher(
        algorithms.AES(material[:key_length]), mode(material[key_length:])
    ).decryptor()
    return decryptor.update(section) + decryptor.finalize()


def _private_comment(text: bytes, password: Optional[bytes] = None) -> Optional[str]:
    """Return the comment of an 'openssh-key-v1' private key.

    The comment is stored inside the private section, which is decrypted
    with 'password' for encrypted keys. Keys encrypted with an AES-GCM or
    ChaCha20 cipher return None.
    """
    body = b"".join(line for line in text.splitlines() if not line.startswith(b"-"))
    reader = SSHReader(b64dec(body))
    if reader.read_raw(len(_MAGIC)) != _MAGIC:
        raise FormatError("Missing openssh-key-v1 magic")

    ciphername = reader.read_string()
    kdfname = reader.read_string()
    kdfoptions = reader.read_string()
    if reader.read_uint32() != 1:
        return None

    reader.read_string()  # public key blob
    section = reader.read_string()
    if ciphername != b"none":
        section = _decrypt_private_section(
            ciphername, kdfname, kdfoptions, section, password
        )
        if section is None:
            return None

    private = SSHReader(section)
    if private.read_uint32() != private.read_uint32():
        raise FormatError("OpenSSH private key check values differ")

    keytype = private.read_string()
    if keytype not in _PRIVATE_FIELD_COUNT:
        return None

    for _ in range(_PRIVATE_FIELD_COUNT[keytype]):
        private.read_string()

    return private.read_text() or None


def load(data: bytes, password: Optional[bytes], algorithm: str) -> KeyHandle:
    """
    <Purpose>
      Loads either a public or a private key in OpenSSH format.

    <Arguments>
      data:
        An 'openssh-key-v1' PEM-like private key, or a public key line
        ('<keytype> <base64> [comment]').

      password:
        Passphrase for an encrypted private key, or None.

      algorithm:
        "RSA", "EC" or "DSA".

    <Exceptions>
      keyasymmetric.exceptions.FormatError, if 'data' is not an OpenSSH key.

      keyasymmetric.exceptions.UnsupportedAlgorithmError, if the key is not an
      'algorithm' key.

      ValueError, TypeError, cryptography.exceptions.UnsupportedAlgorithm, if
      pyca/cryptography deserialization fails.

    <Returns>
      A KeyHandle.
    """

    text = data.strip()
    first_line = text.split(b"\n", 1)[0].strip()
    if openssh_text_format_marker_re.match(first_line):
        key = load_private(load_ssh_private_key, text, password)
        # Check the algorithm before decrypting the comment.
        make_handle(key, NAME, algorithm)
        try:
            comment = _private_comment(text, password)
        except (FormatError, UnsupportedLibraryError, ValueError) as e:
            logger.debug("Could not read OpenSSH private key comment: %s", e)
            comment = None

        return make_handle(key, NAME, algorithm, comment)

    parts = first_line.split(None, 2)
    if len(parts) < 2 or b"\n" in text:
        raise FormatError("Value is not a single-line OpenSSH public key")

    key = load_ssh_public_key(b" ".join(parts[:2]))
    comment = parts[2].decode("utf-8", "replace").strip() if len(parts) == 3 else None
    return make_handle(key, NAME, algorithm, comment or None)
