"""PuTTY keys: PPK private key files (versions 2 and 3) and the RFC 4716
'SSH2 PUBLIC KEY' files PuTTYgen exports public keys as."""

from __future__ import annotations

import hashlib
import hmac
from typing import Dict, List, Optional, Tuple

from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed25519, rsa
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
from cryptography.hazmat.primitives.serialization.ssh import load_ssh_public_key

from keyasymmetric._internal.ssh import SSHReader, ssh_string
from keyasymmetric._internal.utils import b64dec, b64enc
from keyasymmetric.exceptions import (
    FormatError,
    UnsupportedAlgorithmError,
    UnsupportedLibraryError,
)
from keyasymmetric.handles import KeyHandle, make_handle

ARGON2_IMPORT_ERROR = None
try:
    from cryptography.hazmat.primitives.kdf.argon2 import Argon2id
except ImportError:
    ARGON2_IMPORT_ERROR = "Argon2id key derivation requires pyca/cryptography>=44"

NAME = "PuTTY"

_PPK_PREFIX = "PuTTY-User-Key-File-"
_SSH2_BEGIN = "---- BEGIN SSH2 PUBLIC KEY ----"
_SSH2_END = "---- END SSH2 PUBLIC KEY ----"

_V2_MAC_KEY_PREFIX = b"putty-private-key-file-mac-key"

# Upper bounds for the Argon2 parameters of a PPK v3 file. PuTTYgen defaults
# to 8 MiB and a pass count tuned to a fraction of a second.
ARGON2_MAX_MEMORY = 256 * 1024  # KiB
ARGON2_MAX_PASSES = 128
ARGON2_MAX_PARALLELISM = 16


def _parse_ppk(text: str) -> Tuple[int, Dict[str, str], Dict[str, bytes]]:
    """Split a PPK file into its version, header values and decoded
    multi-line blobs ('Public', 'Private')."""
    lines = text.splitlines()
    version = 0
    headers: Dict[str, str] = {}
    blobs: Dict[str, bytes] = {}
    i = 0
    while i < len(lines):
        name, sep, value = lines[i].partition(": ")
        i += 1
        if not sep:
            continue

        if name.startswith(_PPK_PREFIX):
            try:
                version = int(name[len(_PPK_PREFIX) :])
            except ValueError as e:
                raise FormatError(f"Bad PPK header '{name}'") from e
            headers["Algorithm"] = value.strip()

        elif name.endswith("-Lines"):
            count = int(value)
            blobs[name[: -len("-Lines")]] = b64dec("".join(lines[i : i + count]))
            i += count

        else:
            headers[name] = value.strip()

    if version not in (2, 3):
        raise FormatError(f"Unsupported PPK version {version}")

    for required in ("Algorithm", "Encryption", "Private-MAC"):
        if required not in headers:
            raise FormatError(f"PPK file lacks '{required}'")

    if "Public" not in blobs or "Private" not in blobs:
        raise FormatError("PPK file lacks key data")

    return version, headers, blobs


def _aes256_cbc_decrypt(key: bytes, iv: bytes, data: bytes) -> bytes:
    if len(data) % 16:
        raise FormatError("Encrypted PPK private blob is not block aligned")

    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    return decryptor.update(data) + decryptor.finalize()


def _argon2_keys(headers: Dict[str, str], passphrase: bytes) -> bytes:
    """Derive cipher key, IV and MAC key (80 bytes) for an encrypted PPK v3."""
    if headers.get("Key-Derivation") != "Argon2id":
        raise UnsupportedAlgorithmError(
            f"Unsupported PPK key derivation '{headers.get('Key-Derivation')}'"
        )

    try:
        salt = bytes.fromhex(headers["Argon2-Salt"])
        memory = int(headers["Argon2-Memory"])
        passes = int(headers["Argon2-Passes"])
        parallelism = int(headers["Argon2-Parallelism"])
    except (KeyError, ValueError) as e:
        raise FormatError(f"Bad PPK Argon2 parameters: {e}") from e

    for name, value, maximum in (
        ("Argon2-Memory", memory, ARGON2_MAX_MEMORY),
        ("Argon2-Passes", passes, ARGON2_MAX_PASSES),
        ("Argon2-Parallelism", parallelism, ARGON2_MAX_PARALLELISM),
    ):
        if not 0 < value <= maximum:
            raise FormatError(f"PPK {name} {value} out of range (max {maximum})")

    if ARGON2_IMPORT_ERROR:
        raise UnsupportedLibraryError(ARGON2_IMPORT_ERROR)

    kdf = Argon2id(
        salt=salt,
        length=80,
        iterations=passes,
        lanes=parallelism,
        memory_cost=memory,
    )
    return kdf.derive(passphrase)


def _decrypt(
    version: int,
    headers: Dict[str, str],
    private_blob: bytes,
    password: Optional[bytes],
) -> Tuple[bytes, bytes]:
    """Return the plaintext private blob and the MAC key."""
    encryption = headers["Encryption"]
    if encryption == "none":
        if version == 2:
            return private_blob, hashlib.sha1(_V2_MAC_KEY_PREFIX).digest()
        return private_blob, b""

    if encryption != "aes256-cbc":
        raise UnsupportedAlgorithmError(f"Unsupported PPK encryption '{encryption}'")

    if not password:
        raise TypeError("Password was not given but PPK private key is encrypted")

    if version == 2:
        key = (
            hashlib.sha1(b"\0\0\0\0" + password).digest()
            + hashlib.sha1(b"\0\0\0\1" + password).digest()
        )[:32]
        mac_key = hashlib.sha1(_V2_MAC_KEY_PREFIX + password).digest()
        return _aes256_cbc_decrypt(key, b"\0" * 16, private_blob), mac_key

    material = _argon2_keys(headers, password)
    plain = _aes256_cbc_decrypt(material[:32], material[32:48], private_blob)
    return plain, material[48:]


def _verify_mac(
    version: int,
    headers: Dict[str, str],
    public_blob: bytes,
    private_blob: bytes,
    mac_key: bytes,
) -> None:
    mac_data = b"".join(
        ssh_string(value)
        for value in (
            headers["Algorithm"].encode("utf-8"),
            headers["Encryption"].encode("utf-8"),
            headers.get("Comment", "").encode("utf-8"),
            public_blob,
            private_blob,
        )
    )
    digestmod = hashlib.sha1 if version == 2 else hashlib.sha256
    expected = hmac.new(mac_key, mac_data, digestmod).hexdigest()
    if not hmac.compare_digest(expected, headers["Private-MAC"].lower()):
        raise ValueError("PPK MAC mismatch: corrupt file or wrong passphrase")


def _public_key(public_blob: bytes):
    keytype = SSHReader(public_blob).read_string()
    return load_ssh_public_key(keytype + b" " + b64enc(public_blob).encode("ascii"))


def _openssh_bytes(public_key) -> bytes:
    return public_key.public_bytes(Encoding.OpenSSH, PublicFormat.OpenSSH)


def _private_key(public_key, private_blob: bytes):
    reader = SSHReader(private_blob)
    if isinstance(public_key, rsa.RSAPublicKey):
        public_numbers = public_key.public_numbers()
        d = reader.read_mpint()
        p = reader.read_mpint()
        q = reader.read_mpint()
        iqmp = reader.read_mpint()
        return rsa.RSAPrivateNumbers(
            p,
            q,
            d,
            rsa.rsa_crt_dmp1(d, p),
            rsa.rsa_crt_dmq1(d, q),
            iqmp,
            public_numbers,
        ).private_key()

    if isinstance(public_key, dsa.DSAPublicKey):
        x = reader.read_mpint()
        return dsa.DSAPrivateNumbers(x, public_key.public_numbers()).private_key()

    if isinstance(public_key, ec.EllipticCurvePublicKey):
        private_key = ec.derive_private_key(reader.read_mpint(), public_key.curve)
    elif isinstance(public_key, ed25519.Ed25519PublicKey):
        # Stored as a little-endian integer, i.e. the seed bytes in order.
        seed = reader.read_string().ljust(32, b"\0")
        private_key = ed25519.Ed25519PrivateKey.from_private_bytes(seed)
    else:
        raise UnsupportedAlgorithmError(f"unsupported PPK key '{type(public_key)}'")

    if _openssh_bytes(private_key.public_key()) != _openssh_bytes(public_key):
        raise ValueError("PPK private key does not match its public key")

    return private_key


def _load_ppk(text: str, password: Optional[bytes], algorithm: str) -> KeyHandle:
    version, headers, blobs = _parse_ppk(text)
    public_key = _public_key(blobs["Public"])
    # The public half is in the clear: reject the wrong algorithm before
    # any (expensive) key derivation.
    make_handle(public_key, NAME, algorithm)

    private_blob, mac_key = _decrypt(version, headers, blobs["Private"], password)
    _verify_mac(version, headers, blobs["Public"], private_blob, mac_key)
    private_key = _private_key(public_key, private_blob)
    return make_handle(private_key, NAME, algorithm, headers.get("Comment") or None)


def _load_ssh2_public(text: str, algorithm: str) -> KeyHandle:
    """Load an RFC 4716 public key."""
    lines: List[str] = []
    inside = False
    for line in text.splitlines():
        line = line.strip()
        if line == _SSH2_BEGIN:
            inside = True
        elif line == _SSH2_END:
            break
        elif inside and line:
            lines.append(line)

    headers: Dict[str, str] = {}
    body: List[str] = []
    while lines:
        line = lines.pop(0)
        if ":" in line:
            while line.endswith("\\") and lines:
                line = line[:-1] + lines.pop(0)
            name, _, value = line.partition(":")
            headers[name.strip().lower()] = value.strip()
        else:
            body.append(line)

    if not body:
        raise FormatError("SSH2 public key has no key data")

    comment = headers.get("comment", "")
    if len(comment) >= 2 and comment[0] == comment[-1] == '"':
        comment = comment[1:-1]

    return make_handle(
        _public_key(b64dec("".join(body))), NAME, algorithm, comment or None
    )


def load(data: bytes, password: Optional[bytes], algorithm: str) -> KeyHandle:
    """Load a PuTTY key of 'algorithm' from 'data'.

    Raises:
        FormatError: 'data' is not a PuTTY key.
        UnsupportedAlgorithmError: the key is not an 'algorithm' key, or uses
            an unsupported cipher or key derivation.
        ValueError, TypeError: wrong or missing passphrase, corrupt file.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FormatError("PuTTY keys are text") from e

    stripped = text.lstrip()
    if stripped.startswith(_PPK_PREFIX):
        return _load_ppk(stripped, password, algorithm)

    if stripped.startswith(_SSH2_BEGIN):
        return _load_ssh2_public(stripped, algorithm)

    raise FormatError("Value is not a PuTTY key")
