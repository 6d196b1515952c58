"""
<Program Name>
  keypair.py

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Recognize key pairs and certificates, and extract their properties.

  Given an opaque value, KeyClassifier determines whether it is a private
  key, a public key or a certificate, its format and algorithm, and the
  metadata that goes with it.  get_key_properties() is the easy-to-use public
  interface, using the default settings.

  Recognition is expensive: the generic loader (keyasymmetric.loader) tries
  every known format for every known algorithm.  Values are therefore tried,
  in order, as:

    1. the "fast path" combinations (RSA/PKCS8 by default, what OpenSSL
       generates), since that is what is stored most of the time;
    2. an X.509 certificate, which is recognized in one attempt and would
       otherwise only be found after every key format failed;
    3. every remaining (algorithm, format) combination.

  The returned dictionary can have the following keys, none of which are
  guaranteed to be present, and none of which hold an empty value:

    kind:            "private" / "public"
    format:          format, e.g. "PKCS8"
    algorithm:       "RSA", "EC" or "DSA"
    curve:           curve name for EC keys, e.g. "secp256r1", "Ed25519"
    key_size:        key size in bits; {"L": ..., "N": ...} for DSA keys, so
                     callers cannot assume a scalar
    hash_algorithm:  e.g. "sha256"
    hash_size:       hash size in bits
    comment:         comment embedded in the key (OpenSSH, PuTTY)
    fingerprint:     fingerprint of a public key
    has_public_key:  whether a private key carries its public key
    certificate:     for certificates only:
      subject:       distinguished name
      issuer:        distinguished name
      not_before:    UTC time string
      not_after:     UTC time string
      validity:      JSON of the raw validity structure, only if it could
                     not be expressed as not_before / not_after; not HTML safe

  Callers are expected to strip 'kind' before storing the rest as metadata,
  and to recompute properties whenever the value changes: they are not bound
  to the key value in any way.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import dsa, ed448, ed25519
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from keyasymmetric import formats, settings
from keyasymmetric._internal.utils import b64dec, to_bytes
from keyasymmetric.certificate import (
    DN_SOURCES,
    ParsedCertificate,
    certificate_info,
    load_certificate,
)
from keyasymmetric.exceptions import (
    EmptyInputError,
    UnrecognizedKeyError,
    UnsupportedAlgorithmError,
)
from keyasymmetric.handles import (
    PUBLIC,
    KeyHandle,
    PrivateKeyHandle,
    PublicKeyHandle,
    algorithm_of,
    make_handle,
)
from keyasymmetric.hash import (
    DEFAULT_HASH_ALGORITHM,
    FINGERPRINT_ALGORITHMS,
    digest_size,
    fingerprint,
)
from keyasymmetric.loader import LoaderEntry, load_order, try_load

logger = logging.getLogger(__name__)

KeyProperties = Dict[str, Any]

# Format reported for keys taken from a certificate: the SubjectPublicKeyInfo
# structure it embeds.
CERTIFICATE_KEY_FORMAT = "PKCS8"

# Hash reported for EC keys, by curve name. Curves not listed here use the
# hash matching their size (see _ec_hash).
_EC_HASHES = {
    "secp256r1": ("sha256", 256),
    "secp256k1": ("sha256", 256),
    "brainpoolP256r1": ("sha256", 256),
    "secp384r1": ("sha384", 384),
    "brainpoolP384r1": ("sha384", 384),
    "secp521r1": ("sha512", 512),
    "brainpoolP512r1": ("sha512", 512),
    "Ed25519": ("sha512", 512),
    "Ed448": ("shake256", 912),
}

_EDWARDS_CURVES = [
    ((ed25519.Ed25519PrivateKey, ed25519.Ed25519PublicKey), "Ed25519", 256),
    ((ed448.Ed448PrivateKey, ed448.Ed448PublicKey), "Ed448", 448),
]


def _edwards_curve(key) -> Optional[Tuple[str, int]]:
    for types, name, size in _EDWARDS_CURVES:
        if isinstance(key, types):
            return name, size
    return None


def _ec_curve(key) -> str:
    edwards = _edwards_curve(key)
    if edwards:
        return edwards[0]
    return key.curve.name


def _rsa_key_size(key) -> int:
    return key.key_size


def _ec_key_size(key) -> int:
    edwards = _edwards_curve(key)
    if edwards:
        return edwards[1]
    return key.curve.key_size


def _dsa_key_size(key) -> Dict[str, int]:
    if isinstance(key, dsa.DSAPrivateKey):
        key = key.public_key()
    parameters = key.parameters().parameter_numbers()
    return {"L": parameters.p.bit_length(), "N": parameters.q.bit_length()}


def _default_hash(key) -> Tuple[str, int]:
    return DEFAULT_HASH_ALGORITHM, digest_size(DEFAULT_HASH_ALGORITHM)


def _ec_hash(key) -> Tuple[str, int]:
    curve = _ec_curve(key)
    if curve in _EC_HASHES:
        return _EC_HASHES[curve]

    size = _ec_key_size(key)
    name = "sha256" if size <= 256 else "sha384" if size <= 384 else "sha512"
    return name, digest_size(name)


# Metadata obtainable per algorithm: (key size, hash).
_ALGORITHM_ACCESSORS: Dict[str, Tuple[Callable, Callable]] = {
    "RSA": (_rsa_key_size, _default_hash),
    "EC": (_ec_key_size, _ec_hash),
    "DSA": (_dsa_key_size, _default_hash),
}


def _set_field(properties: KeyProperties, field: str, getter: Callable[[], Any]):
    """Set 'field' to the value returned by 'getter', unless it raises or the
    value is empty."""
    try:
        value = getter()

    # A single field must never abort the extraction of the others.
    except Exception as e:
        logger.debug("Could not extract key property '%s': %s", field, e)
        return

    if value:
        properties[field] = value


class KeyClassifier:
    """Recognize keys and certificates and extract their properties.

    *All parameters default to the corresponding value in
    keyasymmetric.settings, read when a value is classified.*

    Args:
        fast_path: (algorithm, format) combinations tried before the
            certificate parser. See settings.FAST_PATH_LOADERS.
        algorithms: Algorithm order of the generic loader.
        format_names: Format order of the generic loader.
        fingerprint_algorithm: "md5" or "sha256".
        issuer_source: Where the certificate 'issuer' is read from: "issuer"
            or "subject". See settings.CERTIFICATE_ISSUER_SOURCE.

    Raises:
        ValueError: Unknown format, fingerprint algorithm or issuer source.
    """

    def __init__(
        self,
        fast_path: Optional[Sequence[LoaderEntry]] = None,
        algorithms: Optional[Sequence[str]] = None,
        format_names: Optional[Sequence[str]] = None,
        fingerprint_algorithm: Optional[str] = None,
        issuer_source: Optional[str] = None,
    ):
        for _, name in fast_path or []:
            if name not in formats.FORMATS:
                raise ValueError(f"Unknown key format '{name}'")
        for name in format_names or []:
            if name not in formats.FORMATS:
                raise ValueError(f"Unknown key format '{name}'")
        if fingerprint_algorithm and (
            fingerprint_algorithm not in FINGERPRINT_ALGORITHMS
        ):
            raise ValueError(f"Unknown fingerprint algorithm '{fingerprint_algorithm}'")
        if issuer_source and issuer_source not in DN_SOURCES:
            raise ValueError(f"Unknown certificate issuer source '{issuer_source}'")

        self.fast_path = fast_path
        self.algorithms = algorithms
        self.format_names = format_names
        self.fingerprint_algorithm = fingerprint_algorithm
        self.issuer_source = issuer_source

    def _fast_path(self) -> List[LoaderEntry]:
        if self.fast_path is None:
            return list(settings.FAST_PATH_LOADERS)
        return list(self.fast_path)

    @staticmethod
    def _certificate_key(parsed: ParsedCertificate) -> Optional[KeyHandle]:
        """Return the handle of the key a certificate embeds, or None."""
        try:
            key = parsed.certificate.public_key()
            return make_handle(key, CERTIFICATE_KEY_FORMAT, algorithm_of(key))

        except (ValueError, UnsupportedAlgorithm, UnsupportedAlgorithmError) as e:
            logger.debug("Could not extract the key of a certificate: %s", e)
            return None

    def _fingerprint(self, handle: KeyHandle) -> str:
        openssh = handle.public_key().public_bytes(
            Encoding.OpenSSH, PublicFormat.OpenSSH
        )
        blob = b64dec(openssh.split()[1])
        return fingerprint(
            blob, self.fingerprint_algorithm or settings.FINGERPRINT_ALGORITHM
        )

    def key_properties(self, handle: KeyHandle) -> KeyProperties:
        """Extract the properties of a loaded key.

        Every property is extracted independently, see _set_field().
        """
        properties: KeyProperties = {"kind": handle.KIND}

        if isinstance(handle, PrivateKeyHandle):
            try:
                properties["has_public_key"] = bool(handle.public_key())
            except Exception as e:
                logger.debug("Could not derive the public key: %s", e)
                properties["has_public_key"] = False

        _set_field(properties, "algorithm", lambda: handle.algorithm)

        if handle.algorithm == "EC":
            _set_field(properties, "curve", lambda: _ec_curve(handle.key))

        if handle.algorithm in _ALGORITHM_ACCESSORS:
            key_size, key_hash = _ALGORITHM_ACCESSORS[handle.algorithm]
            _set_field(properties, "hash_algorithm", lambda: key_hash(handle.key)[0])
            _set_field(properties, "hash_size", lambda: key_hash(handle.key)[1])
            _set_field(properties, "key_size", lambda: key_size(handle.key))

        _set_field(properties, "format", lambda: handle.format)

        key_format = formats.FORMATS.get(handle.format)
        if key_format is not None and key_format.has_comment:
            _set_field(properties, "comment", lambda: handle.comment)

        if isinstance(handle, PublicKeyHandle):
            _set_field(properties, "fingerprint", lambda: self._fingerprint(handle))

        return properties

    def classify(
        self, key_value: str | bytes, passphrase: Optional[str | bytes] = None
    ) -> KeyProperties:
        """
        <Purpose>
          Extract the properties of a key or certificate, if it has a known
          format.  Warning: this is potentially very expensive.

        <Arguments>
          key_value:
            The key or certificate, as text or bytes.

          passphrase:
            (Optional) passphrase of a password-protected private key.  It is
            ignored for values that are not encrypted.

        <Exceptions>
          keyasymmetric.exceptions.EmptyInputError, if 'key_value' is empty.

          keyasymmetric.exceptions.UnrecognizedKeyError, if 'key_value' is
          neither a key in any known format nor a certificate.

        <Side Effects>
          None.

        <Returns>
          A dictionary of key properties, see the module documentation.  A
          certificate whose key cannot be loaded returns an empty dictionary.
        """

        if not key_value:
            raise EmptyInputError("Key is empty.")

        data = to_bytes(key_value)
        password = to_bytes(passphrase) if passphrase else None

        fast_path = self._fast_path()
        handle = try_load(fast_path, data, password)

        parsed = None
        if handle is None:
            parsed = load_certificate(data)
            if parsed is not None:
                handle = self._certificate_key(parsed)

            # A certificate whose key cannot be extracted is retried as a key.
            if handle is None:
                order = load_order(self.algorithms, self.format_names, fast_path)
                handle = try_load(order, data, password)

        if handle is None:
            if parsed is None:
                raise UnrecognizedKeyError("Value is not recognized as a key")

            logger.info("Certificate recognized, but its key could not be loaded")
            return {}

        properties = self.key_properties(handle)

        if parsed is not None and handle.KIND == PUBLIC:
            try:
                certificate = certificate_info(
                    parsed, self.issuer_source or settings.CERTIFICATE_ISSUER_SOURCE
                )
            except KeyError as e:
                logger.warning("Unknown certificate issuer source %s", e)
                certificate = {}

            if certificate:
                properties["certificate"] = certificate

        return properties


def get_key_properties(
    key_value: str | bytes, passphrase: Optional[str | bytes] = None
) -> KeyProperties:
    """Extract the properties of a key or certificate using the default
    settings. See KeyClassifier.classify()."""
    return KeyClassifier().classify(key_value, passphrase)
