"""
<Program Name>
  hash.py

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Support secure hashing and message digests.  Any hash-related routines that
  keyasymmetric requires should be located in this module: creating digest
  objects, reporting digest sizes and computing public key fingerprints.
  This is a thin wrapper over hashlib.
"""

from __future__ import annotations

import base64
import hashlib

from keyasymmetric import exceptions

DEFAULT_HASH_ALGORITHM = "sha256"

FINGERPRINT_ALGORITHMS = ["md5", "sha256"]


def digest(algorithm: str = DEFAULT_HASH_ALGORITHM) -> hashlib._Hash:
    """
    <Purpose>
      Provide the caller with the ability to create digest objects.  The
      caller also has the option of specifying which hash algorithm to use.

      digest_object = keyasymmetric.hash.digest()
      digest_object = keyasymmetric.hash.digest('sha384')

    <Arguments>
      algorithm:
        The hash algorithm (e.g., 'md5', 'sha256', 'sha512').

    <Exceptions>
      keyasymmetric.exceptions.UnsupportedAlgorithmError, if an unsupported
      hashing algorithm is specified.

    <Side Effects>
      None.

    <Returns>
      Digest object
    """

    try:
        return hashlib.new(algorithm)

    except (ValueError, TypeError):
        # ValueError: the algorithm value was unknown
        raise exceptions.UnsupportedAlgorithmError(algorithm)


def digest_size(algorithm: str) -> int:
    """Return the digest size of 'algorithm' in bits.

    Raises UnsupportedAlgorithmError for unknown algorithms and for
    extendable-output functions, which have no fixed size.
    """
    size = digest(algorithm).digest_size
    if not size:
        raise exceptions.UnsupportedAlgorithmError(
            f"{algorithm} has no fixed digest size"
        )

    return size * 8


def fingerprint(blob: bytes, algorithm: str = "md5") -> str:
    """
    <Purpose>
      Compute the fingerprint of a public key, the way OpenSSH displays it.

      'md5' fingerprints are colon-separated lowercase hex
      ('c1:b1:30:29:...'), 'sha256' fingerprints are base64 without padding.

    <Arguments>
      blob:
        The public key in SSH wire format (the base64-decoded middle field of
        an OpenSSH public key line).

      algorithm:
        One of FINGERPRINT_ALGORITHMS.

    <Exceptions>
      keyasymmetric.exceptions.UnsupportedAlgorithmError, if 'algorithm' is
      not one of FINGERPRINT_ALGORITHMS.

    <Side Effects>
      None.

    <Returns>
      The fingerprint string.
    """

    if algorithm not in FINGERPRINT_ALGORITHMS:
        raise exceptions.UnsupportedAlgorithmError(
            f"Unsupported fingerprint algorithm: {algorithm}"
        )

    digest_object = digest(algorithm)
    digest_object.update(blob)

    if algorithm == "md5":
        hexdigest = digest_object.hexdigest()
        return ":".join(hexdigest[i : i + 2] for i in range(0, len(hexdigest), 2))

    return base64.b64encode(digest_object.digest()).decode("ascii").rstrip("=")
