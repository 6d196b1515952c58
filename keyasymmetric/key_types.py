"""
<Program Name>
  key_types.py

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Policy for applications that store private keys and public keys or
  certificates as separate kinds of values.

  validate_key_value() classifies a value, checks that it is the expected
  kind, and returns the properties to store alongside it.
  describe_properties() renders stored properties as human readable lines,
  e.g. to show after a key was entered.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Union

from keyasymmetric.exceptions import UnexpectedKindError
from keyasymmetric.handles import PRIVATE, PUBLIC
from keyasymmetric.keypair import KeyClassifier, KeyProperties

logger = logging.getLogger(__name__)

PropertyInfo = Dict[str, Union[str, "PropertyInfo"]]

# Labels of the properties reported for each kind. Properties not listed are
# not described. A nested table describes a nested dictionary.
_COMMON_PROPERTY_INFO: PropertyInfo = {
    "format": "Format",
    "algorithm": "Algorithm",
    "curve": "Curve",
    "key_size": "Key size",
    "hash_algorithm": "Hash algorithm",
    "hash_size": "Hash size",
    "comment": "Comment",
}

PRIVATE_PROPERTY_INFO: PropertyInfo = {
    **_COMMON_PROPERTY_INFO,
    "has_public_key": "Contains public key",
}

PUBLIC_PROPERTY_INFO: PropertyInfo = {
    **_COMMON_PROPERTY_INFO,
    "fingerprint": "Fingerprint",
    "certificate": {
        "subject": "Subject",
        "issuer": "Issuer",
        "not_before": "Valid from",
        "not_after": "Valid until",
        "validity": "Validity",
    },
}


def validate_key_value(
    key_value: str | bytes,
    expected_kind: str,
    passphrase: Optional[str | bytes] = None,
    classifier: Optional[KeyClassifier] = None,
) -> KeyProperties:
    """Classify 'key_value' and check it is a key of 'expected_kind'.

    Args:
        key_value: The key or certificate.
        expected_kind: "private" or "public".
        passphrase: Passphrase of an encrypted private key, used for
            validation only.
        classifier: KeyClassifier to use. Defaults to one using the settings.

    Raises:
        ValueError: 'expected_kind' is neither "private" nor "public".
        EmptyInputError, UnrecognizedKeyError: see KeyClassifier.classify().
        UnexpectedKindError: 'key_value' is not a key of 'expected_kind'. A
            certificate whose key cannot be loaded has no kind at all.

    Returns:
        The key properties without 'kind', to be stored with the value.
    """
    if expected_kind not in (PRIVATE, PUBLIC):
        raise ValueError(f"Unknown key kind '{expected_kind}'")

    if classifier is None:
        classifier = KeyClassifier()

    properties = classifier.classify(key_value, passphrase)
    kind = properties.pop("kind", None)
    if kind != expected_kind:
        raise UnexpectedKindError(expected_kind, kind)

    return properties


def _format_value(value: Any) -> str:
    # Booleans and non-scalar values (e.g. the DSA key size) are shown as JSON.
    if isinstance(value, (bool, dict, list, tuple)):
        return json.dumps(value)

    return str(value)


def describe_properties(
    properties: KeyProperties, property_info: PropertyInfo
) -> List[str]:
    """Return a "Label: value" line for every property in 'property_info'
    that is set in 'properties', in the order of 'property_info'.

    Lines for a nested table are prefixed with the capitalized property name,
    e.g. "Certificate > Subject: CN=example".
    """
    lines = []
    for name, label in property_info.items():
        if properties.get(name) is None:
            continue

        value = properties[name]
        if isinstance(label, dict):
            prefix = name.replace("_", " ").capitalize()
            if isinstance(value, dict):
                for line in describe_properties(value, label):
                    lines.append(f"{prefix} > {line}")
            else:
                logger.warning("Property '%s' is not a dictionary", name)
                lines.append(f"{prefix} (was expected to be a dictionary): {value}")
            continue

        lines.append(f"{label}: {_format_value(value)}")

    return lines
