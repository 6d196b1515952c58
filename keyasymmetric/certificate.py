"""
<Program Name>
  certificate.py

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Recognize X.509 certificates and extract the metadata reported for them:
  subject and issuer distinguished names and the validity period.

  Loading never raises on malformed input; load_certificate() returns None
  instead, so callers check the result explicitly.

  The validity period is read from the raw ASN.1 structure (pyasn1 and the
  RFC 5280 module of pyasn1-modules) rather than from pyca/cryptography's
  datetime accessors, because the reported shape depends on whether each
  time is encoded as UTCTime or GeneralizedTime.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from cryptography import x509
from pyasn1.codec.der import decoder as der_decoder
from pyasn1.error import PyAsn1Error
from pyasn1_modules import rfc5280

from keyasymmetric._internal.utils import decode_binary, pem_label

logger = logging.getLogger(__name__)

_PEM_LABELS = ("CERTIFICATE", "X509 CERTIFICATE")

_TIME_FORMAT = "%a, %d %b %Y %H:%M:%S %z"

# Extraction points for distinguished names. The 'issuer' field of the
# reported metadata reads from the point named by
# 'keyasymmetric.settings.CERTIFICATE_ISSUER_SOURCE'.
DN_SOURCES: Dict[str, Callable[[x509.Certificate], x509.Name]] = {
    "subject": lambda certificate: certificate.subject,
    "issuer": lambda certificate: certificate.issuer,
}


@dataclass(frozen=True)
class ParsedCertificate:
    """A loaded certificate and its raw validity structure.

    'validity' maps "notBefore" / "notAfter" to a one-entry dict naming the
    ASN.1 time type ("utcTime" or "generalTime") and the formatted time.
    """

    certificate: x509.Certificate
    validity: Dict[str, Dict[str, str]]


def _format_time(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)

    return value.astimezone(timezone.utc).strftime(_TIME_FORMAT)


def _asn1_validity(certificate: x509.Certificate) -> Dict[str, Dict[str, str]]:
    tbs, _ = der_decoder.decode(
        certificate.tbs_certificate_bytes, asn1Spec=rfc5280.TBSCertificate()
    )
    validity = tbs["validity"]
    raw: Dict[str, Dict[str, str]] = {}
    for name in ("notBefore", "notAfter"):
        time = validity[name]
        if not time.isValue:
            continue

        raw[name] = {time.getName(): _format_time(time.getComponent().asDateTime)}

    return raw


def _encoded_validity(certificate: x509.Certificate) -> Dict[str, Dict[str, str]]:
    """Rebuild the validity structure from pyca/cryptography's accessors,
    applying the RFC 5280 encoding rule (UTCTime through 2049)."""
    raw: Dict[str, Dict[str, str]] = {}
    for name, value in (
        ("notBefore", certificate.not_valid_before_utc),
        ("notAfter", certificate.not_valid_after_utc),
    ):
        choice = "utcTime" if value.year < 2050 else "generalTime"
        raw[name] = {choice: _format_time(value)}

    return raw


def raw_validity(certificate: x509.Certificate) -> Dict[str, Dict[str, str]]:
    """Return the raw validity structure of 'certificate'."""
    try:
        return _asn1_validity(certificate)
    except (PyAsn1Error, ValueError, TypeError) as e:
        logger.debug("Could not decode certificate validity with pyasn1: %s", e)

    return _encoded_validity(certificate)


def load_certificate(data: bytes) -> Optional[ParsedCertificate]:
    """
    <Purpose>
      Load an X.509 certificate from PEM, DER or bare base64 DER.

    <Arguments>
      data:
        The value to recognize.

    <Exceptions>
      None.  Malformed input returns None.

    <Side Effects>
      None.

    <Returns>
      A ParsedCertificate, or None if 'data' is not a certificate.
    """

    label = pem_label(data)
    try:
        if label is None:
            certificate = x509.load_der_x509_certificate(decode_binary(data))
        elif label in _PEM_LABELS:
            certificate = x509.load_pem_x509_certificate(data)
        else:
            return None

    except (ValueError, TypeError) as e:
        logger.debug("Value is not an X.509 certificate: %s", e)
        return None

    return ParsedCertificate(certificate, raw_validity(certificate))


def validity_fields(validity: Dict[str, Any]) -> Dict[str, str]:
    """Return the reported validity fields for a raw validity structure.

    If the structure holds exactly a "notAfter" UTCTime and, optionally,
    exactly a "notBefore" UTCTime, they are returned as 'not_before' /
    'not_after'. Any other shape is returned verbatim as JSON in 'validity'.
    The JSON is not HTML safe; callers must escape it before display.
    """

    def _utc_time(value: Any) -> Optional[str]:
        if isinstance(value, dict) and len(value) == 1:
            utc_time = value.get("utcTime")
            if isinstance(utc_time, str):
                return utc_time
        return None

    not_after = _utc_time(validity.get("notAfter"))
    if "notBefore" in validity:
        not_before = _utc_time(validity["notBefore"])
        simple = not_before is not None and len(validity) == 2
    else:
        not_before = None
        simple = len(validity) == 1

    if not_after is not None and simple:
        fields = {"not_after": not_after}
        if not_before is not None:
            fields = {"not_before": not_before, **fields}
        return fields

    return {"validity": json.dumps(validity)}


def certificate_info(
    parsed: ParsedCertificate, issuer_source: str = "issuer"
) -> Dict[str, str]:
    """
    <Purpose>
      Extract the reported metadata of a certificate: 'subject', 'issuer' and
      either 'not_before' / 'not_after' or 'validity'.

      Every field is extracted independently: a field that cannot be
      extracted is omitted without affecting the others.

    <Arguments>
      parsed:
        A ParsedCertificate returned by load_certificate().

      issuer_source:
        Key of DN_SOURCES the 'issuer' field is read from.

    <Exceptions>
      KeyError, if 'issuer_source' is not a key of DN_SOURCES.

    <Side Effects>
      None.

    <Returns>
      A dictionary without empty values.
    """

    sources = {"subject": DN_SOURCES["subject"], "issuer": DN_SOURCES[issuer_source]}
    info: Dict[str, str] = {}
    for field, source in sources.items():
        try:
            value = source(parsed.certificate).rfc4514_string()
        except ValueError as e:
            logger.debug("Could not read certificate %s: %s", field, e)
            continue

        if value:
            info[field] = value

    if parsed.validity:
        info.update(validity_fields(parsed.validity))

    return info
