#!/usr/bin/env python

"""
<Program Name>
  test_certificate.py

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Test cases for 'certificate.py'.
"""

import datetime
import json
import unittest

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from keyasymmetric.certificate import (
    certificate_info,
    load_certificate,
    raw_validity,
    validity_fields,
)

UTC = datetime.timezone.utc

NOT_BEFORE = "Mon, 01 Jan 2024 00:00:00 +0000"
NOT_AFTER = "Sun, 01 Jan 2034 00:00:00 +0000"


class TestValidityFields(unittest.TestCase):
    def test_utc_times(self):
        validity = {"notBefore": {"utcTime": NOT_BEFORE}, "notAfter": {"utcTime": NOT_AFTER}}
        self.assertEqual(
            validity_fields(validity), {"not_before": NOT_BEFORE, "not_after": NOT_AFTER}
        )

    def test_not_after_only(self):
        self.assertEqual(
            validity_fields({"notAfter": {"utcTime": NOT_AFTER}}),
            {"not_after": NOT_AFTER},
        )

    def test_other_shapes(self):
        for validity in (
            {"notBefore": {"utcTime": NOT_BEFORE}},
            {"notBefore": {"generalTime": NOT_BEFORE}, "notAfter": {"utcTime": NOT_AFTER}},
            {"notBefore": {"utcTime": NOT_BEFORE}, "notAfter": {"generalTime": NOT_AFTER}},
            {"notAfter": {"utcTime": NOT_AFTER, "generalTime": NOT_AFTER}},
            {"notAfter": {"utcTime": NOT_AFTER}, "extra": 1},
            {"notAfter": NOT_AFTER},
        ):
            with self.subTest(validity=validity):
                fields = validity_fields(validity)
                self.assertEqual(list(fields), ["validity"])
                self.assertEqual(json.loads(fields["validity"]), validity)

    def test_json_is_not_escaped(self):
        validity = {"notAfter": "<b>"}
        self.assertEqual(validity_fields(validity)["validity"], '{"notAfter": "<b>"}')


class TestCertificate(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.key = ec.generate_private_key(ec.SECP256R1())
        cls.ca_key = ec.generate_private_key(ec.SECP256R1())
        subject = x509.Name(
            [
                x509.NameAttribute(NameOID.COUNTRY_NAME, "NL"),
                x509.NameAttribute(NameOID.COMMON_NAME, "www.example.com"),
            ]
        )
        issuer = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "Example CA")])
        cls.certificate = (
            x509.CertificateBuilder()
            .subject_name(subject)
            .issuer_name(issuer)
            .public_key(cls.key.public_key())
            .serial_number(1000)
            .not_valid_before(datetime.datetime(2024, 1, 1, tzinfo=UTC))
            .not_valid_after(datetime.datetime(2034, 1, 1, tzinfo=UTC))
            .sign(cls.ca_key, hashes.SHA256())
        )

    def test_load_pem_and_der(self):
        pem = self.certificate.public_bytes(serialization.Encoding.PEM)
        der = self.certificate.public_bytes(serialization.Encoding.DER)

        for value in (pem, der):
            parsed = load_certificate(value)
            self.assertIsNotNone(parsed)
            self.assertEqual(parsed.certificate, self.certificate)

    def test_load_not_a_certificate(self):
        public_pem = self.key.public_key().public_bytes(
            serialization.Encoding.PEM, serialization.PublicFormat.SubjectPublicKeyInfo
        )
        for value in (
            public_pem,
            b"garbage",
            b"-----BEGIN CERTIFICATE-----\nAAAA\n-----END CERTIFICATE-----\n",
        ):
            self.assertIsNone(load_certificate(value))

    def test_raw_validity(self):
        self.assertEqual(
            raw_validity(self.certificate),
            {"notBefore": {"utcTime": NOT_BEFORE}, "notAfter": {"utcTime": NOT_AFTER}},
        )

    def test_certificate_info(self):
        parsed = load_certificate(self.certificate.public_bytes(serialization.Encoding.DER))
        self.assertEqual(
            certificate_info(parsed),
            {
                "subject": "CN=www.example.com,C=NL",
                "issuer": "CN=Example CA",
                "not_before": NOT_BEFORE,
                "not_after": NOT_AFTER,
            },
        )
        self.assertEqual(
            certificate_info(parsed, "subject")["issuer"], "CN=www.example.com,C=NL"
        )

        with self.assertRaises(KeyError):
            certificate_info(parsed, "serial")


if __name__ == "__main__":
    unittest.main()
