#!/usr/bin/env python

"""
<Program Name>
  test_hash.py

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Unit test for 'hash.py'.
"""

import unittest

import keyasymmetric.exceptions
import keyasymmetric.hash


class TestHash(unittest.TestCase):
    def test_digest(self):
        digest_object = keyasymmetric.hash.digest()
        digest_object.update(b"a")
        self.assertEqual(
            digest_object.hexdigest(),
            "ca978112ca1bbdcafac231b39a23dc4da786eff8147c4e72b9807785afee48bb",
        )

        self.assertRaises(
            keyasymmetric.exceptions.UnsupportedAlgorithmError,
            keyasymmetric.hash.digest,
            "bogus",
        )

    def test_digest_size(self):
        self.assertEqual(keyasymmetric.hash.digest_size("sha256"), 256)
        self.assertEqual(keyasymmetric.hash.digest_size("sha384"), 384)
        self.assertEqual(keyasymmetric.hash.digest_size("md5"), 128)

        # Extendable-output functions have no fixed size.
        self.assertRaises(
            keyasymmetric.exceptions.UnsupportedAlgorithmError,
            keyasymmetric.hash.digest_size,
            "shake_256",
        )

    def test_fingerprint(self):
        self.assertEqual(
            keyasymmetric.hash.fingerprint(b""),
            "d4:1d:8c:d9:8f:00:b2:04:e9:80:09:98:ec:f8:42:7e",
        )
        self.assertEqual(
            keyasymmetric.hash.fingerprint(b"", "sha256"),
            "47DEQpj8HBSa+/TImW+5JCeuQeRkm5NMpJWZG3hSuFU",
        )

        self.assertRaises(
            keyasymmetric.exceptions.UnsupportedAlgorithmError,
            keyasymmetric.hash.fingerprint,
            b"",
            "sha1",
        )


# Run unit test.
if __name__ == "__main__":
    unittest.main()
