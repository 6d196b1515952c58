"""
<Program Name>
  settings.py

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Store all key-classification settings used by keyasymmetric.  The values
  are read each time a key is classified, so they may be modified at runtime.
  'keyasymmetric.keypair.KeyClassifier' accepts per-instance overrides.
"""

# (algorithm, format) combinations tried before anything else, including the
# certificate parser.  Keys generated by OpenSSL default to RSA/PKCS8, so
# trying that first avoids most of the exhaustive loader's work.
FAST_PATH_LOADERS = [("RSA", "PKCS8")]

# Order in which the generic loader tries algorithms, and for every algorithm,
# the formats.  Combinations a format does not support are skipped (see
# 'keyasymmetric.formats.FORMATS').
ALGORITHMS = ["RSA", "EC", "DSA"]
FORMATS = ["PKCS8", "PKCS1", "OpenSSH", "PuTTY", "MSBLOB", "XML", "JWK"]

# Hash algorithm used for public key fingerprints: 'md5' (colon-separated hex)
# or 'sha256' (unpadded base64), computed over the SSH public key blob.
FINGERPRINT_ALGORITHM = "md5"

# Where the 'issuer' value of a certificate is read from: 'issuer' reads the
# issuer DN, 'subject' copies the subject DN (what older releases reported,
# which is only correct for self-signed certificates).
CERTIFICATE_ISSUER_SOURCE = "issuer"
