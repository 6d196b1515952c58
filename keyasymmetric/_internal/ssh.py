"""Reader for the SSH wire encoding (RFC 4251 section 5).

Used for OpenSSH private key containers, PuTTY key files and RFC 4716 public
keys, which all wrap SSH wire encoded key blobs.
"""

from __future__ import annotations

from keyasymmetric.exceptions import FormatError


class SSHReader:
    """Sequential reader over an SSH wire encoded buffer."""

    def __init__(self, data: bytes):
        self._data = data
        self._pos = 0

    def read_raw(self, length: int) -> bytes:
        end = self._pos + length
        if length < 0 or end > len(self._data):
            raise FormatError("SSH buffer truncated")

        value = self._data[self._pos : end]
        self._pos = end
        return value

    def read_uint32(self) -> int:
        return int.from_bytes(self.read_raw(4), "big")

    def read_string(self) -> bytes:
        return self.read_raw(self.read_uint32())

    def read_text(self) -> str:
        try:
            return self.read_string().decode("utf-8")
        except UnicodeDecodeError as e:
            raise FormatError("SSH string is not utf-8") from e

    def read_mpint(self) -> int:
        return int.from_bytes(self.read_string(), "big", signed=True)


def ssh_string(value: bytes) -> bytes:
    """Encode 'value' as an SSH 'string' (uint32 length prefix)."""
    return len(value).to_bytes(4, "big") + value
