"""Envelope encryption with AES-GCM data keys issued by a KMS service."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from gomer.errors import (
    BadValueError,
    DependencyError,
    GomerError,
    InternalError,
    MarshalError,
    NotFoundError,
    UnmarshalError,
)

ENCODING_FORMAT_VERSION = 1
NONCE_SIZE = 12
_MAX_PART_LENGTH = 0xFFFF

DATA_KEY_SPEC_AES_256 = "AES_256"
KEY_STATE_ENABLED = "Enabled"
KEY_STATE_DISABLED = "Disabled"
KEY_USAGE_ENCRYPT_DECRYPT = "ENCRYPT_DECRYPT"

ERR_NOT_FOUND = "NotFoundException"
ERR_DISABLED = "DisabledException"
ERR_INVALID_STATE = "KMSInvalidStateException"
ERR_INVALID_KEY_USAGE = "InvalidKeyUsageException"
ERR_INVALID_CIPHERTEXT = "InvalidCiphertextException"

EncryptionContext = Mapping[str, str]


@dataclass(frozen=True)
class DataKey:
    """A generated data key: its plaintext and its KMS-encrypted form."""

    plaintext: bytes
    ciphertext_blob: bytes


class KmsError(Exception):
    """An error reported by the KMS service, identified by its code."""

    def __init__(self, code: str, message: str = "") -> None:
        super().__init__(f"{code}: {message}" if message else code)
        self.code = code
        self.message = message


class KmsClient(Protocol):
    """The KMS operations envelope encryption needs."""

    def generate_data_key(
        self, key_id: str, encryption_context: EncryptionContext | None, key_spec: str
    ) -> DataKey:
        """Generate a data key under the master key key_id."""

    def decrypt(self, ciphertext_blob: bytes, encryption_context: EncryptionContext | None) -> bytes:
        """Return the plaintext of an encrypted data key."""


class Encrypter(Protocol):
    def encrypt(self, plaintext: bytes, encryption_context: EncryptionContext | None = None) -> bytes: ...


class Decrypter(Protocol):
    def decrypt(self, encrypted: bytes, encryption_context: EncryptionContext | None = None) -> bytes: ...


def encode(ciphertext: bytes, nonce: bytes, ciphertext_blob: bytes) -> bytes:
    """Pack the parts: version byte, then ciphertext, blob and nonce, each with a little-endian u16 length."""
    parts = {"ciphertext": ciphertext, "ciphertextBlob": ciphertext_blob, "nonce": nonce}
    out = [bytes([ENCODING_FORMAT_VERSION])]
    for name, part in parts.items():
        if len(part) > _MAX_PART_LENGTH:
            raise MarshalError(name, len(part))
        out.append(struct.pack("<H", len(part)))
        out.append(bytes(part))
    return b"".join(out)


def decode(encoded: bytes) -> tuple[bytes, bytes, bytes]:
    """Unpack (ciphertext, ciphertext_blob, nonce) from encoded data."""
    data = bytes(encoded)
    if not data or data[0] != ENCODING_FORMAT_VERSION:
        raise UnmarshalError("encoded", data, data[0] if data else None)

    offset = 1
    parts: list[bytes] = []
    for name in ("ciphertext", "ciphertextBlob", "nonce"):
        if offset + 2 > len(data):
            raise UnmarshalError(name, data)
        (size,) = struct.unpack_from("<H", data, offset)
        offset += 2
        chunk = data[offset : offset + size]
        if len(chunk) != size:
            raise UnmarshalError(name, data)
        parts.append(chunk)
        offset += size
    return parts[0], parts[1], parts[2]


def _aead(key: bytes) -> AESGCM:
    try:
        return AESGCM(bytes(key))
    except (ValueError, TypeError) as err:
        raise InternalError("Unable to create AES cipher from data key") from err


def _seal(key: bytes, plaintext: bytes) -> tuple[bytes, bytes]:
    aead = _aead(key)
    nonce = os.urandom(NONCE_SIZE)
    return aead.encrypt(nonce, bytes(plaintext), None), nonce


def _open(key: bytes, ciphertext: bytes, nonce: bytes) -> bytes:
    aead = _aead(key)
    try:
        return aead.decrypt(nonce, ciphertext, None)
    except (InvalidTag, ValueError) as err:
        raise InternalError("aead.Open") from err


class KmsDataKeyEncrypter:
    """Encrypts with a fresh data key from the master key key_id."""

    def __init__(self, kms: KmsClient, key_id: str) -> None:
        self.kms = kms
        self.key_id = key_id

    def _translate(self, err: KmsError, request: Any) -> GomerError:
        prefix = f"KmsKey.{self.key_id}"
        if err.code == ERR_NOT_FOUND:
            return NotFoundError("kms.KeyId", self.key_id)
        if err.code == ERR_DISABLED:
            return BadValueError(prefix + ".KeyState", KEY_STATE_DISABLED, expected=KEY_STATE_ENABLED)
        if err.code == ERR_INVALID_STATE:
            return BadValueError(prefix + ".KeyState", "<unavailable>", expected=KEY_STATE_ENABLED)
        if err.code == ERR_INVALID_KEY_USAGE:
            return BadValueError(prefix + ".KeyUsage", "<unavailable>", expected=KEY_USAGE_ENCRYPT_DECRYPT)
        return DependencyError("KMS", request)

    def encrypt(self, plaintext: bytes, encryption_context: EncryptionContext | None = None) -> bytes:
        """Encrypt plaintext; the result carries the encrypted data key and nonce."""
        request = {
            "KeyId": self.key_id,
            "EncryptionContext": encryption_context,
            "KeySpec": DATA_KEY_SPEC_AES_256,
        }
        try:
            data_key = self.kms.generate_data_key(self.key_id, encryption_context, DATA_KEY_SPEC_AES_256)
        except KmsError as err:
            raise self._translate(err, request) from err
        except Exception as err:
            raise DependencyError("KMS", request) from err

        ciphertext, nonce = _seal(data_key.plaintext, plaintext)
        return encode(ciphertext, nonce, data_key.ciphertext_blob)


class KmsDataKeyDecrypter:
    """Decrypts data produced by KmsDataKeyEncrypter."""

    def __init__(self, kms: KmsClient) -> None:
        self.kms = kms

    @staticmethod
    def _translate(err: KmsError, request: Any) -> GomerError:
        if err.code == ERR_INVALID_CIPHERTEXT:
            return BadValueError("ciphertext", request)
        if err.code == ERR_DISABLED:
            return BadValueError("KmsKey.KeyState", KEY_STATE_DISABLED, expected=KEY_STATE_ENABLED)
        if err.code == ERR_INVALID_STATE:
            return BadValueError("KmsKey.KeyState", "<unavailable>", expected=KEY_STATE_ENABLED)
        if err.code == ERR_INVALID_KEY_USAGE:
            return BadValueError("KmsKey.KeyUsage", "<unavailable>", expected=KEY_USAGE_ENCRYPT_DECRYPT)
        return DependencyError("Kms", request)

    def decrypt(self, encrypted: bytes, encryption_context: EncryptionContext | None = None) -> bytes:
        """Return the plaintext; the encryption context must match the one used to encrypt."""
        ciphertext, ciphertext_blob, nonce = decode(encrypted)
        request = {"CiphertextBlob": ciphertext_blob, "EncryptionContext": encryption_context}
        try:
            key = self.kms.decrypt(ciphertext_blob, encryption_context)
        except KmsError as err:
            raise self._translate(err, request) from err
        except Exception as err:
            raise DependencyError("Kms", request) from err
        return _open(key, ciphertext, nonce)


@dataclass
class Cipher:
    """An encrypter and a decrypter used together."""

    encrypter: Encrypter
    decrypter: Decrypter

    def encrypt(self, plaintext: bytes, encryption_context: EncryptionContext | None = None) -> bytes:
        return self.encrypter.encrypt(plaintext, encryption_context)

    def decrypt(self, encrypted: bytes, encryption_context: EncryptionContext | None = None) -> bytes:
        return self.decrypter.decrypt(encrypted, encryption_context)