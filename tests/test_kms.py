import pytest

from gomer.crypto.kms import (
    DATA_KEY_SPEC_AES_256,
    ERR_DISABLED,
    ERR_INVALID_CIPHERTEXT,
    ERR_INVALID_KEY_USAGE,
    ERR_INVALID_STATE,
    ERR_NOT_FOUND,
    ENCODING_FORMAT_VERSION,
    NONCE_SIZE,
    Cipher,
    DataKey,
    KmsDataKeyDecrypter,
    KmsDataKeyEncrypter,
    KmsError,
    decode,
    encode,
)
from gomer.errors import BadValueError, DependencyError, InternalError, NotFoundError, UnmarshalError

DATA_KEY = bytes(range(32))
WRAPPED = b"wrapped-data-key"


class FakeKms:
    def __init__(self, generate_error=None, decrypt_error=None):
        self.generate_error = generate_error
        self.decrypt_error = decrypt_error
        self.requests = []
        self.contexts = {}

    def generate_data_key(self, key_id, encryption_context, key_spec):
        self.requests.append((key_id, key_spec))
        if self.generate_error is not None:
            raise self.generate_error
        self.contexts[WRAPPED] = dict(encryption_context or {})
        return DataKey(DATA_KEY, WRAPPED)

    def decrypt(self, ciphertext_blob, encryption_context):
        if self.decrypt_error is not None:
            raise self.decrypt_error
        if self.contexts.get(ciphertext_blob) != dict(encryption_context or {}):
            raise KmsError(ERR_INVALID_CIPHERTEXT)
        return DATA_KEY


def make_cipher(kms):
    return Cipher(KmsDataKeyEncrypter(kms, "master-key"), KmsDataKeyDecrypter(kms))


def test_round_trip_with_context():
    kms = FakeKms()
    cipher = make_cipher(kms)
    encrypted = cipher.encrypt(b"hello world", {"purpose": "test"})
    assert cipher.decrypt(encrypted, {"purpose": "test"}) == b"hello world"
    assert kms.requests == [("master-key", DATA_KEY_SPEC_AES_256)]


def test_encrypted_layout():
    cipher = make_cipher(FakeKms())
    plaintext = b"some data"
    encrypted = cipher.encrypt(plaintext)
    assert encrypted[0] == ENCODING_FORMAT_VERSION
    ciphertext, blob, nonce = decode(encrypted)
    assert blob == WRAPPED
    assert len(nonce) == NONCE_SIZE
    assert plaintext not in ciphertext
    assert len(ciphertext) > len(plaintext)


def test_each_encryption_uses_new_nonce():
    cipher = make_cipher(FakeKms())
    first = cipher.encrypt(b"same")
    second = cipher.encrypt(b"same")
    assert decode(first)[2] != decode(second)[2]
    assert cipher.decrypt(first) == cipher.decrypt(second) == b"same"


def test_context_mismatch_is_bad_value():
    cipher = make_cipher(FakeKms())
    encrypted = cipher.encrypt(b"x", {"purpose": "a"})
    with pytest.raises(BadValueError) as info:
        cipher.decrypt(encrypted, {"purpose": "b"})
    assert info.value.name == "ciphertext"


@pytest.mark.parametrize(
    "error, expected",
    [
        (KmsError(ERR_NOT_FOUND), NotFoundError),
        (KmsError(ERR_DISABLED), BadValueError),
        (KmsError(ERR_INVALID_STATE), BadValueError),
        (KmsError(ERR_INVALID_KEY_USAGE), BadValueError),
        (KmsError("ThrottlingException"), DependencyError),
        (RuntimeError("connection reset"), DependencyError),
    ],
)
def test_generate_errors_are_translated(error, expected):
    cipher = make_cipher(FakeKms(generate_error=error))
    with pytest.raises(expected):
        cipher.encrypt(b"data")


def test_disabled_key_reports_key_state():
    cipher = make_cipher(FakeKms(generate_error=KmsError(ERR_DISABLED)))
    with pytest.raises(BadValueError) as info:
        cipher.encrypt(b"data")
    assert info.value.name == "KmsKey.master-key.KeyState"


@pytest.mark.parametrize(
    "error, expected",
    [
        (KmsError(ERR_INVALID_CIPHERTEXT), BadValueError),
        (KmsError(ERR_DISABLED), BadValueError),
        (KmsError("ThrottlingException"), DependencyError),
    ],
)
def test_decrypt_errors_are_translated(error, expected):
    encrypted = make_cipher(FakeKms()).encrypt(b"data")
    decrypter = KmsDataKeyDecrypter(FakeKms(decrypt_error=error))
    with pytest.raises(expected):
        decrypter.decrypt(encrypted)


def test_tampered_ciphertext_is_internal_error():
    cipher = make_cipher(FakeKms())
    ciphertext, blob, nonce = decode(cipher.encrypt(b"payload"))
    tampered = bytes([ciphertext[0] ^ 1]) + ciphertext[1:]
    with pytest.raises(InternalError):
        cipher.decrypt(encode(tampered, nonce, blob))


def test_encode_wire_bytes():
    assert encode(b"ab", b"n", b"xyz") == b"\x01\x02\x00ab\x03\x00xyz\x01\x00n"


def test_encode_decode_round_trip():
    assert decode(encode(b"cipher", b"nonce-bytes", b"blob")) == (b"cipher", b"blob", b"nonce-bytes")


def test_decode_rejects_wrong_version():
    data = encode(b"a", b"b", b"c")
    with pytest.raises(UnmarshalError):
        decode(b"\x02" + data[1:])
    with pytest.raises(UnmarshalError):
        decode(b"")


def test_decode_rejects_truncated_data():
    data = encode(b"abc", b"nonce", b"blob")
    with pytest.raises(UnmarshalError):
        decode(data[:-1])