import pytest
from ledgervault.lib.crypto import VaultCrypto, SealingKey, check_password_strength
from ledgervault.lib.errors import InvalidInputError, AuthenticationFailure

def test_derive_key_consistency():
    c = VaultCrypto(); salt = c.generate_salt(); iv = c.generate_iv()
    k1 = c.derive_key('secret', salt)
    k2 = c.derive_key('secret', salt)
    assert isinstance(k1, SealingKey)
    assert c.open(k2, iv, c.seal(k1, iv, b'payload')) == b'payload'

def test_key_repr_hides_material():
    c = VaultCrypto()
    assert repr(c.derive_key('secret', c.generate_salt())) == '<SealingKey aes-256-gcm>'

def test_seal_open_various_sizes():
    c = VaultCrypto(); salt = c.generate_salt(); key = c.derive_key('pw', salt)
    for payload in [b'', b'a', b'{"transactions":[]}', b'x'*4096]:
        iv = c.generate_iv()
        sealed = c.seal(key, iv, payload)
        assert len(sealed) == len(payload) + 16
        assert c.open(key, iv, sealed) == payload

def test_open_with_wrong_password():
    c = VaultCrypto(); salt = c.generate_salt(); iv = c.generate_iv()
    sealed = c.seal(c.derive_key('pw1', salt), iv, b'data')
    with pytest.raises(AuthenticationFailure):
        c.open(c.derive_key('pw2', salt), iv, sealed)

def test_open_with_other_salt():
    c = VaultCrypto(); iv = c.generate_iv()
    sealed = c.seal(c.derive_key('pw', c.generate_salt()), iv, b'data')
    with pytest.raises(AuthenticationFailure):
        c.open(c.derive_key('pw', c.generate_salt()), iv, sealed)

def test_every_flipped_byte_is_detected():
    c = VaultCrypto(); key = c.derive_key('pw', c.generate_salt()); iv = c.generate_iv()
    sealed = c.seal(key, iv, b'{"amount": 42.5}')
    for i in range(len(sealed)):
        tampered = bytearray(sealed); tampered[i] ^= 0x01
        with pytest.raises(AuthenticationFailure):
            c.open(key, iv, bytes(tampered))

def test_truncated_ciphertext_rejected():
    c = VaultCrypto(); key = c.derive_key('pw', c.generate_salt()); iv = c.generate_iv()
    with pytest.raises(AuthenticationFailure):
        c.open(key, iv, b'short')

@pytest.mark.parametrize('password,salt', [
    ('pw', b''),
    ('pw', b'x' * 15),
    ('pw', b'x' * 32),
    ('', b'x' * 16),
    (b'pw', b'x' * 16),
])
def test_derive_key_rejects_bad_input(password, salt):
    with pytest.raises(InvalidInputError):
        VaultCrypto().derive_key(password, salt)

def test_seal_rejects_bad_iv_and_key():
    c = VaultCrypto(); key = c.derive_key('pw', c.generate_salt())
    with pytest.raises(InvalidInputError):
        c.seal(key, b'x' * 16, b'data')
    with pytest.raises(InvalidInputError):
        c.seal(b'k' * 32, c.generate_iv(), b'data')

def test_fresh_salt_and_iv():
    c = VaultCrypto()
    assert len(c.generate_salt()) == 16 and len(c.generate_iv()) == 12
    assert c.generate_salt() != c.generate_salt()
    assert c.generate_iv() != c.generate_iv()

@pytest.mark.parametrize('pwd,expected_min', [
    ('weak', 0),
    ('Stronger12!', 60),
    ('correct-horse-battery', 60),
])
def test_password_strength_scores(pwd, expected_min):
    score, feedback = check_password_strength(pwd)
    assert score >= expected_min
    assert f'({score}/100)' in feedback

def test_password_strength_flags_short():
    _score, feedback = check_password_strength('abc')
    assert 'Too short' in feedback

def test_seal_is_deterministic_for_fixed_key_and_iv():
    c = VaultCrypto(); salt = bytes(16); iv = bytes(12)
    key = c.derive_key('pw', salt)
    assert c.seal(key, iv, b'payload') == c.seal(c.derive_key('pw', salt), iv, b'payload')

def test_kdf_matches_pbkdf2_sha256_100k():
    import hashlib
    from cryptography.hazmat.primitives.ciphers.aead import AESGCM
    salt = bytes(range(16)); iv = bytes(range(12))
    raw = hashlib.pbkdf2_hmac('sha256', 'pw'.encode('utf-8'), salt, 100000, 32)
    expected = AESGCM(raw).encrypt(iv, b'known answer', None)
    assert VaultCrypto().seal(VaultCrypto().derive_key('pw', salt), iv, b'known answer') == expected
