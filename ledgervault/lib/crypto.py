"""Password-based key derivation and authenticated encryption.

PBKDF2-HMAC-SHA256 (100k iterations) stretches the password into an AES-256
key; AES-GCM seals the payload with a trailing 16-byte tag and no associated
data. Never log passwords, keys, plaintext or ciphertext.
"""
from __future__ import annotations
import secrets
from typing import Tuple
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from config.settings import PBKDF2_ITERATIONS, SALT_LENGTH, IV_LENGTH, KEY_LENGTH
from .errors import InvalidInputError, AuthenticationFailure

class SealingKey:
	"""A derived key usable only through `VaultCrypto.seal` / `VaultCrypto.open`.

	The raw key bytes are handed straight to the AEAD primitive and not kept
	on this object.
	"""
	__slots__ = ('_aead',)

	def __init__(self, raw: bytes):
		if len(raw) != KEY_LENGTH:
			raise InvalidInputError(f"Key must be {KEY_LENGTH} bytes")
		self._aead = AESGCM(raw)

	def __repr__(self) -> str:
		return '<SealingKey aes-256-gcm>'

class VaultCrypto:
	def generate_salt(self) -> bytes:
		return secrets.token_bytes(SALT_LENGTH)

	def generate_iv(self) -> bytes:
		return secrets.token_bytes(IV_LENGTH)

	def derive_key(self, password: str, salt: bytes) -> SealingKey:
		"""Stretch `password` with `salt` into a sealing key (deterministic)."""
		if not isinstance(password, str):
			raise InvalidInputError('Password must be a string')
		if not password:
			raise InvalidInputError('Password empty')
		if not isinstance(salt, (bytes, bytearray)) or len(salt) != SALT_LENGTH:
			raise InvalidInputError(f"Salt must be {SALT_LENGTH} bytes")
		kdf = PBKDF2HMAC(algorithm=hashes.SHA256(), length=KEY_LENGTH, salt=bytes(salt), iterations=PBKDF2_ITERATIONS)
		return SealingKey(kdf.derive(password.encode('utf-8')))

	def seal(self, key: SealingKey, iv: bytes, plaintext: bytes) -> bytes:
		"""Return ciphertext || tag."""
		self._check(key, iv)
		return key._aead.encrypt(bytes(iv), bytes(plaintext), None)

	def open(self, key: SealingKey, iv: bytes, sealed: bytes) -> bytes:
		"""Verify the tag and return the plaintext.

		A wrong key and a tampered ciphertext look the same here: both raise
		`AuthenticationFailure`.
		"""
		self._check(key, iv)
		try:
			return key._aead.decrypt(bytes(iv), bytes(sealed), None)
		except InvalidTag:
			raise AuthenticationFailure('Authentication tag mismatch') from None

	@staticmethod
	def _check(key: SealingKey, iv: bytes) -> None:
		if not isinstance(key, SealingKey):
			raise InvalidInputError('Expected a SealingKey')
		if not isinstance(iv, (bytes, bytearray)) or len(iv) != IV_LENGTH:
			raise InvalidInputError(f"IV must be {IV_LENGTH} bytes")

def check_password_strength(password: str) -> Tuple[int, str]:
	"""Score a password 0-100 with human feedback. Advisory only."""
	score = 0; fb = []
	L = len(password)
	if L >= 16: score += 40
	elif L >= 12: score += 30
	elif L >= 8: score += 20; fb.append('Use 12+ chars')
	else: fb.append('Too short (min 8)')
	sets = [any(c.islower() for c in password), any(c.isupper() for c in password), any(c.isdigit() for c in password), any(not c.isalnum() for c in password)]
	score += sum(sets)*15
	if sum(sets) < 3: fb.append('Mix letters, digits and symbols')
	common = ['password','qwerty','abc','123','111','letmein']
	if any(p in password.lower() for p in common):
		score -= 15; fb.append('Avoid common patterns')
	if L and len(set(password)) < L*0.5:
		score -= 10; fb.append('Too many repeats')
	score = max(0, min(100, score))
	if score >= 80: label='Very Strong'
	elif score >= 60: label='Strong'
	elif score >= 40: label='Moderate'
	elif score >= 20: label='Weak'
	else: label='Very Weak'
	text = f"{label} ({score}/100)"
	if fb: text += ' - ' + ', '.join(fb)
	return score, text
