"""Envelope codec: salt || iv || sealed, base64 encoded for text storage."""
from __future__ import annotations
import base64, binascii
from typing import Tuple
from config.settings import SALT_LENGTH, IV_LENGTH, ENVELOPE_HEADER_LENGTH
from .errors import InvalidInputError, MalformedEnvelopeError

def encode(salt: bytes, iv: bytes, sealed: bytes) -> str:
	if len(salt) != SALT_LENGTH: raise InvalidInputError(f"Salt must be {SALT_LENGTH} bytes")
	if len(iv) != IV_LENGTH: raise InvalidInputError(f"IV must be {IV_LENGTH} bytes")
	return base64.b64encode(bytes(salt) + bytes(iv) + bytes(sealed)).decode('ascii')

def decode(text: str) -> Tuple[bytes, bytes, bytes]:
	"""Split a stored envelope back into (salt, iv, sealed).

	Raises MalformedEnvelopeError when the text is not strict base64 or is
	shorter than the salt + IV header.
	Surrounding whitespace is ignored.
	"""
	if not isinstance(text, str):
		raise MalformedEnvelopeError('Envelope must be text')
	try:
		raw = base64.b64decode(text.strip().encode('ascii'), validate=True)
	except (UnicodeEncodeError, binascii.Error) as e:
		raise MalformedEnvelopeError(f"Envelope is not valid base64: {e}") from None
	if len(raw) < ENVELOPE_HEADER_LENGTH:
		raise MalformedEnvelopeError(f"Envelope too short ({len(raw)} bytes)")
	return raw[:SALT_LENGTH], raw[SALT_LENGTH:ENVELOPE_HEADER_LENGTH], raw[ENVELOPE_HEADER_LENGTH:]
