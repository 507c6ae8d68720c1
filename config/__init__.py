"""Configuration settings and constants for ledgervault.

Everything lives in `config.settings`; this package re-exports the
constants so callers can write `from config import STORAGE_KEY`.
"""

from .settings import (
	PBKDF2_ITERATIONS, SALT_LENGTH, IV_LENGTH, KEY_LENGTH, AUTH_TAG_LENGTH, ENVELOPE_HEADER_LENGTH,
	STORAGE_KEY, DEFAULT_DATA_DIR, ZAKAT_PERCENTAGE, NISSAB_GOLD_GRAMS, DEFAULT_GOLD_PRICE_PER_GRAM,
	GEMINI_MODEL, LOG_LEVEL,
)

__all__ = [
	'PBKDF2_ITERATIONS', 'SALT_LENGTH', 'IV_LENGTH', 'KEY_LENGTH', 'AUTH_TAG_LENGTH', 'ENVELOPE_HEADER_LENGTH',
	'STORAGE_KEY', 'DEFAULT_DATA_DIR', 'ZAKAT_PERCENTAGE', 'NISSAB_GOLD_GRAMS', 'DEFAULT_GOLD_PRICE_PER_GRAM',
	'GEMINI_MODEL', 'LOG_LEVEL'
]
