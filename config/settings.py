"""Project configuration settings.

Constants shared by the crypto core, the session and the CLI.
Environment variables override the paths and service settings only;
the cryptographic parameters are fixed because stored envelopes depend on them.
"""

from pathlib import Path
import os

# Security / crypto
PBKDF2_ITERATIONS = 100_000
SALT_LENGTH = 16
IV_LENGTH = 12   # GCM nonce
KEY_LENGTH = 32  # AES-256
AUTH_TAG_LENGTH = 16  # GCM tag length
ENVELOPE_HEADER_LENGTH = SALT_LENGTH + IV_LENGTH

# Storage
STORAGE_KEY = "hadjFinanceData"
DEFAULT_DATA_DIR = Path(os.environ.get("LEDGERVAULT_DATA_DIR", "vault_data"))

# Finance defaults
ZAKAT_PERCENTAGE = 0.025
NISSAB_GOLD_GRAMS = 85
DEFAULT_GOLD_PRICE_PER_GRAM = 65.0

# AI assistant
GEMINI_MODEL = os.environ.get("LEDGERVAULT_GEMINI_MODEL", "gemini-2.5-flash")

# Logging
LOG_LEVEL = os.environ.get("LEDGERVAULT_LOG_LEVEL", "WARNING")

__all__ = [
	'PBKDF2_ITERATIONS','SALT_LENGTH','IV_LENGTH','KEY_LENGTH','AUTH_TAG_LENGTH','ENVELOPE_HEADER_LENGTH',
	'STORAGE_KEY','DEFAULT_DATA_DIR','ZAKAT_PERCENTAGE','NISSAB_GOLD_GRAMS','DEFAULT_GOLD_PRICE_PER_GRAM',
	'GEMINI_MODEL','LOG_LEVEL'
]
