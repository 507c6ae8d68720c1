"""Error kinds surfaced by the vault core.

Nothing below the session boundary leaks raw `cryptography`, `OSError` or
JSON exceptions; they are converted into one of these.
"""
from __future__ import annotations

class LedgerVaultError(Exception):
	"""Base for every error raised by ledgervault."""

# crypto / codec
class InvalidInputError(LedgerVaultError): ...
class AuthenticationFailure(LedgerVaultError): ...
class MalformedEnvelopeError(LedgerVaultError): ...

# session
class NoDataError(LedgerVaultError): ...
class InvalidPasswordError(LedgerVaultError): ...
class CorruptDataError(LedgerVaultError): ...
class PersistenceError(LedgerVaultError): ...
class SessionStateError(LedgerVaultError): ...

# collaborators
class StorageError(LedgerVaultError): ...
class LedgerError(LedgerVaultError): ...
