"""Vault session: the only owner of the password, the derived key and the
decrypted application data.

Locked    -> nothing sensitive in memory.
Unlocked  -> password, current key and data held; every update re-encrypts
             the whole document with a fresh salt + IV and overwrites the
             stored envelope.

Saves are serialized by one lock held across "replace in memory" and
"persist", so the stored envelope always matches the last completed update.
"""
from __future__ import annotations
import json, logging, threading
from concurrent.futures import Future, ThreadPoolExecutor
from enum import Enum
from typing import Callable, Optional
from config.settings import STORAGE_KEY
from . import envelope
from .crypto import VaultCrypto, SealingKey
from .errors import (
	AuthenticationFailure, CorruptDataError, InvalidInputError, InvalidPasswordError,
	NoDataError, PersistenceError, SessionStateError, StorageError,
)
from .models import AppData
from .storage import KeyValueStore

log = logging.getLogger(__name__)

RESET_PROMPT = 'Are you sure? This will permanently delete all your data.'

class SessionState(str, Enum):
	LOCKED = 'locked'
	UNLOCKING = 'unlocking'
	UNLOCKED = 'unlocked'
	SAVING = 'saving'

class VaultSession:
	def __init__(self, store: KeyValueStore, storage_key: str = STORAGE_KEY, crypto: VaultCrypto | None = None):
		self._store = store
		self._storage_key = storage_key
		self._crypto = crypto or VaultCrypto()
		self._state = SessionState.LOCKED
		self._password: Optional[str] = None
		self._key: Optional[SealingKey] = None
		self._data: Optional[AppData] = None
		self._dirty = False
		self._save_lock = threading.Lock()
		self._executor: Optional[ThreadPoolExecutor] = None
		self._executor_lock = threading.Lock()

	def __enter__(self) -> 'VaultSession':
		return self

	def __exit__(self, *exc) -> None:
		self.logout()

	# -- state ---------------------------------------------------------

	@property
	def state(self) -> SessionState:
		return self._state

	@property
	def is_unlocked(self) -> bool:
		return self._state in (SessionState.UNLOCKED, SessionState.SAVING)

	@property
	def is_dirty(self) -> bool:
		"""True when the last save failed and memory is ahead of storage."""
		return self._dirty

	@property
	def app_data(self) -> AppData:
		"""A copy of the current data; hand changes back via `update_app_data`."""
		self._require_unlocked()
		return self._data.copy()

	def has_data(self) -> bool:
		return self._read() is not None

	# -- lifecycle -----------------------------------------------------

	def register(self, password: str) -> AppData:
		"""Create the default document, persist it, and unlock.

		The caller checks `has_data()` first; an existing envelope is overwritten.
		"""
		if self._state is not SessionState.LOCKED:
			raise SessionStateError('Already unlocked; log out first')
		data = AppData()
		with self._save_lock:
			key = self._persist(data, password)
			self._unlock(password, key, data)
		log.info('Vault registered')
		return data.copy()

	def login(self, password: str) -> AppData:
		if self._state is not SessionState.LOCKED:
			raise SessionStateError('Already unlocked; log out first')
		self._state = SessionState.UNLOCKING
		try:
			text = self._read()
			if text is None:
				raise NoDataError('No data found. Please register first.')
			salt, iv, sealed = envelope.decode(text)
			try:
				key = self._crypto.derive_key(password, salt)
				plaintext = self._crypto.open(key, iv, sealed)
			except (AuthenticationFailure, InvalidInputError):
				raise InvalidPasswordError('Password incorrect or data corrupted.') from None
			data = self._parse(plaintext)
		except Exception as e:
			self._state = SessionState.LOCKED
			log.warning('Login failed: %s', type(e).__name__)
			raise
		self._unlock(password, key, data)
		log.info('Vault unlocked')
		return data.copy()

	def update_app_data(self, new_data: AppData) -> None:
		"""Replace the whole document and persist it before returning.

		On PersistenceError the in-memory document has already changed;
		`is_dirty` stays True until a later save or `flush()` succeeds.
		"""
		if not isinstance(new_data, AppData):
			raise InvalidInputError('update_app_data expects an AppData')
		with self._save_lock:
			self._require_unlocked()
			self._data = new_data.copy()
			self._save_current()

	def submit_update(self, new_data: AppData) -> 'Future[None]':
		"""Run `update_app_data` on the background save worker.

		Submissions are applied in order; the returned future carries any error.
		"""
		self._require_unlocked()
		snapshot = new_data.copy()
		with self._executor_lock:
			if self._executor is None:
				self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='ledgervault-save')
			return self._executor.submit(self.update_app_data, snapshot)

	def flush(self) -> None:
		"""Persist the current in-memory document again (retry after a failure)."""
		with self._save_lock:
			self._require_unlocked()
			self._save_current()

	def logout(self) -> None:
		"""Drop password, key and data. Storage is left untouched."""
		self._drain_background()
		with self._save_lock:
			self._clear()
		log.info('Vault locked')

	def reset_app(self, confirm: Callable[[str], bool] | None = None) -> bool:
		"""Delete the stored envelope and log out. Irreversible.

		Returns False without touching anything if `confirm` declines.
		"""
		if confirm is not None and not confirm(RESET_PROMPT):
			return False
		self._drain_background()
		with self._save_lock:
			try:
				self._store.delete(self._storage_key)
			except (StorageError, OSError) as e:
				raise PersistenceError(f"Could not delete stored data: {e}") from e
			self._clear()
		log.warning('Vault reset: stored data deleted')
		return True

	# -- internals -----------------------------------------------------

	def _require_unlocked(self) -> None:
		if not self.is_unlocked:
			raise SessionStateError('Vault is locked')

	def _unlock(self, password: str, key: SealingKey, data: AppData) -> None:
		self._password, self._key, self._data = password, key, data
		self._dirty = False
		self._state = SessionState.UNLOCKED

	def _clear(self) -> None:
		self._password = None
		self._key = None
		self._data = None
		self._dirty = False
		self._state = SessionState.LOCKED

	def _drain_background(self) -> None:
		with self._executor_lock:
			executor, self._executor = self._executor, None
		if executor is not None:
			executor.shutdown(wait=True)

	def _save_current(self) -> None:
		# caller holds _save_lock
		self._state = SessionState.SAVING
		try:
			self._key = self._persist(self._data, self._password)
			self._dirty = False
		except PersistenceError:
			self._dirty = True
			raise
		finally:
			self._state = SessionState.UNLOCKED

	def _persist(self, data: AppData, password: str) -> SealingKey:
		salt = self._crypto.generate_salt()
		iv = self._crypto.generate_iv()
		key = self._crypto.derive_key(password, salt)
		payload = json.dumps(data.to_dict(), separators=(',', ':')).encode('utf-8')
		text = envelope.encode(salt, iv, self._crypto.seal(key, iv, payload))
		try:
			self._store.set(self._storage_key, text)
		except (StorageError, OSError) as e:
			log.error('Save failed: %s', e)
			raise PersistenceError(f"Could not save data, try again: {e}") from e
		log.debug('Saved envelope (%d chars)', len(text))
		return key

	def _read(self) -> Optional[str]:
		try:
			return self._store.get(self._storage_key)
		except (StorageError, OSError) as e:
			raise PersistenceError(f"Could not read stored data: {e}") from e

	@staticmethod
	def _parse(plaintext: bytes) -> AppData:
		try:
			raw = json.loads(plaintext.decode('utf-8'))
		except (UnicodeDecodeError, ValueError) as e:
			raise CorruptDataError(f"Decrypted data is not valid JSON: {e}") from None
		return AppData.from_dict(raw)
