"""Key-value persistence collaborators for the envelope slot.

The session only needs get / set / delete on one fixed key. Two backends:
an in-memory dict and a directory holding one file per key.
`export_plaintext` writes the unencrypted JSON backup offered by the CLI.
"""
from __future__ import annotations
import json, logging, os, re
from abc import ABC, abstractmethod
from contextlib import suppress
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Dict, Optional
from config.settings import DEFAULT_DATA_DIR
from .errors import StorageError

log = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r'^[A-Za-z0-9_.-]+$')

class KeyValueStore(ABC):
	@abstractmethod
	def get(self, key: str) -> Optional[str]: ...

	@abstractmethod
	def set(self, key: str, text: str) -> None: ...

	@abstractmethod
	def delete(self, key: str) -> None: ...

class MemoryKeyValueStore(KeyValueStore):
	def __init__(self):
		self._items: Dict[str, str] = {}

	def get(self, key: str) -> Optional[str]:
		return self._items.get(key)

	def set(self, key: str, text: str) -> None:
		self._items[key] = text

	def delete(self, key: str) -> None:
		self._items.pop(key, None)

class FileKeyValueStore(KeyValueStore):
	"""One UTF-8 text file per key under `directory`.

	Writes go through a temporary file and `os.replace`, so a reader sees
	either the previous envelope or the new one, never a partial write.
	"""
	def __init__(self, directory: Path | None = None):
		# Resolve dynamically to honor environment overrides in tests
		if directory is not None:
			self.directory = Path(directory)
		else:
			env_dir = os.environ.get('LEDGERVAULT_DATA_DIR')
			self.directory = Path(env_dir) if env_dir else DEFAULT_DATA_DIR

	def path_for(self, key: str) -> Path:
		if not _KEY_PATTERN.match(key): raise StorageError(f"Invalid storage key: {key!r}")
		return self.directory / f"{key}.vault"

	def get(self, key: str) -> Optional[str]:
		path = self.path_for(key)
		try:
			return path.read_text(encoding='utf-8')
		except FileNotFoundError:
			return None
		except (OSError, UnicodeDecodeError) as e:
			raise StorageError(f"Read failed for {path}: {e}") from e

	def set(self, key: str, text: str) -> None:
		path = self.path_for(key)
		tmp = path.with_suffix('.tmp')
		try:
			self.directory.mkdir(parents=True, exist_ok=True)
			tmp.write_text(text, encoding='utf-8')
			os.replace(tmp, path)
		except OSError as e:
			with suppress(OSError):
				tmp.unlink()
			raise StorageError(f"Write failed for {path}: {e}") from e
		log.debug('Stored %d chars under %s', len(text), key)

	def delete(self, key: str) -> None:
		path = self.path_for(key)
		try:
			path.unlink(missing_ok=True)
		except OSError as e:
			raise StorageError(f"Delete failed for {path}: {e}") from e

def export_plaintext(data: Dict, dest: Path, today: date | None = None) -> Path:
	"""Write `data` as indented JSON to `dest/hadj-finance-backup-<date>.json`.

	The file is NOT encrypted; the caller warns the user.
	"""
	target = Path(dest) / f"hadj-finance-backup-{(today or datetime.now(timezone.utc).date()).isoformat()}.json"
	try:
		target.parent.mkdir(parents=True, exist_ok=True)
		target.write_text(json.dumps(data, indent=2), encoding='utf-8')
	except OSError as e:
		raise StorageError(f"Export failed for {target}: {e}") from e
	log.info('Exported plaintext backup to %s', target)
	return target
