"""Plaintext application data: the document sealed inside the envelope.

Field names on disk are camelCase; `to_dict` / `from_dict` translate.
`AppData.from_dict` raises CorruptDataError on anything that does not match.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from config.settings import DEFAULT_GOLD_PRICE_PER_GRAM
from .errors import CorruptDataError, InvalidInputError

class TransactionType(str, Enum):
	INCOME = 'INCOME'
	EXPENSE = 'EXPENSE'

class DebtType(str, Enum):
	LENT = 'LENT'
	BORROWED = 'BORROWED'

class RiskLevel(str, Enum):
	LOW = 'Low'
	MEDIUM = 'Medium'
	HIGH = 'High'

def _num(raw: Dict, key: str, optional: bool = False) -> Optional[float]:
	v = raw.get(key)
	if v is None and optional: return None
	if isinstance(v, bool) or not isinstance(v, (int, float)):
		raise CorruptDataError(f"Field '{key}' must be a number")
	return float(v)

def _str(raw: Dict, key: str, optional: bool = False, default: str = '') -> Optional[str]:
	v = raw.get(key, None if optional else default)
	if v is None and optional: return None
	if not isinstance(v, str):
		raise CorruptDataError(f"Field '{key}' must be a string")
	return v

def _id(raw: Dict) -> str:
	v = raw.get('id')
	if not isinstance(v, str) or not v:
		raise CorruptDataError("Field 'id' must be a non-empty string")
	return v

def _enum(cls, raw: Dict, key: str):
	try:
		return cls(raw.get(key))
	except ValueError:
		raise CorruptDataError(f"Field '{key}' has unknown value {raw.get(key)!r}") from None

def _coerce(cls, value, name: str):
	try:
		return cls(value)
	except ValueError:
		raise InvalidInputError(f"Invalid {name}: {value!r}") from None

def parse_date(text: str) -> Optional[datetime]:
	"""Parse a stored ISO date as an aware UTC datetime; naive values are taken as UTC."""
	try:
		when = datetime.fromisoformat(text.replace('Z', '+00:00'))
	except (AttributeError, ValueError):
		return None
	return when.replace(tzinfo=timezone.utc) if when.tzinfo is None else when.astimezone(timezone.utc)

def _drop_none(d: Dict[str, Any]) -> Dict[str, Any]:
	return {k: v for k, v in d.items() if v is not None}

@dataclass
class Transaction:
	id: str
	type: TransactionType
	category: str
	amount: float
	date: str
	description: str = ''
	is_recurring: Optional[bool] = None

	def __post_init__(self):
		self.type = _coerce(TransactionType, self.type, 'transaction type')

	def to_dict(self) -> Dict[str, Any]:
		return _drop_none({'id': self.id, 'type': self.type.value, 'category': self.category, 'amount': self.amount,
			'date': self.date, 'description': self.description, 'isRecurring': self.is_recurring})

	@classmethod
	def from_dict(cls, raw: Dict[str, Any]) -> 'Transaction':
		rec = raw.get('isRecurring')
		if rec is not None and not isinstance(rec, bool):
			raise CorruptDataError("Field 'isRecurring' must be a boolean")
		return cls(_id(raw), _enum(TransactionType, raw, 'type'), _str(raw, 'category'), _num(raw, 'amount'),
			_str(raw, 'date'), _str(raw, 'description'), rec)

@dataclass
class Debt:
	id: str
	type: DebtType
	person: str
	amount: float
	description: str = ''
	due_date: Optional[str] = None
	interest_rate: Optional[float] = None

	def __post_init__(self):
		self.type = _coerce(DebtType, self.type, 'debt type')

	def to_dict(self) -> Dict[str, Any]:
		return _drop_none({'id': self.id, 'type': self.type.value, 'person': self.person, 'amount': self.amount,
			'dueDate': self.due_date, 'interestRate': self.interest_rate, 'description': self.description})

	@classmethod
	def from_dict(cls, raw: Dict[str, Any]) -> 'Debt':
		return cls(_id(raw), _enum(DebtType, raw, 'type'), _str(raw, 'person'), _num(raw, 'amount'),
			_str(raw, 'description'), _str(raw, 'dueDate', optional=True), _num(raw, 'interestRate', optional=True))

@dataclass
class Investment:
	id: str
	name: str
	country: str
	sector: str
	risk_level: RiskLevel
	amount: float
	sharia_compliance_notes: str = ''

	def __post_init__(self):
		self.risk_level = _coerce(RiskLevel, self.risk_level, 'risk level')

	def to_dict(self) -> Dict[str, Any]:
		return {'id': self.id, 'name': self.name, 'country': self.country, 'sector': self.sector,
			'riskLevel': self.risk_level.value, 'amount': self.amount, 'shariaComplianceNotes': self.sharia_compliance_notes}

	@classmethod
	def from_dict(cls, raw: Dict[str, Any]) -> 'Investment':
		return cls(_id(raw), _str(raw, 'name'), _str(raw, 'country'), _str(raw, 'sector'),
			_enum(RiskLevel, raw, 'riskLevel'), _num(raw, 'amount'), _str(raw, 'shariaComplianceNotes'))

@dataclass
class ZakatAssets:
	cash: float = 0.0
	gold_in_grams: float = 0.0

	def to_dict(self) -> Dict[str, Any]:
		return {'cash': self.cash, 'goldInGrams': self.gold_in_grams}

	@classmethod
	def from_dict(cls, raw: Dict[str, Any]) -> 'ZakatAssets':
		return cls(_num(raw, 'cash'), _num(raw, 'goldInGrams'))

@dataclass
class Settings:
	gold_price_per_gram: float = DEFAULT_GOLD_PRICE_PER_GRAM

	def to_dict(self) -> Dict[str, Any]:
		return {'goldPricePerGram': self.gold_price_per_gram}

	@classmethod
	def from_dict(cls, raw: Dict[str, Any]) -> 'Settings':
		return cls(_num(raw, 'goldPricePerGram'))

@dataclass
class AppData:
	transactions: List[Transaction] = field(default_factory=list)
	debts: List[Debt] = field(default_factory=list)
	investments: List[Investment] = field(default_factory=list)
	zakat_assets: ZakatAssets = field(default_factory=ZakatAssets)
	settings: Settings = field(default_factory=Settings)

	def to_dict(self) -> Dict[str, Any]:
		return {
			'transactions': [t.to_dict() for t in self.transactions],
			'debts': [d.to_dict() for d in self.debts],
			'investments': [i.to_dict() for i in self.investments],
			'zakatAssets': self.zakat_assets.to_dict(),
			'settings': self.settings.to_dict(),
		}

	@classmethod
	def from_dict(cls, raw: Any) -> 'AppData':
		if not isinstance(raw, dict):
			raise CorruptDataError('Application data must be an object')
		data = cls(
			transactions=[Transaction.from_dict(r) for r in _list(raw, 'transactions')],
			debts=[Debt.from_dict(r) for r in _list(raw, 'debts')],
			investments=[Investment.from_dict(r) for r in _list(raw, 'investments')],
			zakat_assets=ZakatAssets.from_dict(_obj(raw, 'zakatAssets')),
			settings=Settings.from_dict(_obj(raw, 'settings')),
		)
		for name in ('transactions', 'debts', 'investments'):
			ids = [item.id for item in getattr(data, name)]
			if len(ids) != len(set(ids)):
				raise CorruptDataError(f"Duplicate id in {name}")
		return data

	def copy(self) -> 'AppData':
		"""Deep copy, so callers can edit without touching the session's model."""
		return AppData.from_dict(self.to_dict())

def _list(raw: Dict, key: str) -> List[Dict]:
	v = raw.get(key)
	if not isinstance(v, list): raise CorruptDataError(f"Field '{key}' must be a list")
	if not all(isinstance(r, dict) for r in v): raise CorruptDataError(f"Entries of '{key}' must be objects")
	return v

def _obj(raw: Dict, key: str) -> Dict:
	v = raw.get(key)
	if not isinstance(v, dict): raise CorruptDataError(f"Field '{key}' must be an object")
	return v

__all__ = ['TransactionType','DebtType','RiskLevel','Transaction','Debt','Investment','ZakatAssets','Settings','AppData']
