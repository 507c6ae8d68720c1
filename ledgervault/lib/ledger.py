"""CRUD helpers over an `AppData` working copy.

Callers take `session.app_data`, edit it here, then hand the whole document
back with `session.update_app_data(data)`.
"""
from __future__ import annotations
import math, uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional, Union
from .errors import LedgerError
from .models import parse_date, AppData, Transaction, TransactionType, Debt, DebtType, Investment, RiskLevel

KINDS = ('transactions', 'debts', 'investments')

Item = Union[Transaction, Debt, Investment]

def _amount(value: float) -> float:
	try:
		value = float(value)
	except (TypeError, ValueError):
		raise LedgerError(f"Invalid amount: {value!r}") from None
	if not math.isfinite(value) or value < 0: raise LedgerError('Amount must be a non-negative number')
	return value

def _kind(kind: str) -> str:
	if kind not in KINDS: raise LedgerError(f"Unknown kind {kind!r} (expected one of {', '.join(KINDS)})")
	return kind

def new_id() -> str:
	return uuid.uuid4().hex

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)

def _newest_key(t: Transaction) -> datetime:
	return parse_date(t.date) or _EPOCH

class LedgerManager:
	def add_transaction(self, data: AppData, type: TransactionType | str, category: str, amount: float,
			date: str | None = None, description: str = '', is_recurring: bool | None = None) -> str:
		if not category: raise LedgerError('Category required')
		try:
			ttype = TransactionType(type)
		except ValueError:
			raise LedgerError(f"Invalid transaction type: {type!r}") from None
		t = Transaction(new_id(), ttype, category, _amount(amount), date or datetime.now(timezone.utc).isoformat(), description, is_recurring)
		data.transactions.append(t)
		return t.id

	def add_debt(self, data: AppData, type: DebtType | str, person: str, amount: float, description: str = '',
			due_date: str | None = None, interest_rate: float | None = None) -> str:
		if not person: raise LedgerError('Person required')
		try:
			dtype = DebtType(type)
		except ValueError:
			raise LedgerError(f"Invalid debt type: {type!r}") from None
		rate = _amount(interest_rate) if interest_rate is not None else None
		d = Debt(new_id(), dtype, person, _amount(amount), description, due_date, rate)
		data.debts.append(d)
		return d.id

	def add_investment(self, data: AppData, name: str, amount: float, country: str = '', sector: str = '',
			risk_level: RiskLevel | str = RiskLevel.MEDIUM, sharia_compliance_notes: str = '') -> str:
		if not name: raise LedgerError('Name required')
		try:
			risk = RiskLevel(risk_level)
		except ValueError:
			raise LedgerError(f"Invalid risk level: {risk_level!r}") from None
		i = Investment(new_id(), name, country, sector, risk, _amount(amount), sharia_compliance_notes)
		data.investments.append(i)
		return i.id

	def update_zakat(self, data: AppData, cash: float | None = None, gold_in_grams: float | None = None,
			gold_price_per_gram: float | None = None) -> None:
		if cash is not None: data.zakat_assets.cash = _amount(cash)
		if gold_in_grams is not None: data.zakat_assets.gold_in_grams = _amount(gold_in_grams)
		if gold_price_per_gram is not None: data.settings.gold_price_per_gram = _amount(gold_price_per_gram)

	def get_item(self, data: AppData, kind: str, item_id: str) -> Optional[Item]:
		for item in getattr(data, _kind(kind)):
			if item.id == item_id: return item
		return None

	def list_items(self, data: AppData, kind: str) -> List[Item]:
		"""Items of one kind; transactions newest first, the rest in stored order."""
		items = list(getattr(data, _kind(kind)))
		if kind == 'transactions':
			items.sort(key=_newest_key, reverse=True)
		return items

	def delete_item(self, data: AppData, kind: str, item_id: str, confirm: Callable[[str], bool] | None = None) -> bool:
		"""Remove one item by id. Returns False if `confirm` declines.

		Raises LedgerError if the item does not exist.
		"""
		item = self.get_item(data, kind, item_id)
		if item is None: raise LedgerError('Item not found')
		if confirm is not None and not confirm(f"Delete {kind[:-1]} {item_id}?"):
			return False
		getattr(data, kind).remove(item)
		return True
