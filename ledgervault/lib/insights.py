"""Derived figures: the anonymized summary sent to the assistant, Zakat,
and the dashboard's monthly totals."""
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional
from config.settings import NISSAB_GOLD_GRAMS, ZAKAT_PERCENTAGE
from .ledger import LedgerManager
from .models import parse_date, AppData, DebtType, Transaction, TransactionType, ZakatAssets

@dataclass
class ZakatResult:
	nissab_value: float
	total_asset_value: float
	is_due: bool
	amount: float

def zakat_due(assets: ZakatAssets, gold_price_per_gram: float) -> ZakatResult:
	nissab = NISSAB_GOLD_GRAMS * gold_price_per_gram
	total = assets.cash + assets.gold_in_grams * gold_price_per_gram
	due = total >= nissab
	return ZakatResult(nissab, total, due, total * ZAKAT_PERCENTAGE if due else 0.0)

def savings_rate(data: AppData) -> float:
	income = sum(t.amount for t in data.transactions if t.type is TransactionType.INCOME)
	expenses = sum(t.amount for t in data.transactions if t.type is TransactionType.EXPENSE)
	return (income - expenses) / income * 100 if income > 0 else 0.0

def financial_summary(data: AppData) -> str:
	"""Coarse description of the user's finances.

	Only signs, bands and counts: no amounts, names or categories.
	"""
	income = sum(t.amount for t in data.transactions if t.type is TransactionType.INCOME)
	expenses = sum(t.amount for t in data.transactions if t.type is TransactionType.EXPENSE)
	invested = sum(i.amount for i in data.investments)
	borrowed = sum(d.amount for d in data.debts if d.type is DebtType.BORROWED)
	lines = [
		f"- Monthly Net Cash Flow: {'Positive' if income - expenses > 0 else 'Negative'}",
		f"- Approximate Savings Rate: {savings_rate(data):.0f}%",
		f"- Total invested amount: {'Significant' if invested > 0 else 'Low'}",
		f"- Total debt amount: {'Has debt obligations' if borrowed > 0 else 'No significant debt'}",
		f"- Number of investments: {len(data.investments)}",
	]
	return '\n'.join(lines)

@dataclass
class MonthlyStats:
	income: float
	expenses: float

	@property
	def net_flow(self) -> float:
		return self.income - self.expenses

def monthly_stats(data: AppData, now: Optional[datetime] = None) -> MonthlyStats:
	"""Income and expenses of transactions dated in the current UTC month."""
	now = now or datetime.now(timezone.utc)
	stats = MonthlyStats(0.0, 0.0)
	for t in data.transactions:
		when = parse_date(t.date)
		if when is None or (when.year, when.month) != (now.year, now.month):
			continue
		if t.type is TransactionType.INCOME: stats.income += t.amount
		else: stats.expenses += t.amount
	return stats

def recent_transactions(data: AppData, limit: int = 5) -> List[Transaction]:
	return LedgerManager().list_items(data, 'transactions')[:limit]
