"""CLI commands implemented with click.

Every command that reads or changes data prompts for the password, unlocks
a fresh session, does its work, and locks again on the way out.
"""
from __future__ import annotations
import json, logging, click
from contextlib import contextmanager
from pathlib import Path
from config.settings import LOG_LEVEL
from ledgervault.lib.advisor import HadjAdvisor
from ledgervault.lib.crypto import check_password_strength
from ledgervault.lib.errors import LedgerVaultError
from ledgervault.lib.insights import monthly_stats, recent_transactions, zakat_due
from ledgervault.lib.ledger import KINDS, LedgerManager
from ledgervault.lib.models import TransactionType
from ledgervault.lib.session import VaultSession
from ledgervault.lib.storage import FileKeyValueStore, export_plaintext

def _session() -> VaultSession:
	return VaultSession(FileKeyValueStore())

@contextmanager
def _unlocked(password: str):
	session = _session()
	try:
		session.login(password)
		yield session
	except LedgerVaultError as e:
		raise click.ClickException(str(e)) from e
	finally:
		session.logout()

@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Log debug output to stderr.')
def cli(verbose):
	"""ledgervault: an encrypted, local-only finance tracker."""
	logging.basicConfig(level=logging.DEBUG if verbose else LOG_LEVEL, format='%(levelname)s %(name)s: %(message)s')

@cli.command()
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.option('--force', is_flag=True, help='Overwrite existing data.')
def register(password, force):
	"""Create a new encrypted data store. There is no password recovery."""
	session = _session()
	try:
		if session.has_data() and not force:
			raise click.ClickException('Data already exists (use --force to overwrite)')
		session.register(password)
	except LedgerVaultError as e:
		raise click.ClickException(str(e)) from e
	finally:
		session.logout()
	_score, fb = check_password_strength(password)
	click.echo(f'Vault created. Password strength: {fb}')
	click.echo('Keep this password safe: your data cannot be recovered without it.')

@cli.command()
@click.option('--password', prompt=True, hide_input=True)
def info(password):
	"""Show counts and settings."""
	with _unlocked(password) as s:
		data = s.app_data
		click.echo(json.dumps({
			'transactions': len(data.transactions),
			'debts': len(data.debts),
			'investments': len(data.investments),
			'zakatAssets': data.zakat_assets.to_dict(),
			'settings': data.settings.to_dict(),
		}, indent=2))

@cli.command()
@click.option('--password', prompt=True, hide_input=True)
def dashboard(password):
	"""This month's income, expenses and net flow, plus recent transactions."""
	with _unlocked(password) as s:
		data = s.app_data
		m = monthly_stats(data)
		click.echo(f"This month's income: {m.income:.2f}")
		click.echo(f"This month's expenses: {m.expenses:.2f}")
		click.echo(f"Net cash flow: {m.net_flow:.2f}")
		recent = recent_transactions(data)
		click.echo('Recent transactions:' if recent else 'No transactions yet.')
		for t in recent:
			sign = '+' if t.type is TransactionType.INCOME else '-'
			click.echo(f"  {t.date[:10]} {sign}{t.amount:.2f} {t.category}")

@cli.command()
@click.option('--password', prompt=True, hide_input=True)
@click.option('--dest', type=click.Path(file_okay=False, path_type=Path), default=Path('.'), help='Directory for the JSON file.')
def export(password, dest):
	"""Write all data as plain JSON (unencrypted)."""
	with _unlocked(password) as s:
		target = export_plaintext(s.app_data.to_dict(), dest)
		click.echo(f"Exported to {target}")
		click.echo('Warning: this file is NOT encrypted. Store it somewhere safe or delete it.')

@cli.command('add-transaction')
@click.option('--password', prompt=True, hide_input=True)
@click.option('--type', 'ttype', type=click.Choice(['INCOME', 'EXPENSE'], case_sensitive=False), prompt=True)
@click.option('--category', prompt=True)
@click.option('--amount', type=float, prompt=True)
@click.option('--description', default='')
@click.option('--date', default=None, help='ISO date, defaults to now.')
@click.option('--recurring', is_flag=True)
def add_transaction(password, ttype, category, amount, description, date, recurring):
	with _unlocked(password) as s:
		data = s.app_data
		tid = LedgerManager().add_transaction(data, ttype.upper(), category, amount, date, description, recurring or None)
		s.update_app_data(data)
		click.echo(f'Added transaction {tid}.')

@cli.command('add-debt')
@click.option('--password', prompt=True, hide_input=True)
@click.option('--type', 'dtype', type=click.Choice(['LENT', 'BORROWED'], case_sensitive=False), prompt=True)
@click.option('--person', prompt=True)
@click.option('--amount', type=float, prompt=True)
@click.option('--description', default='')
@click.option('--due-date', default=None)
@click.option('--interest-rate', type=float, default=None)
def add_debt(password, dtype, person, amount, description, due_date, interest_rate):
	with _unlocked(password) as s:
		data = s.app_data
		did = LedgerManager().add_debt(data, dtype.upper(), person, amount, description, due_date, interest_rate)
		s.update_app_data(data)
		click.echo(f'Added debt {did}.')

@cli.command('add-investment')
@click.option('--password', prompt=True, hide_input=True)
@click.option('--name', prompt=True)
@click.option('--amount', type=float, prompt=True)
@click.option('--country', default='')
@click.option('--sector', default='')
@click.option('--risk', type=click.Choice(['Low', 'Medium', 'High']), default='Medium')
@click.option('--notes', default='', help='Sharia compliance notes.')
def add_investment(password, name, amount, country, sector, risk, notes):
	with _unlocked(password) as s:
		data = s.app_data
		iid = LedgerManager().add_investment(data, name, amount, country, sector, risk, notes)
		s.update_app_data(data)
		click.echo(f'Added investment {iid}.')

@cli.command('list')
@click.argument('kind', type=click.Choice(KINDS), default='transactions')
@click.option('--password', prompt=True, hide_input=True)
def list_items(kind, password):
	with _unlocked(password) as s:
		for item in LedgerManager().list_items(s.app_data, kind):
			if kind == 'transactions':
				flag = ' (recurring)' if item.is_recurring else ''
				click.echo(f"{item.id}: {item.type.value} {item.amount:.2f} {item.category} {item.date[:10]}{flag}")
			elif kind == 'debts':
				click.echo(f"{item.id}: {item.type.value} {item.amount:.2f} {item.person}")
			else:
				click.echo(f"{item.id}: {item.name} {item.amount:.2f} [{item.risk_level.value}]")

@cli.command()
@click.argument('kind', type=click.Choice(KINDS))
@click.argument('item_id')
@click.option('--password', prompt=True, hide_input=True)
@click.option('--yes', is_flag=True, help='Do not ask for confirmation.')
def delete(kind, item_id, password, yes):
	with _unlocked(password) as s:
		data = s.app_data
		if not LedgerManager().delete_item(data, kind, item_id, None if yes else click.confirm):
			click.echo('Cancelled.')
			return
		s.update_app_data(data)
		click.echo(f'Deleted {item_id}.')

@cli.command()
@click.option('--password', prompt=True, hide_input=True)
@click.option('--cash', type=float, default=None)
@click.option('--gold', type=float, default=None, help='Gold held, in grams.')
@click.option('--gold-price', type=float, default=None, help='Price per gram.')
def zakat(password, cash, gold, gold_price):
	"""Show (and optionally update) Zakat assets and the amount due."""
	with _unlocked(password) as s:
		data = s.app_data
		if any(v is not None for v in (cash, gold, gold_price)):
			LedgerManager().update_zakat(data, cash, gold, gold_price)
			s.update_app_data(data)
		r = zakat_due(data.zakat_assets, data.settings.gold_price_per_gram)
		click.echo(f"Nissab threshold: {r.nissab_value:.2f}")
		click.echo(f"Total assets: {r.total_asset_value:.2f}")
		click.echo(f"Zakat due: {r.amount:.2f}" if r.is_due else 'Zakat not due (below nissab).')

@cli.command()
@click.option('--password', prompt=True, hide_input=True)
def insights(password):
	"""Ask the assistant for a short insight on your month."""
	with _unlocked(password) as s:
		click.echo(HadjAdvisor().dashboard_insights(s.app_data))

@cli.command()
@click.argument('investment_id')
@click.option('--password', prompt=True, hide_input=True)
def analyze(investment_id, password):
	"""Ask the assistant to analyze one investment."""
	with _unlocked(password) as s:
		data = s.app_data
		inv = LedgerManager().get_item(data, 'investments', investment_id)
		if inv is None:
			click.echo('Not found')
			return
		click.echo(HadjAdvisor().analyze_investment(inv, data))

@cli.command()
@click.argument('message')
@click.option('--password', prompt=True, hide_input=True)
def ask(message, password):
	"""Chat with the assistant."""
	with _unlocked(password) as s:
		click.echo(HadjAdvisor().chat(message, s.app_data))

@cli.command()
@click.option('--yes', is_flag=True, help='Do not ask for confirmation.')
def reset(yes):
	"""Permanently delete all stored data."""
	try:
		done = _session().reset_app(None if yes else click.confirm)
	except LedgerVaultError as e:
		raise click.ClickException(str(e)) from e
	click.echo('All data deleted.' if done else 'Cancelled.')

@cli.command('pw-strength')
@click.argument('password')
def pw_strength_cmd(password):
	score, fb = check_password_strength(password)
	click.echo(f"Score: {score} -> {fb}")
