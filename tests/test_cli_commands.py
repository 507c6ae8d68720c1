from click.testing import CliRunner
from ledgervault.cli.commands import cli

def register(runner, pw='pw-Secret-1'):
    return runner.invoke(cli, ['register'], input=f'{pw}\n{pw}\n')

def test_cli_register_and_info(monkeypatch, tmp_path):
    monkeypatch.setenv('LEDGERVAULT_DATA_DIR', str(tmp_path))
    runner = CliRunner()
    r = register(runner)
    assert r.exit_code == 0
    assert 'Vault created' in r.output
    r2 = runner.invoke(cli, ['info'], input='pw-Secret-1\n')
    assert r2.exit_code == 0
    assert '"goldPricePerGram": 65.0' in r2.output

def test_cli_register_refuses_overwrite(monkeypatch, tmp_path):
    monkeypatch.setenv('LEDGERVAULT_DATA_DIR', str(tmp_path))
    runner = CliRunner()
    register(runner)
    again = register(runner)
    assert again.exit_code == 1
    assert 'already exists' in again.output

def test_cli_add_list_delete(monkeypatch, tmp_path):
    monkeypatch.setenv('LEDGERVAULT_DATA_DIR', str(tmp_path))
    runner = CliRunner()
    register(runner)
    add = runner.invoke(cli, ['add-transaction'], input='pw-Secret-1\nEXPENSE\nGroceries\n42.5\n')
    assert add.exit_code == 0
    assert 'Added transaction' in add.output
    lst = runner.invoke(cli, ['list', 'transactions'], input='pw-Secret-1\n')
    assert 'EXPENSE 42.50 Groceries' in lst.output
    tid = lst.output.strip().splitlines()[-1].split(':')[0]
    keep = runner.invoke(cli, ['delete', 'transactions', tid], input='pw-Secret-1\nn\n')
    assert 'Cancelled' in keep.output
    gone = runner.invoke(cli, ['delete', 'transactions', tid], input='pw-Secret-1\ny\n')
    assert gone.exit_code == 0
    lst2 = runner.invoke(cli, ['list', 'transactions'], input='pw-Secret-1\n')
    assert 'Groceries' not in lst2.output

def test_cli_wrong_password(monkeypatch, tmp_path):
    monkeypatch.setenv('LEDGERVAULT_DATA_DIR', str(tmp_path))
    runner = CliRunner()
    register(runner)
    r = runner.invoke(cli, ['info'], input='nope\n')
    assert r.exit_code == 1
    assert 'Password incorrect or data corrupted' in r.output

def test_cli_zakat(monkeypatch, tmp_path):
    monkeypatch.setenv('LEDGERVAULT_DATA_DIR', str(tmp_path))
    runner = CliRunner()
    register(runner)
    r = runner.invoke(cli, ['zakat', '--cash', '10000'], input='pw-Secret-1\n')
    assert r.exit_code == 0
    assert 'Zakat due: 250.00' in r.output

def test_cli_insights_without_transactions(monkeypatch, tmp_path):
    monkeypatch.setenv('LEDGERVAULT_DATA_DIR', str(tmp_path))
    runner = CliRunner()
    register(runner)
    r = runner.invoke(cli, ['insights'], input='pw-Secret-1\n')
    assert 'Start by adding your first income or expense' in r.output

def test_cli_reset(monkeypatch, tmp_path):
    monkeypatch.setenv('LEDGERVAULT_DATA_DIR', str(tmp_path))
    runner = CliRunner()
    register(runner)
    assert 'Cancelled' in runner.invoke(cli, ['reset'], input='n\n').output
    assert 'All data deleted' in runner.invoke(cli, ['reset'], input='y\n').output
    r = runner.invoke(cli, ['info'], input='pw-Secret-1\n')
    assert 'No data found' in r.output

def test_cli_dashboard(monkeypatch, tmp_path):
    monkeypatch.setenv('LEDGERVAULT_DATA_DIR', str(tmp_path))
    runner = CliRunner()
    register(runner)
    runner.invoke(cli, ['add-transaction'], input='pw-Secret-1\nINCOME\nSalary\n1000\n')
    runner.invoke(cli, ['add-transaction'], input='pw-Secret-1\nEXPENSE\nRent\n600\n')
    r = runner.invoke(cli, ['dashboard'], input='pw-Secret-1\n')
    assert r.exit_code == 0
    assert "This month's income: 1000.00" in r.output
    assert 'Net cash flow: 400.00' in r.output
    assert '-600.00 Rent' in r.output

def test_cli_export_writes_plain_json(monkeypatch, tmp_path):
    monkeypatch.setenv('LEDGERVAULT_DATA_DIR', str(tmp_path / 'data'))
    runner = CliRunner()
    register(runner)
    r = runner.invoke(cli, ['export', '--dest', str(tmp_path / 'out')], input='pw-Secret-1\n')
    assert r.exit_code == 0
    assert 'NOT encrypted' in r.output
    files = list((tmp_path / 'out').glob('hadj-finance-backup-*.json'))
    assert len(files) == 1
    assert '"goldPricePerGram": 65.0' in files[0].read_text()
