from click.testing import CliRunner
from ledgervault.cli.commands import cli

def test_cli_help():
	r = CliRunner().invoke(cli, ['--help'])
	assert r.exit_code == 0
	assert 'register' in r.output and 'reset' in r.output


def test_pw_strength():
	r = CliRunner().invoke(cli, ['pw-strength', 'abc'])
	assert r.exit_code == 0
	assert 'Too short' in r.output


def test_no_data_before_register(monkeypatch, tmp_path):
	monkeypatch.setenv('LEDGERVAULT_DATA_DIR', str(tmp_path))
	r = CliRunner().invoke(cli, ['list'], input='pw\n')
	assert r.exit_code == 1
	assert 'No data found' in r.output
