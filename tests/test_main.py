import pytest

import nvpowermizerd
import nvpowermizerd.daemon
import nvpowermizerd.idle


@pytest.fixture
def started(monkeypatch, tmp_path):
	'''Captures the settings the daemon would be started with.'''
	monkeypatch.setenv('XDG_CONFIG_HOME', str(tmp_path))
	monkeypatch.setenv('XDG_CONFIG_DIRS', str(tmp_path / 'etc'))
	started = {}
	def run(settings):
		started['run'] = settings
		return 0
	def start(settings):
		started['start'] = settings
		return 0
	monkeypatch.setattr(nvpowermizerd.daemon, 'run', run)
	monkeypatch.setattr(nvpowermizerd.daemon, 'start', start)
	return started


def test_defaults(started):
	assert nvpowermizerd.main([]) == 0
	assert started['run'].gpu_id == 0


def test_gpuid(started):
	assert nvpowermizerd.main(['--gpuid', '2']) == 0
	assert started['run'].gpu_id == 2


def test_gpuid_overrides_config_file(started, tmp_path):
	config_file = tmp_path / 'config.py'
	config_file.write_text('def config(s):\n\ts.gpu_id = 1\n\ts.poll_high = 2000\n')
	assert nvpowermizerd.main(['-c', str(config_file), '-g', '3']) == 0
	assert started['run'].gpu_id == 3
	assert started['run'].poll_high == 2000


def test_daemon(started):
	assert nvpowermizerd.main(['--daemon', '-v']) == 0
	assert 'start' in started and 'run' not in started


def test_invalid_gpuid(started):
	assert nvpowermizerd.main(['--gpuid', '-1']) == 1
	assert started == {}


def test_bad_gpuid_argument(started):
	with pytest.raises(SystemExit) as e:
		nvpowermizerd.main(['--gpuid', 'first'])
	assert e.value.code == 2


def test_fatal_error(monkeypatch, tmp_path, caplog):
	monkeypatch.setenv('XDG_CONFIG_HOME', str(tmp_path))
	monkeypatch.setenv('XDG_CONFIG_DIRS', str(tmp_path / 'etc'))
	def run(settings):
		raise nvpowermizerd.idle.IdleSourceError("Couldn't open X display ':0'")
	monkeypatch.setattr(nvpowermizerd.daemon, 'run', run)

	assert nvpowermizerd.main([]) == 1
	assert "Fatal error: Couldn't open X display" in caplog.text
