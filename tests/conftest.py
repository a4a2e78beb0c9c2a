import signal

import pytest

import nvpowermizerd
import nvpowermizerd.config
import nvpowermizerd.idle


class FakeSource(nvpowermizerd.idle.IdleSource):
	name = 'fake'

	def __init__(self, samples=()):
		super().__init__(':0')
		self.samples = list(samples)
		self.opened = False
		self.closed = False

	def open(self):
		self.opened = True

	def close(self):
		self.closed = True

	def get_idle_ms(self):
		sample = self.samples.pop(0)
		if isinstance(sample, Exception):
			raise sample
		return sample


class FakeAction:
	def __init__(self, ret=0):
		self.calls = []
		self.ret = ret

	def activate(self, mode, gpu_id):
		self.calls.append((mode, gpu_id))
		return self.ret


@pytest.fixture
def settings():
	s = nvpowermizerd.config.Settings()
	s.gpu_id = 2
	return s


@pytest.fixture
def action():
	return FakeAction()


@pytest.fixture
def restore_signals():
	handlers = {signum: signal.getsignal(signum) for signum in (signal.SIGINT, signal.SIGTERM)}
	yield
	for signum, handler in handlers.items():
		signal.signal(signum, handler)


@pytest.fixture
def make_source():
	return FakeSource
