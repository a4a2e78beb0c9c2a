# nvpowermizerd.controller - the idle / power mode control loop
# Samples the idle time, and switches the GPU to high power when the
# user is active and back to low power after a period of inactivity.
#
# Polling is asymmetric: in low power mode we poll often, so that we
# can react to user input with minimal latency; in high power mode,
# there is no hurry to notice that the user went idle, so we poll
# rarely to save CPU.

import time

import nvpowermizerd
import nvpowermizerd.idle
from nvpowermizerd import Mode
from nvpowermizerd.logging import log

class Controller:
	'''Owns the current power mode of one GPU.

	``source`` provides the idle time (an IdleSource), and ``action``
	applies a mode to a GPU (anything with an ``activate(mode,
	gpu_id)`` method, normally a PowerMizerAction).
	'''

	def __init__(self, settings, source, action, sleep=time.sleep):
		self.log = log.getChild('controller')
		self.settings = settings
		self.source = source
		self.action = action
		self.sleep = sleep

		self.gpu_id = settings.gpu_id

		# We start out assuming the card is in low power mode.
		self.mode = Mode.LOW

		# Set once the final switch to low power has been issued.
		self.stopped = False

		# Set while a command is running, and the function to call once
		# it has finished.
		self.switching = False
		self.deferred = None

	def __str__(self):
		return 'GPU %d in %s mode' % (self.gpu_id, self.mode)

	# Return the idle time in milliseconds.
	# If the idle source fails, assume the user is active, so that
	# we err on the side of being responsive.
	def sample(self):
		try:
			return self.source.get_idle_ms()
		except nvpowermizerd.idle.IdleSourceError as e:
			self.log.warning('Failed to get idle time, assuming user is active: %s', e)
			return 0

	# Issue the command for the given mode, and update our state.
	# The state is updated even if the command failed.
	def switch(self, mode):
		self.switching = True
		try:
			self.action.activate(mode, self.gpu_id)
			self.mode = mode
		finally:
			self.switching = False

		if self.deferred is not None:
			(func, self.deferred) = (self.deferred, None)
			func()

	# Call func now, or, if a command is running, once it has finished.
	# Used to keep the final switch to low power from overlapping a
	# running command.
	def defer(self, func):
		if self.switching:
			self.deferred = func
		else:
			func()

	# Take one sample and act on it.
	# Returns the time to wait (in seconds) before the next poll.
	def poll(self):
		idle_ms = self.sample()
		threshold = self.settings.idle_threshold

		self.log.debug('Poll - idle time: %dms Mode: %s', idle_ms, self.mode)

		if self.mode == Mode.LOW:
			if idle_ms < threshold:
				self.switch(Mode.HIGH)
				self.log.info('Switched to high power - polling for idle every %dms',
							  self.settings.poll_high)

				if self.settings.wait_for_threshold:
					# We don't need to poll again until the idle timeout.
					delay = threshold - idle_ms + 1
				else:
					delay = self.settings.poll_high
				self.log.debug('Polling again in %dms', delay)
				return delay / 1000
			return self.settings.poll_low / 1000

		else: # self.mode == Mode.HIGH
			if idle_ms >= threshold:
				self.switch(Mode.LOW)
				self.log.info('Switched to low power - polling for action every %dms',
							  self.settings.poll_low)
				return self.settings.poll_low / 1000
			return self.settings.poll_high / 1000

	# Poll forever.
	def run(self):
		self.log.debug('Starting control loop: %s', self.settings)
		while True:
			self.sleep(self.poll())

	# Leave the card in low power mode, regardless of what we think
	# its current mode is, as nothing will be supervising it after we
	# exit.  Only the first call has any effect.
	def shutdown(self):
		if self.stopped:
			return
		self.stopped = True
		self.log.debug('Shutting down: %s', self)
		self.switch(Mode.LOW)
		self.log.info('Switched to low power.')
