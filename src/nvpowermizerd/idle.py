# nvpowermizerd.idle - idle time providers
# Report how long (in milliseconds) it has been since the last user
# input, as seen by the X server.

import os
import subprocess

import Xlib.display
import Xlib.error

import nvpowermizerd
from nvpowermizerd.logging import log

# Raised when the idle time cannot be obtained.
class IdleSourceError(nvpowermizerd.UserError):
	pass


# Base class for idle time providers.
class IdleSource:
	name = None

	def __init__(self, display=None):
		self.log = log.getChild('idle.' + self.name)

		# X11 DISPLAY string.
		self.display = display or os.getenv('DISPLAY')

	# Acquire any resources.  Raises IdleSourceError if the source is
	# unavailable.
	def open(self):
		pass

	# Release resources acquired in open().
	def close(self):
		pass

	# Return the idle time in milliseconds.
	def get_idle_ms(self):
		raise NotImplementedError()

	def __enter__(self):
		self.open()
		return self

	def __exit__(self, *_exc_info):
		self.close()


# Queries the MIT-SCREEN-SAVER extension directly over an X
# connection.  Cheap enough to be polled every few milliseconds.
class XScreenSaverIdleSource(IdleSource):
	name = 'xscreensaver'

	EXTENSION = 'MIT-SCREEN-SAVER'

	def __init__(self, display=None):
		super().__init__(display)
		self.connection = None
		self.root = None

	def open(self):
		if self.connection is not None:
			return
		try:
			self.connection = Xlib.display.Display(self.display)
		except Xlib.error.DisplayError as e:
			raise IdleSourceError("Couldn't open X display %r (%s)" % (self.display, e)) from e

		if not self.connection.has_extension(self.EXTENSION):
			self.close()
			raise IdleSourceError('X display %r does not support the %s extension' % (
				self.display, self.EXTENSION,
			))

		self.root = self.connection.screen().root
		self.log.debug('Opened X display %r.', self.connection.get_display_name())

	def close(self):
		if self.connection is not None:
			self.log.debug('Closing X display.')
			self.connection.close()
			self.connection = None
			self.root = None

	def get_idle_ms(self):
		if self.root is None:
			raise IdleSourceError('X display is not open')
		try:
			return self.root.screensaver_query_info().idle
		except (Xlib.error.XError, Xlib.error.ConnectionClosedError) as e:
			raise IdleSourceError('Failed to query X screen saver info (%s)' % (e,)) from e


# Runs xprintidle for each sample.
class XPrintIdleSource(IdleSource):
	name = 'xprintidle'

	def open(self):
		# Take one sample, so that a missing xprintidle or an
		# unreachable display is reported at start-up.
		self.get_idle_ms()

	def get_idle_ms(self):
		env = dict(os.environ)
		if self.display is not None:
			env['DISPLAY'] = self.display
		try:
			output = subprocess.check_output(['xprintidle'], env=env)
		except (OSError, subprocess.CalledProcessError) as e:
			raise IdleSourceError('Failed to run xprintidle (%s)' % (e,)) from e
		try:
			return int(output)
		except ValueError as e:
			raise IdleSourceError('Unexpected xprintidle output: %r' % (output,)) from e


sources = {
	XScreenSaverIdleSource.name: XScreenSaverIdleSource,
	XPrintIdleSource.name: XPrintIdleSource,
}

# Instantiate the idle source selected by the settings.
def get_source(settings):
	return sources[settings.idle_source](settings.display)
