# nvpowermizerd.config - tunables and the user's configuration file

import importlib.util
import os
import shlex
import sys

import nvpowermizerd
from nvpowermizerd.logging import log

# Command templates for switching modes.  {gpu_id} is substituted
# with the configured GPU ID.
LOW_POWER_COMMAND = ['nvidia-settings', '-a', '[gpu:{gpu_id}]/GPUPowerMizerMode=0']
HIGH_POWER_COMMAND = ['nvidia-settings', '-a', '[gpu:{gpu_id}]/GPUPowerMizerMode=1']

IDLE_SOURCES = ('xscreensaver', 'xprintidle')

class Settings:
	# GPU ID as shown by 'nvidia-settings -q gpus'.
	gpu_id = 0

	# How long should the system be idle (in milliseconds) before we
	# switch to low power mode.
	idle_threshold = 20000

	# When in power saving mode, we need to react very quickly to
	# user input, so we poll frequently.
	poll_low = 10

	# When in high power mode, we take it easy when polling to save
	# CPU.  This is the common case.
	poll_high = 5000

	# After switching to high power, don't poll again until the idle
	# threshold could possibly have been reached.
	wait_for_threshold = True

	# Where idle time comes from: 'xscreensaver' (the X screen saver
	# extension) or 'xprintidle'.
	idle_source = 'xscreensaver'

	# X display to query.  None means $DISPLAY.
	display = None

	def __init__(self):
		# Command templates.  Copies, so that the configuration can
		# modify them in place.
		self.low_power_command = list(LOW_POWER_COMMAND)
		self.high_power_command = list(HIGH_POWER_COMMAND)

	def __str__(self):
		return 'GPU: %d, idle threshold: %dms, poll: %dms / %dms, idle source: %s' % (
			self.gpu_id,
			self.idle_threshold,
			self.poll_low,
			self.poll_high,
			self.idle_source,
		)

	# Return the argv for the given command setting, with the GPU ID
	# (by default, the configured one) substituted.
	def get_command(self, template, gpu_id=None):
		if gpu_id is None:
			gpu_id = self.gpu_id
		if isinstance(template, str):
			template = shlex.split(template)
		return [arg.format(gpu_id=gpu_id) for arg in template]

	def validate(self):
		if not isinstance(self.gpu_id, int) or self.gpu_id < 0:
			raise nvpowermizerd.UserError('Invalid GPU ID %r - must be a non-negative integer' % (self.gpu_id,))
		for setting in ('idle_threshold', 'poll_low', 'poll_high'):
			value = getattr(self, setting)
			if not isinstance(value, int) or value <= 0:
				raise nvpowermizerd.UserError('Invalid %s %r - must be a positive number of milliseconds' % (
					setting, value,
				))
		if self.idle_source not in IDLE_SOURCES:
			raise nvpowermizerd.UserError('Unknown idle source %r (expected one of: %s)' % (
				self.idle_source, ', '.join(IDLE_SOURCES),
			))
		for setting in ('low_power_command', 'high_power_command'):
			try:
				command = self.get_command(getattr(self, setting))
			except (ValueError, KeyError, IndexError) as e:
				raise nvpowermizerd.UserError('Invalid %s: %s' % (setting, e)) from e
			if not command:
				raise nvpowermizerd.UserError('Invalid %s - empty command' % (setting,))


# Return the list of configuration files to look for, in order of
# preference.
def get_config_files():
	config_dirs = os.getenv('XDG_CONFIG_DIRS', '/etc').split(':')
	config_dirs = [os.getenv('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))] + config_dirs
	return [d + '/nvpowermizerd/config.py' for d in config_dirs]

# Load the user configuration module from a file.
def load_file(config_file):
	log.debug('Loading configuration from %r.', config_file)

	# https://docs.python.org/3/library/importlib.html#importing-a-source-file-directly
	module_name = 'nvpowermizerd_user_config'
	spec = importlib.util.spec_from_file_location(module_name, config_file)
	if spec is None:
		raise nvpowermizerd.UserError('Cannot load configuration file %r' % (config_file,))
	module = importlib.util.module_from_spec(spec)
	sys.modules[module_name] = module
	try:
		spec.loader.exec_module(module)
	except OSError as e:
		raise nvpowermizerd.UserError('Failed to read configuration file %r (%s)' % (config_file, e)) from e
	except Exception as e:
		raise nvpowermizerd.UserError('Error in configuration file %r: %s: %s' % (
			config_file, type(e).__name__, e,
		)) from e
	return module

# Build the settings, applying the configuration file (if any).
# If config_file is given, it must exist.  The caller should
# validate the result after applying any overrides.
def load(config_file=None):
	settings = Settings()

	if config_file is None:
		for f in get_config_files():
			if os.path.exists(f):
				config_file = f
				break
		else:
			log.debug('No configuration file found, using defaults.')
			return settings
	elif not os.path.exists(config_file):
		raise nvpowermizerd.UserError('Configuration file %r does not exist' % (config_file,))

	module = load_file(config_file)
	if not hasattr(module, 'config'):
		raise nvpowermizerd.UserError('Configuration file %r does not define a config function' % (config_file,))

	# Evaluate the user-defined configuration function.
	try:
		module.config(settings)
	except Exception as e:
		raise nvpowermizerd.UserError('Error in configuration file %r: %s: %s' % (
			config_file, type(e).__name__, e,
		)) from e
	return settings
