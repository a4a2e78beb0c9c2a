# nvpowermizerd.action - switching the GPU's PowerMizer mode
# Runs nvidia-settings (or the configured command) to apply a mode.
# Fire-and-forget: failures are logged, never retried.

import subprocess

import nvpowermizerd
from nvpowermizerd.logging import log

# Exit code reported when the command could not be started at all
# (same as the shell's "command not found").
LAUNCH_FAILED = 127

class PowerMizerAction:
	def __init__(self, settings):
		self.log = log.getChild('action')

		# Mode -> command template
		self.commands = {
			nvpowermizerd.Mode.LOW: settings.low_power_command,
			nvpowermizerd.Mode.HIGH: settings.high_power_command,
		}
		self.settings = settings

	def get_command(self, mode, gpu_id):
		return self.settings.get_command(self.commands[mode], gpu_id)

	# Apply the given mode to the given GPU.  Returns the command's
	# exit code.
	def activate(self, mode, gpu_id):
		command = self.get_command(mode, gpu_id)
		self.log.trace('Running %r', command)
		try:
			ret = subprocess.call(command)
		except OSError as e:
			self.log.error('Failed to run %r: %s', command[0], e)
			return LAUNCH_FAILED

		self.log.debug('%s returned %d', command[0], ret)
		if ret != 0:
			self.log.error('Failed to switch GPU %d to %s (%s exited with status %d).',
						   gpu_id, mode, command[0], ret)
		return ret
