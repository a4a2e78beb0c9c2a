# Sample nvpowermizerd configuration file.
# Copy to ~/.config/nvpowermizerd/config.py (or
# /etc/nvpowermizerd/config.py) and adjust to taste.

# The configuration file defines a function, config, which receives
# the settings object and changes whichever settings it wants.
# Times are in milliseconds.

import socket

def config(settings):
	# Which GPU to manage, as shown by 'nvidia-settings -q gpus'.
	# The --gpuid command-line option takes precedence.
	settings.gpu_id = 0

	# Switch back to low power after this much inactivity.
	# A longer timeout on the desktop PC, where waiting for the
	# card to clock up is more noticeable.
	if socket.gethostname().startswith('home.'):
		settings.idle_threshold = 60 * 1000
	else:
		settings.idle_threshold = 20 * 1000

	# Poll every 10ms in low power mode, so that the card clocks up
	# as soon as the mouse moves...
	settings.poll_low = 10
	# ...but only every 5 seconds in high power mode.
	settings.poll_high = 5000

	# Commands can be given as a list or as a single string.
	# settings.high_power_command = 'nvidia-settings -a [gpu:{gpu_id}]/GPUPowerMizerMode=1'

	# Use xprintidle instead of talking to the X server directly.
	# settings.idle_source = 'xprintidle'
