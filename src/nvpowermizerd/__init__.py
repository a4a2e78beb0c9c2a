# nvpowermizerd - core definitions and entry point
# Switches an NVIDIA GPU's PowerMizer mode according to how long the
# user has been idle: adaptive (low power) while idle, maximum
# performance while the user is active.

import argparse
import enum

__version__ = '1.0.0'

# -----------------------------------------------------------------------------
# Current state

# Whether we're driving the card in high power or low power mode.
# The values are the corresponding GPUPowerMizerMode settings.
class Mode(enum.IntEnum):
	LOW = 0
	HIGH = 1

	def __str__(self):
		return 'low power' if self is Mode.LOW else 'high power'

# -----------------------------------------------------------------------------
# Exceptions

# Represents an expected failure mode, which is unlikely to be due to
# a bug in nvpowermizerd.  In this case, we do not need to print an
# exception stack trace; just print the error message and quit.
class UserError(Exception):
	pass

# -----------------------------------------------------------------------------
# Import nvpowermizerd modules
# Placed after the declarations above, so that they can be used by the
# imported modules.

import nvpowermizerd.config
import nvpowermizerd.daemon
import nvpowermizerd.logging
from nvpowermizerd.logging import log

# -----------------------------------------------------------------------------
# Entry point

def get_parser():
	parser = argparse.ArgumentParser(
		prog='nvpowermizerd',
		description='nvpowermizerd - a daemon to improve nVidia PowerMizer mode behavior',
	)
	parser.add_argument('-V', '--version', action='version',
						version='%(prog)s ' + __version__)
	parser.add_argument('-v', '--verbose', action='count', default=0,
						help='show debugging logs (repeat for more detail)')
	parser.add_argument('-g', '--gpuid', metavar='GPU-ID', type=int,
						help="GPU ID as shown by 'nvidia-settings -q gpus' (default: 0)")
	parser.add_argument('-d', '--daemon', action='store_true',
						help='fork into the background once started')
	parser.add_argument('-c', '--config', metavar='FILE',
						help='configuration file to use')
	return parser

def main(args=None):
	options = get_parser().parse_args(args)

	if options.verbose:
		nvpowermizerd.logging.set_verbosity(options.verbose)

	try:
		settings = nvpowermizerd.config.load(options.config)
		if options.gpuid is not None:
			settings.gpu_id = options.gpuid
			log.debug('GPU ID set to %d', settings.gpu_id)
		settings.validate()

		if options.daemon:
			return nvpowermizerd.daemon.start(settings)
		return nvpowermizerd.daemon.run(settings)

	except UserError as e:
		log.critical('Fatal error: %s', e)
		return 1
