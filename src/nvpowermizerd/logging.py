# nvpowermizerd.logging - logging implementation

import logging
import os

# Extra severity level, for tracing individual commands.
TRACE = logging.DEBUG - 5

logging.addLevelName(TRACE, 'TRACE')

# Define a class which implements the severity level as a method
class Logger(logging.getLoggerClass()):
	def trace(self, *args, **kwargs):
		self.log(TRACE, *args, **kwargs)

logging.setLoggerClass(Logger)

# Verbosity levels, indexed by 3 + verbosity.
levels = [
	logging.CRITICAL,
	logging.ERROR,
	logging.WARNING,
	logging.INFO,
	logging.DEBUG,
	TRACE,
]

def get_level(verbosity):
	return levels[max(0, min(len(levels) - 1, 3 + verbosity))]

logging.basicConfig(
	format=os.getenv('NVPOWERMIZERD_LOG_FORMAT', '%(name)s: %(message)s'),
	level=get_level(int(os.getenv('NVPOWERMIZERD_VERBOSE', '0')))
)
log = logging.getLogger('nvpowermizerd')

# Raise the verbosity (used by the --verbose switch).
def set_verbosity(verbosity):
	log.setLevel(get_level(verbosity))
