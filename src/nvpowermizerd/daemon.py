# nvpowermizerd.daemon - daemon lifecycle
# Sets up the idle source and the controller, handles termination
# signals, and optionally forks into the background.

import os
import signal
import sys
import time

import nvpowermizerd
import nvpowermizerd.action
import nvpowermizerd.controller
import nvpowermizerd.idle
from nvpowermizerd.logging import log

# Exit trap.  Leaves the GPU in low power mode and releases the idle
# source.  Safe to call more than once.
def shutdown(controller, source):
	controller.shutdown()
	source.close()


# Run the daemon in the current process.  Never returns normally:
# exits when receiving a SIGINT/SIGTERM.
# If given, ready is called once start-up is complete.
def run(settings, ready=None, sleep=time.sleep):
	# Fails (with IdleSourceError) if we can't get the idle time.
	source = nvpowermizerd.idle.get_source(settings)
	source.open()

	controller = nvpowermizerd.controller.Controller(
		settings,
		source,
		nvpowermizerd.action.PowerMizerAction(settings),
		sleep=sleep,
	)

	# Stop when receiving a SIGINT/SIGTERM.
	# The control loop is suspended while this runs, and is never
	# resumed.
	def stop():
		shutdown(controller, source)
		log.info('Exiting program.')
		sys.exit(0)

	def signal_stop(signalnum, _frame):
		log.debug('Got signal %r.', signal.strsignal(signalnum))
		controller.defer(stop)

	signal.signal(signal.SIGINT, signal_stop)
	signal.signal(signal.SIGTERM, signal_stop)

	if ready is not None:
		ready()

	try:
		controller.run()
	finally:
		shutdown(controller, source)


# Daemon entry point.
def start(settings):
	'''Starts the daemon in a fork.'''

	# Create an anonymous pipe used to signal startup success.
	(ready_r, ready_w) = os.pipe()
	(ready_r, ready_w) = (os.fdopen(ready_r, 'rb'), os.fdopen(ready_w, 'wb'))

	# Now, fork away the daemon main loop.
	daemon_pid = os.fork()

	if daemon_pid == 0:
		# Inside the forked process: set up and run the daemon.
		ready_r.close()

		def signal_ready():
			ready_w.write(b'ok')
			ready_w.close()

		# Ensure the fork does not continue into the parent's code,
		# even if start-up failed.
		try:
			run(settings, ready=signal_ready)
		except nvpowermizerd.UserError as e:
			log.critical('Fatal error: %s', e)
			sys.exit(1)
		sys.exit(0)

	# Wait for the daemon to finish starting up.
	ready_w.close()
	with ready_r:
		ok = ready_r.read() == b'ok'
	if not ok:
		log.critical('Daemon start-up failed.')
		os.waitpid(daemon_pid, 0)
		return 1

	log.info('Daemon started (PID %d).', daemon_pid)
	return 0
