"""
Process-wide run lock. The lock file holds the PID of the holder. It is
released when the context exits, at interpreter exit, and on SIGTERM/SIGHUP.
"""
import atexit
import os
import signal
import sys

import psutil

from . import debug, log


class LockedError(ValueError):
    pass


def _exit_on_signal(signum, frame):
    # Turn the signal into SystemExit so `finally` and `__exit__` run
    sys.exit(128 + signum)


class RunLock:
    SIGNALS = [
        getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)
    ]

    def __init__(self, path):
        self.path = path
        self.pid = os.getpid()
        self.acquired = False
        self._handlers = {}

    def holder(self):
        """PID written in the lock file or None if missing or unreadable"""
        try:
            with open(self.path, "rt") as file:
                return int(file.read().strip())
        except (OSError, ValueError):
            return None

    def _create(self):
        """Create the lock file. Raises FileExistsError if it is already there"""
        fd = os.open(self.path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        with os.fdopen(fd, "wt") as file:
            file.write(f"{self.pid}\n")

    def _check_holder(self):
        pid = self.holder()
        if pid is not None and pid > 0 and psutil.pid_exists(pid):
            raise LockedError(f"Sync script is already running (PID: {pid})")

    def acquire(self):
        dirname = os.path.dirname(self.path)
        if dirname:
            os.makedirs(dirname, exist_ok=True)

        try:
            self._create()
        except FileExistsError:
            self._check_holder()
            log.warning("Removing stale lock file")
            try:
                os.remove(self.path)
            except FileNotFoundError:  # Another run removed it first
                pass
            try:
                self._create()
            except FileExistsError:  # and then took it
                self._check_holder()
                raise LockedError(f"Could not acquire lock '{self.path}'")
        self.acquired = True
        debug(f"Lock set: '{self.path}' ({self.pid})")

        atexit.register(self.release)
        for signum in self.SIGNALS:
            try:
                self._handlers[signum] = signal.signal(signum, _exit_on_signal)
            except ValueError:  # Not the main thread
                pass
        return self

    def release(self):
        if not self.acquired:
            return
        self.acquired = False

        for signum, handler in self._handlers.items():
            signal.signal(signum, handler)
        self._handlers.clear()
        atexit.unregister(self.release)

        # Only remove it if it is still ours
        if self.holder() == self.pid:
            os.remove(self.path)
            debug(f"Lock released: '{self.path}'")

    def break_lock(self):
        if not os.path.exists(self.path):
            log("No lock to break")
            return False
        log(f"Breaking lock '{self.path}' (PID: {self.holder()})")
        os.remove(self.path)
        return True

    def __enter__(self):
        return self.acquire()

    def __exit__(self, *exc):
        self.release()
