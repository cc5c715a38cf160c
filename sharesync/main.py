import os
import time
from enum import Enum

from . import debug, log
from . import utils
from .lock import RunLock
from .mount import MountGuard
from .process import Runner
from .rclone import Rclone
from .registry import FolderRegistry


class Outcome(Enum):
    SKIPPED = "skipped"
    INITIALIZED = "initialized"
    SYNCED = "synced"
    FAILED = "failed"

    @property
    def succeeded(self):
        return self in (Outcome.INITIALIZED, Outcome.SYNCED)


class SyncExecutor:
    def __init__(self, config, rclone):
        self.config = config
        self.rclone = rclone

    def state_file(self, remote_path):
        spec = utils.remote_spec(self.config.remote, remote_path)
        statedir = os.path.expanduser(self.config.bisync_state_dir)
        return os.path.join(statedir, utils.state_id(spec) + ".lst")

    def has_state(self, remote_path):
        return os.path.exists(self.state_file(remote_path))

    def sync_pair(self, source_path, remote_path):
        remote = utils.remote_spec(self.config.remote, remote_path)
        log(f"Starting sync: {source_path} -> {remote}")

        if not os.path.isdir(source_path):
            log.warning(f"Source folder {source_path} does not exist - skipping")
            return Outcome.SKIPPED

        if self.config.sync_mode == "push":
            log(f"1-way syncing: {source_path} -> {remote}")
            res = self.rclone.push(source_path, remote)
            if not res.ok:
                log.error(
                    f"Sync failed for {remote_path}. Check log file: {self.config.log_file}"
                )
                return Outcome.FAILED
            log.success(f"1-way sync completed: {remote_path}")
            return Outcome.SYNCED

        log(f"2-way syncing: {source_path} <-> {remote}")
        if not self.has_state(remote_path):
            debug(f"No bisync state at '{self.state_file(remote_path)}'")
            log.warning(f"First time sync - initializing bisync for {remote_path}")
            res = self.rclone.bisync(source_path, remote, resync=True)
            if not res.ok:
                log.error(
                    f"Bisync initialization failed for {remote_path}. "
                    f"Check log file: {self.config.log_file}"
                )
                return Outcome.FAILED
            log.success(f"Bisync initialized: {remote_path}")
            return Outcome.INITIALIZED

        res = self.rclone.bisync(source_path, remote)
        if not res.ok:
            log.error(
                f"2-way sync failed for {remote_path}. Check log file: {self.config.log_file}"
            )
            return Outcome.FAILED
        log.success(f"2-way sync completed: {remote_path}")
        return Outcome.SYNCED


class RunSummary:
    def __init__(self):
        self.results = []  # (pair, Outcome)
        self.aborted = False

    def add(self, pair, outcome):
        self.results.append((pair, outcome))

    def count(self, *outcomes):
        return sum(1 for _, outcome in self.results if outcome in outcomes)

    @property
    def succeeded(self):
        return sum(1 for _, outcome in self.results if outcome.succeeded)

    @property
    def failed(self):
        return self.count(Outcome.FAILED)

    @property
    def skipped(self):
        return self.count(Outcome.SKIPPED)

    def __str__(self):
        return (
            f"{self.succeeded} succeeded, {self.failed} failed, {self.skipped} skipped"
        )


class RunCoordinator:
    def __init__(self, config, runner=None, registry=None):
        self.config = config
        self.runner = runner or Runner()
        self.registry = registry or FolderRegistry(
            config.folders_config, config.default_folders
        )
        self.rclone = Rclone(config, self.runner)
        self.mounter = MountGuard(config, self.runner)
        self.executor = SyncExecutor(config, self.rclone)
        self.lock = RunLock(config.lock_file)

    def preflight(self):
        self.rclone.check_installed()
        self.rclone.check_remote()

    def run_all(self):
        """
        Sync every pair in registry order while holding the run lock. A failed
        pair does not stop the others unless stop_on_failure is set.
        """
        t0 = time.time()
        summary = RunSummary()

        with self.lock:
            self.preflight()
            pairs = self.registry.load()
            total = len(pairs)
            log(f"=== Starting sync of {total} folder(s) ===")

            for ii, pair in enumerate(pairs, 1):
                log(f"[{ii}/{total}] Processing: {pair.source_path}")

                if pair.needs_mount:
                    self.mounter.ensure_mounted(pair.mount_point, pair.remote_share)

                outcome = self.executor.sync_pair(pair.source_path, pair.remote_path)
                summary.add(pair, outcome)
                debug(f"{pair.source_path}: {outcome.value}")

                if outcome is Outcome.FAILED and self.config.stop_on_failure:
                    summary.aborted = True
                    log.error(
                        f"Stopping after failure. {total - ii} folder(s) not processed"
                    )
                    break

            log(f"=== Sync Summary: {summary} ===")
            log(f"Time: {utils.time_format(time.time() - t0)}")

        return summary
