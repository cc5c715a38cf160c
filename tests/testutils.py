"""
Utilities for testing
"""
import os, sys
import shutil
from pathlib import Path

PWD0 = os.path.abspath(os.path.dirname(__file__))
os.chdir(PWD0)

p = os.path.abspath("../")
if p not in sys.path:
    sys.path.insert(0, p)

# Make sure the testdirs are ignored by backup tools
testdir = Path(__file__).parent / "testdirs"
testdir.mkdir(exist_ok=True, parents=True)
(testdir / ".ignore").touch()

import sharesync
import sharesync.cli
from sharesync.process import ProcessResult


def in_testdir(path):
    path = os.path.abspath(str(path))
    return path.startswith(os.path.join(PWD0, "testdirs") + os.sep)


class FakeRunner:
    """
    Stands in for sharesync.process.Runner. Records every command and answers
    from simple rules. Nothing is actually run.

    Defaults:
        * every program exists
        * `rclone listremotes` lists self.remotes
        * `mountpoint -q X` succeeds only for X in self.mounted
        * `mount` (no args) prints self.mount_table
        * `mount -t ...` exits with self.mount_rc
        * `crontab -l` / `crontab -` read and write self.crontab
        * `mkdir -p`, `tee` and `chmod +x` act on real files under testdirs
        * everything else exits 0
    """

    def __init__(self):
        self.calls = []
        self.rules = []
        self.missing = set()
        self.remotes = ["onedrive-work:"]
        self.mounted = set()
        self.mount_table = ""
        self.mount_rc = 0
        self.crontab = None

    def on(self, *prefix, returncode=0, stdout="", stderr=""):
        """Answer commands starting with prefix. Newest rule wins"""
        self.rules.insert(0, (prefix, returncode, stdout, stderr))

    def which(self, exe):
        return None if exe in self.missing else f"/usr/bin/{exe}"

    def run(self, cmd, stream=False, input=None, env=None, passthrough=False,
            prefix=None, display_error=True):
        self.calls.append(cmd)
        if isinstance(cmd, str):
            return ProcessResult(cmd, 0)

        for rprefix, rc, out, err in self.rules:
            if tuple(cmd[: len(rprefix)]) == rprefix:
                return ProcessResult(cmd, rc, out, err)

        args = cmd[1:] if cmd[:1] == ["sudo"] else cmd
        if args[1:2] == ["listremotes"]:
            return ProcessResult(cmd, 0, "\n".join(self.remotes) + "\n")
        if args[:2] == ["mountpoint", "-q"]:
            return ProcessResult(cmd, 0 if args[2] in self.mounted else 1)
        if args == ["mount"]:
            return ProcessResult(cmd, 0, self.mount_table)
        if args[:2] == ["mount", "-t"]:
            if not self.mount_rc:
                self.mounted.add(args[4])
            return ProcessResult(cmd, self.mount_rc)
        if cmd == ["crontab", "-l"]:
            if self.crontab is None:
                return ProcessResult(cmd, 1, "", "no crontab for user")
            return ProcessResult(cmd, 0, self.crontab)
        if cmd == ["crontab", "-"]:
            self.crontab = input
            return ProcessResult(cmd, 0)

        # Only touch real files inside the test directories
        if not (args[-1:] and in_testdir(args[-1])):
            return ProcessResult(cmd, 0)
        if args[:2] == ["mkdir", "-p"]:
            os.makedirs(args[2], exist_ok=True)
        elif args[:1] == ["tee"]:
            with open(args[1], "wt") as file:
                file.write(input or "")
            return ProcessResult(cmd, 0, input or "")
        elif args[:2] == ["chmod", "+x"]:
            os.chmod(args[2], os.stat(args[2]).st_mode | 0o111)

        return ProcessResult(cmd, 0)

    def find(self, *prefix):
        return [
            cmd
            for cmd in self.calls
            if isinstance(cmd, list) and tuple(cmd[: len(prefix)]) == prefix
        ]


class Tester:
    def __init__(self, name):
        os.chdir(PWD0)
        sharesync.log.clear()
        sharesync.log.detach()

        self.name = name
        self.pwd = os.path.abspath(f"testdirs/{name}")
        try:
            shutil.rmtree(self.pwd)
        except OSError:
            pass
        os.makedirs(self.pwd)
        os.chdir(self.pwd)

        sharesync.cli.cli(["--new", "config.py"])

        self.config = sharesync.cli.Config("config.py")
        self.config.parse()

        self.config.folders_config = os.path.join(self.pwd, "folders.conf")
        self.config.default_folders = []
        self.config.log_file = os.path.join(self.pwd, "logs", "sync.log")
        self.config.lock_file = os.path.join(self.pwd, "sync.lock")
        self.config.bisync_state_dir = os.path.join(self.pwd, "bisync")
        self.config.cron_wrapper = os.path.join(self.pwd, "bin", "sync-cron.sh")
        self.config.sudo = []

        self.runner = FakeRunner()

    def write_config(self):
        with open(self.config._configpath, "wt") as file:
            for key, var in self.config._config.items():
                if key.startswith("_"):
                    continue

                file.write(f"{key} = {repr(var)}\n")

    def path(self, *parts):
        return os.path.join(self.pwd, *parts)

    def mkdir(self, *parts):
        path = self.path(*parts)
        os.makedirs(path, exist_ok=True)
        return path

    def write_folders(self, *lines):
        with open(self.config.folders_config, "wt") as file:
            file.write("".join(line + "\n" for line in lines))

    def read(self, path):
        with open(path, "rt") as file:
            return file.read()

    def add_state(self, remote_path):
        """Pretend rclone bisync has already run for remote_path"""
        from sharesync.main import SyncExecutor

        path = SyncExecutor(self.config, None).state_file(remote_path)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wt") as file:
            file.write("# bisync listing\n")
        return path

    def stdout(self):
        return "\n".join(line for shown, line in sharesync.log.hist if shown)

    def done(self):
        sharesync.log.detach()
        os.chdir(PWD0)
