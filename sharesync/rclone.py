"""
Most of the rclone interfacing
"""
import shlex

from . import debug, log
from .cli import ConfigError
from . import utils


class Rclone:
    def __init__(self, config, runner):
        self.config = config
        self.runner = runner
        self.add_args = []  # --dry-run, etc

        if getattr(config, "dry_run", False):
            self.add_args.append("--dry-run")

    @property
    def exe(self):
        return shlex.split(self.config.rclone_exe)

    def call(self, cmd, stream=False, passthrough=False, display_error=True):
        """
        Call rclone and return the ProcessResult. If streaming, will write
        stdout & stderr to log.
        """
        cmd = self.exe + cmd

        env = dict(self.config.rclone_env)
        if not passthrough:
            env["RCLONE_ASK_PASSWORD"] = "false"  # so that it never prompts

        debug_env = env.copy()
        if "RCLONE_CONFIG_PASS" in debug_env:
            debug_env["RCLONE_CONFIG_PASS"] = "**REDACTED**"
        debug(f"rclone: env {debug_env}")

        return self.runner.run(
            cmd,
            stream=stream,
            env=env,
            passthrough=passthrough,
            prefix="rclone:",
            display_error=display_error,
        )

    def installed(self):
        return self.runner.which(self.exe[0]) is not None

    def check_installed(self):
        if not self.installed():
            raise ConfigError(
                "rclone is not installed. Please run the installation first."
            )
        log.success("rclone is installed")
        self.version()

    def listremotes(self):
        res = self.call(["listremotes"] + self.config.rclone_flags)
        if not res.ok:
            return []
        return [line.strip() for line in res.stdout.split("\n") if line.strip()]

    def check_remote(self):
        remote = utils.remote_spec(self.config.remote)
        if remote not in self.listremotes():
            raise ConfigError(
                f"Remote '{self.config.remote}' is not configured. "
                "Please run the configuration first."
            )
        log.success(f"Remote '{self.config.remote}' is configured")

    def lsd(self, path=""):
        """List the top-level directories. Used to test the connection"""
        remote = utils.remote_spec(self.config.remote, path)
        return self.call(["lsd"] + self.config.rclone_flags + [remote], stream=True)

    def version(self):
        log("rclone version:")
        return self.call(["--version"], stream=True, display_error=False)

    def configure(self):
        """Hand the terminal over to `rclone config`"""
        return self.call(["config"] + self.config.rclone_flags, passthrough=True)

    def install(self):
        log("Installing rclone...")
        res = self.runner.run(self.config.install_cmd, stream=True, prefix="install:")
        if not res.ok:
            raise ConfigError("Failed to install rclone")
        log.success("rclone installed successfully")
        return res

    def _sync_flags(self):
        flags = list(self.config.bisync_flags)
        if self.config.rclone_log:
            flags.append(f"--log-file={self.config.log_file}")
        return flags + self.config.rclone_flags + self.add_args

    def bisync(self, src, dst, resync=False):
        cmd = ["bisync", src, dst] + self._sync_flags()
        if resync:
            cmd += self.config.resync_flags
        else:
            cmd += self.config.steady_flags
        return self.call(cmd, stream=True)

    def push(self, src, dst):
        """One-way. Make dst match src"""
        cmd = ["sync", src, dst] + self._sync_flags() + self.config.push_flags
        return self.call(cmd, stream=True)
