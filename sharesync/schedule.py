"""
Register the unattended sync with cron
"""
import os
import shlex
import sys

from . import debug, log

FREQUENCIES = {
    "hourly": "0 * * * *",
    "every-6-hours": "0 */6 * * *",
    "daily": "0 2 * * *",  # 02:00
}
CHOICES = list(FREQUENCIES) + ["custom"]

WRAPPER = """\
#!/bin/bash
# Auto-generated cron wrapper for sharesync
export PATH=/usr/local/bin:/usr/bin:/bin
cd {cwd}
{cmd} >> {log_file} 2>&1
"""


def schedule_expression(choice, custom=None):
    """Cron expression for one of CHOICES"""
    if choice == "custom":
        expr = " ".join((custom or "").split())
        if len(expr.split()) != 5:
            raise ValueError(f"Cron schedule must have five fields. Got '{custom}'")
        return expr
    try:
        return FREQUENCIES[choice]
    except KeyError:
        raise ValueError(f"Frequency must be in {CHOICES}. Specified '{choice}'")


class SchedulerInstaller:
    def __init__(self, config, runner):
        self.config = config
        self.runner = runner

    @property
    def wrapper(self):
        return self.config.cron_wrapper

    def wrapper_text(self):
        configpath = self.config._configpath
        cmd = [sys.executable, "-m", "sharesync"]
        if configpath:
            configpath = os.path.abspath(configpath)
            cmd.append(configpath)
            cwd = os.path.dirname(configpath)
        else:
            cwd = os.path.expanduser("~")
        cmd += ["--auto-sync", "--quiet"]

        return WRAPPER.format(
            cwd=shlex.quote(cwd),
            cmd=" ".join(shlex.quote(c) for c in cmd),
            log_file=shlex.quote(self.config.log_file),
        )

    def write_wrapper(self):
        """Write the wrapper (through sudo if set) and make it executable"""
        sudo = list(self.config.sudo)
        dirname = os.path.dirname(self.wrapper)
        if dirname and not os.path.isdir(dirname):
            self.runner.run(sudo + ["mkdir", "-p", dirname]).check()
        self.runner.run(sudo + ["tee", self.wrapper], input=self.wrapper_text()).check()
        self.runner.run(sudo + ["chmod", "+x", self.wrapper]).check()
        debug(f"Wrote cron wrapper to '{self.wrapper}'")

    def crontab(self):
        """Current crontab lines. No crontab is the same as an empty one"""
        res = self.runner.run(["crontab", "-l"], display_error=False)
        if not res.ok:
            return []
        return [line for line in res.stdout.split("\n") if line.strip()]

    def install(self, choice, custom=None):
        """
        Write the wrapper and (re)register it. Any existing entry for the
        wrapper is replaced. Returns the cron expression.
        """
        log("Setting up automatic sync with cron...")
        expr = schedule_expression(choice, custom)
        self.write_wrapper()

        lines = [line for line in self.crontab() if self.wrapper not in line]
        lines.append(f"{expr} {self.wrapper}")
        self.runner.run(["crontab", "-"], input="\n".join(lines) + "\n").check()

        log.success(f"Cron job installed: {expr}")
        log(f"Automatic sync will run with schedule: {expr}")
        return expr
