"""
Narrow interface to external programs (rclone, mount, crontab, ...). Nothing
here raises on a non-zero exit; callers inspect the returned ProcessResult.
"""
import os
import shlex
import shutil
import subprocess

from . import debug, log


class ProcessResult:
    def __init__(self, cmd, returncode, stdout="", stderr=""):
        self.cmd = cmd
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

    @property
    def ok(self):
        return self.returncode == 0

    def check(self):
        """Raise CalledProcessError if the call failed. Returns self"""
        if self.returncode:
            raise subprocess.CalledProcessError(
                self.returncode, self.cmd, output=self.stdout, stderr=self.stderr
            )
        return self

    def __repr__(self):
        return f"ProcessResult(cmd={self.cmd!r}, returncode={self.returncode})"


class Runner:
    def __init__(self, env=None):
        self.env = env or {}

    def which(self, exe):
        return shutil.which(exe)

    def run(
        self,
        cmd,
        stream=False,
        input=None,
        env=None,
        passthrough=False,
        prefix=None,
        display_error=True,
    ):
        """
        Call cmd and return a ProcessResult.

        Options:
        --------
        cmd (list or str)
            A str is run through the shell.

        stream
            Write stdout & stderr (merged) to the log line by line as they
            come in.

        input
            Text sent to stdin.

        passthrough
            Inherit the terminal. Used for interactive tools like
            `rclone config`. Nothing is captured.

        prefix
            Label for streamed lines. Defaults to the program name
        """
        shell = isinstance(cmd, str)
        prefix = prefix or (
            os.path.basename(shlex.split(cmd)[0] if shell else cmd[0]) + ":"
        )
        debug("run:", cmd)

        _env = os.environ.copy()
        _env.update(self.env)
        if env:
            _env.update(env)

        if passthrough:
            stdout = stderr = None
        elif stream:
            stdout = subprocess.PIPE
            stderr = subprocess.STDOUT
        else:
            stdout = stderr = subprocess.PIPE

        try:
            proc = subprocess.Popen(
                cmd,
                shell=shell,
                stdin=subprocess.PIPE if input is not None else None,
                stdout=stdout,
                stderr=stderr,
                env=_env,
                universal_newlines=True,
                errors="backslashreplace",
            )
        except FileNotFoundError as err:
            debug(f"run: {err}")
            return ProcessResult(cmd, 127, "", str(err))

        if passthrough:
            proc.wait()
            out = err = ""
        elif stream:
            if input is not None:
                proc.stdin.write(input)
                proc.stdin.close()
            out = []
            with proc.stdout:
                for line in iter(proc.stdout.readline, ""):
                    line = line.rstrip()
                    log(prefix, line)
                    out.append(line)
            proc.wait()
            out = "\n".join(out)
            err = ""  # Piped to stdout
        else:
            out, err = proc.communicate(input=input)

        if proc.returncode and display_error:
            log(f"{prefix} exited with {proc.returncode}")
            debug("CMD", cmd)
            if err.strip():
                log("STDERR", err.strip())

        return ProcessResult(cmd, proc.returncode, out, err)
