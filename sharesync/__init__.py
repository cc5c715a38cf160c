__version__ = "20251218.0"

import os
import sys
import time
import io

# Global variables (not ideal but acceptable)
DEBUG = False


def set_debug(state):
    global DEBUG
    DEBUG = state


def get_debug():
    return DEBUG


# Create a global log object
class Log:
    def __init__(self):
        self.hist = []
        self.logfile = None
        self.quiet = False

    def attach(self, path):
        """
        Append every subsequent line to path. The file is shared across runs
        and never truncated or rotated here.
        """
        dirname = os.path.dirname(path)
        if dirname:
            os.makedirs(dirname, exist_ok=True)
        with open(path, "at"):
            pass
        self.logfile = path

    def detach(self):
        self.logfile = None

    def log(self, *a, **k):
        """print() to the log with date"""
        debugmode = k.pop("__debug", False)

        t = time.strftime("[%Y-%m-%d %H:%M:%S] ", time.localtime())
        if debugmode:
            t = t + "DEBUG: "

        k0 = k.copy()
        # We want to use print() for handing of non-str objects
        # and representation. So print to io.StringIO, read it, split at \n
        # and then recombine

        k["file"] = file = io.StringIO()
        k["end"] = ""
        print(*a, **k)

        lines = file.getvalue().split("\n")
        lines = [t + line for line in lines]

        if debugmode and not DEBUG:  # Save it in case of error but do not print
            self.hist.extend((False, line) for line in lines)
            return

        for line in lines:
            self.hist.append((True, line))
            if not self.quiet:
                print(line, **k0)

        if self.logfile:
            with open(self.logfile, "at") as fout:
                fout.write("\n".join(lines) + "\n")

    __call__ = log

    def success(self, *a, **k):
        self.log("[SUCCESS]", *a, **k)

    def warning(self, *a, **k):
        self.log("[WARNING]", *a, **k)

    def error(self, *a, **k):
        k.setdefault("file", sys.stderr)
        self.log("[ERROR]", *a, **k)

    def clear(self):
        self.hist.clear()

    def dump(self, path, mode="wt"):
        """Write every line, including the unshown debug lines, to path"""
        with open(path, mode) as file:
            file.write("\n".join(line for _, line in self.hist) + "\n")


log = Log()


def debug(*a, **k):
    k["__debug"] = True
    log(*a, **k)


from . import cli
from . import main
