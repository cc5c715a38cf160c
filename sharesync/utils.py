import os
import re
from collections import deque

from . import debug


def remote_spec(remote, path=""):
    """
    Build the rclone spec for a path on the named remote.

        remote_spec('onedrive-work','DOCUMENTS')  # onedrive-work:DOCUMENTS
        remote_spec('onedrive-work:','/GHM')      # onedrive-work:/GHM
        remote_spec('onedrive-work')              # onedrive-work:
    """
    if not remote.endswith(":"):
        remote = remote + ":"
    return pathjoin(remote, path) if path else remote


def state_id(spec):
    """
    Identifier rclone's bisync state is looked up by. Every character that is
    not an ASCII letter or digit becomes '_'.
    """
    return re.sub(r"[^a-zA-Z0-9]", "_", spec)


def time_format(dt, upper=False):
    """Format time into days (D), hours (H), minutes (M), and seconds (S)"""
    labels = [  # Label, # of sec
        ("D", 60 * 60 * 24),
        ("H", 60 * 60),
        ("M", 60),
        ("S", 1),
    ]
    res = []
    for label, sec in labels:
        val, dt = divmod(dt, sec)
        if not val and not res and label != "S":  # Do not skip if already done
            continue
        if label == "S" and dt > 0:  # Need to handle leftover
            res.append(f"{val+dt:0.2f}")
        elif label in "HMS":  # these get zero padded
            res.append(f"{int(val):02d}")
        else:  # Do not zero pad dats
            res.append(f"{int(val):d}")
        res.append(label if upper else label.lower())
    return "".join(res)


def pathjoin(*args):
    """
    This is like os.path.join but does some rclone-specific things because there could be
    a ':' in the first part.

    The second argument could be '/file', or 'file' and the first could have a colon.
        pathjoin('a','b')   # a/b
        pathjoin('a:','b')  # a:b
        pathjoin('a:','/b') # a:/b
        pathjoin('a','/b')  # a/b  NOTE that this is different
    """
    if len(args) <= 1:
        return "".join(args)

    root, first, rest = args[0], args[1], args[2:]

    if root.endswith("/"):
        root = root[:-1]

    if root.endswith(":") or first.startswith("/"):
        path = root + first
    else:
        path = f"{root}/{first}"

    path = os.path.join(path, *rest)
    return path


def tail(path, N=50):
    """Return the last N lines of path (without newlines)"""
    debug(f"tail {N} of '{path}'")
    with open(path, "rt", errors="backslashreplace") as file:
        return [line.rstrip("\n") for line in deque(file, maxlen=N)]
