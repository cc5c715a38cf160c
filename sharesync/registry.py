"""
The list of sync pairs, stored one per line as

    SOURCE_PATH|REMOTE_PATH|MOUNT_POINT|NETWORK_SHARE

Comments and blank lines are kept as-is when the file is rewritten but are
otherwise ignored.
"""
import os

from . import debug, log

FIELDS = ("source_path", "remote_path", "mount_point", "remote_share")


def is_entry(line):
    """Whether line is a sync pair and not a comment or blank"""
    line = line.strip()
    return bool(line) and not line.startswith("#")


class SyncPair:
    __slots__ = FIELDS

    def __init__(self, source_path, remote_path, mount_point="", remote_share=""):
        self.source_path = source_path
        self.remote_path = remote_path
        self.mount_point = mount_point
        self.remote_share = remote_share

    @classmethod
    def parse(cls, line):
        parts = line.strip().split("|", len(FIELDS) - 1)
        parts += [""] * (len(FIELDS) - len(parts))
        return cls(*(p.strip() for p in parts))

    def to_line(self):
        return "|".join(getattr(self, f) for f in FIELDS)

    @property
    def needs_mount(self):
        return bool(self.mount_point and self.remote_share)

    def __eq__(self, other):
        if not isinstance(other, SyncPair):
            return NotImplemented
        return self.to_line() == other.to_line()

    def __hash__(self):
        return hash(self.to_line())

    def __repr__(self):
        return "SyncPair({})".format(
            ", ".join(f"{f}={getattr(self, f)!r}" for f in FIELDS)
        )


class FolderRegistry:
    def __init__(self, path, defaults=None):
        self.path = path
        self.defaults = list(defaults or [])
        self.lines = []

    def load(self):
        """Read the stored lines (or the defaults) and return the sync pairs"""
        if os.path.exists(self.path):
            with open(self.path, "rt") as file:
                self.lines = file.read().splitlines()
            log(f"Loaded {len(self.pairs)} folders from {self.path}")
        else:
            self.lines = list(self.defaults)
            log(f"Using default folder configuration ({len(self.pairs)} folders)")

        for pair in self.pairs:
            if bool(pair.mount_point) != bool(pair.remote_share):
                log.warning(
                    f"'{pair.source_path}' sets only one of mount point and "
                    "network share. It will not be mounted"
                )
        return self.pairs

    @property
    def pairs(self):
        return [SyncPair.parse(line) for line in self.lines if is_entry(line)]

    def save(self):
        dirname = os.path.dirname(self.path)
        if dirname:
            os.makedirs(dirname, exist_ok=True)
        with open(self.path, "wt") as file:
            file.write("".join(line + "\n" for line in self.lines))
        os.chmod(self.path, 0o644)
        log.success(f"Saved configuration to {self.path}")

    def add(self, pair, confirm=None):
        """
        Append pair and save. If the source does not exist, a warning is
        logged and confirm() (if given) decides whether to add it anyway.
        Returns whether it was added.
        """
        if not os.path.isdir(pair.source_path):
            log.warning(f"Source folder {pair.source_path} does not exist")
            if confirm is not None and not confirm():
                debug(f"Not adding {pair}")
                return False

        self.lines.append(pair.to_line())
        self.save()
        log.success(f"Added: {pair.source_path} -> {pair.remote_path}")
        return True

    def delete(self, index):
        """Remove the index-th (1-based) sync pair and save"""
        valid = [ii for ii, line in enumerate(self.lines) if is_entry(line)]
        if not isinstance(index, int) or not 1 <= index <= len(valid):
            raise ValueError(f"Invalid selection: {index!r}")

        removed = self.lines.pop(valid[index - 1])
        self.save()
        log.success(f"Folder removed: {SyncPair.parse(removed).source_path}")
        return SyncPair.parse(removed)
