import os

from . import debug, log


class MountGuard:
    """
    Make sure network shares are mounted before a pair that lives on them is
    synced. A failed mount is only a warning. If the share really is missing,
    the sync will skip the pair when it can't find the source.
    """

    def __init__(self, config, runner):
        self.config = config
        self.runner = runner

    def is_mountpoint(self, mount_point):
        return self.runner.run(["mountpoint", "-q", mount_point], display_error=False).ok

    def in_mount_table(self, mount_point):
        """Loose check for mounts made some other way (fstab, autofs, ...)"""
        res = self.runner.run(["mount"], display_error=False)
        return mount_point in res.stdout

    def ensure_mounted(self, mount_point, remote_share):
        if self.is_mountpoint(mount_point):
            log.success(f"Mount point already exists: {mount_point}")
            return True

        log(f"Mounting {remote_share} to {mount_point}...")
        if self.in_mount_table(mount_point):
            log.success(f"{mount_point} is already mounted")
            return True

        sudo = list(self.config.sudo)
        if not os.path.isdir(mount_point):
            debug(f"Creating mount point {mount_point}")
            self.runner.run(sudo + ["mkdir", "-p", mount_point])

        cmd = sudo + ["mount", "-t", self.config.mount_type, remote_share, mount_point]
        if self.config.mount_options:
            cmd += ["-o", self.config.mount_options]

        if self.runner.run(cmd).ok:
            log.success("Network share mounted successfully")
            return True

        log.warning("Failed to mount network share (may already be mounted)")
        return False
