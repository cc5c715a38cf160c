"""
sharesync

Config File

This configuration file is read as Python so things can be customized as
desired. Any missing items will go to the defaults already specified.

Flags should always be a list.
Example: `--transfers 4` will be ['--transfers','4']

This is *ALWAYS* evaluated from the parent of this file.

"""
## Remote

# Name of the rclone remote (as shown by `rclone listremotes`, without the
# trailing colon). Every sync pair's remote path is relative to it.
remote = "onedrive-work"

## Sync pairs

# Where the sync pairs are stored. One pair per line:
#
#     SOURCE_PATH|REMOTE_PATH|MOUNT_POINT|NETWORK_SHARE
#
# MOUNT_POINT and NETWORK_SHARE may be left blank. Lines starting with '#'
# and blank lines are ignored (but kept when the file is rewritten).
folders_config = "/etc/onedrive_sync_folders.conf"

# Used when `folders_config` does not exist yet. Same format as above
default_folders = [
    "/15_office_share_00/DOCUMENTS|DOCUMENTS|/15_office_share_00|//192.168.2.18/15_office_share_00",
    "/13_media_share_00/MUSIC/GHM|GHM|/13_media_share_00|//192.168.2.18/13_media_share_00",
    "/13_media_share_00/MUSIC/ZEN|ZEN|/13_media_share_00|//192.168.2.18/13_media_share_00",
]

## Logs and locks

# Shared, append-only log. Never rotated by sharesync
log_file = "/var/log/onedrive_sync.log"

# Also have rclone write its own log lines to log_file (--log-file)
rclone_log = True

# Holds the PID of the running sync. Stale locks (dead PID) are removed
# automatically
lock_file = "/tmp/onedrive_sync.lock"

## rclone

# Specify the path to the rclone executable.
rclone_exe = "rclone"

# Command used by the "Install rclone" menu entry. Run through the shell
install_cmd = "curl https://rclone.org/install.sh | sudo bash"

# General rclone flags are added every time rclone is called. This is how
# you can specify things like the config file.
#
# Example: ['--config','path/to/rclone.conf']
rclone_flags = []

# The following are added to the existing environment.
rclone_env = {}

# How pairs are synced:
#
#   'bisync' : (Default) two-way with `rclone bisync`. The first run of a pair
#              does a --resync to set the baseline.
#   'push'   : one-way with `rclone sync`. Remote is made to match local
sync_mode = "bisync"

# Flags for every sync call (bisync and push)
bisync_flags = [
    "--create-empty-src-dirs",
    "--transfers", "4",
    "--checkers", "8",
    "--log-level", "INFO",
]

# Added only on the first run of a pair (no bisync state yet)
resync_flags = ["--resync"]

# Added on all later runs. Newer file wins a conflict and the loser is
# renamed with a numeric suffix rather than deleted
steady_flags = [
    "--resilient",
    "--recover",
    "--conflict-resolve", "newer",
    "--conflict-loser", "num",
]

# Added in 'push' mode
push_flags = ["--update", "--delete-after"]

# Where rclone keeps bisync state. A pair without a state file here is
# initialized with resync_flags
bisync_state_dir = "~/.cache/rclone/bisync"

# If True, the first failed pair stops the whole run. Otherwise the remaining
# pairs are still processed and the run exits non-zero at the end
stop_on_failure = False

## Network shares

mount_type = "cifs"
mount_options = "username=guest,vers=3.0"

# Prefix for commands that need root (mkdir of the mount point, mount).
# Set to [] when running as root
sudo = ["sudo"]

## Scheduling

# Wrapper script registered in crontab
cron_wrapper = "/usr/local/bin/onedrive-sync-cron.sh"

# Do not change this. It will be used in the future to handle backwards
# compatibility
_sharesync_version = "__VERSION__"
