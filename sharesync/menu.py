"""
Interactive menu. All prompting lives here; the sync logic itself never asks
for input.
"""
import os
import subprocess
from enum import IntEnum

from . import log
from . import utils
from .main import RunCoordinator
from .rclone import Rclone
from .registry import FolderRegistry, SyncPair
from .schedule import SchedulerInstaller

RULE = "=" * 41

CONFIGURE_STEPS = """\
Follow these steps to configure the remote:
1. Enter remote name: {remote}
2. Choose storage type: Microsoft OneDrive (search for 'onedrive')
3. Leave client_id blank (press Enter)
4. Leave client_secret blank (press Enter)
5. Choose region: Microsoft Cloud Global
6. Edit advanced config: No (n)
7. Use auto config: Yes (y) - this will open a browser
8. Choose account type: OneDrive for Business
9. Select your drive
10. Confirm and save
"""


class Command(IntEnum):
    INSTALL_RCLONE = 1
    CONFIGURE_REMOTE = 2
    TEST_CONNECTION = 3
    MANAGE_FOLDERS = 4
    RUN_ALL = 5
    INSTALL_SCHEDULE = 6
    VIEW_LOG = 7
    EXIT = 8

    @property
    def label(self):
        return {
            Command.INSTALL_RCLONE: "Install rclone",
            Command.CONFIGURE_REMOTE: "Configure remote",
            Command.TEST_CONNECTION: "Test connection",
            Command.MANAGE_FOLDERS: "Manage sync folders",
            Command.RUN_ALL: "Run one-time sync (all folders)",
            Command.INSTALL_SCHEDULE: "Setup automatic sync (cron job)",
            Command.VIEW_LOG: "View sync logs",
            Command.EXIT: "Exit",
        }[self]


class Menu:
    def __init__(self, config, runner, prompt=input, echo=print):
        self.config = config
        self.runner = runner
        self.prompt = prompt
        self.echo = echo
        self.rclone = Rclone(config, runner)
        self.registry = FolderRegistry(config.folders_config, config.default_folders)

    def loop(self):
        while True:
            command = self.choose()
            if command is None:
                log.warning("Invalid option")
                continue
            if command is Command.EXIT:
                log("Exiting...")
                return
            self.dispatch(command)
            self.echo("")
            self.prompt("Press Enter to continue...")

    def choose(self):
        self.echo("")
        self.echo(RULE)
        self.echo("Multi-Folder Sync Management")
        self.echo(RULE)
        for command in Command:
            self.echo(f"{command.value}. {command.label}")
        self.echo(RULE)
        choice = self.prompt(f"Choose an option [1-{len(Command)}]: ").strip()
        try:
            return Command(int(choice))
        except ValueError:
            return None

    def dispatch(self, command):
        if command is Command.INSTALL_RCLONE:
            self.rclone.install()
        elif command is Command.CONFIGURE_REMOTE:
            self.configure_remote()
        elif command is Command.TEST_CONNECTION:
            self.test_connection()
        elif command is Command.MANAGE_FOLDERS:
            self.manage_folders()
        elif command is Command.RUN_ALL:
            return RunCoordinator(self.config, self.runner, self.registry).run_all()
        elif command is Command.INSTALL_SCHEDULE:
            self.install_schedule()
        elif command is Command.VIEW_LOG:
            self.view_log()
        elif command is Command.EXIT:
            pass
        else:
            raise ValueError(f"Unknown command {command!r}")

    def configure_remote(self):
        log("Configuring remote...")
        self.echo("")
        self.echo(CONFIGURE_STEPS.format(remote=self.config.remote))
        self.prompt("Press Enter to continue with configuration...")
        self.rclone.configure()

    def test_connection(self):
        self.rclone.check_installed()
        self.rclone.check_remote()
        log("Testing connection...")
        res = self.rclone.lsd()
        if res.ok:
            log.success(f"Connected to '{self.config.remote}:'")
        else:
            log.warning(f"Could not list '{self.config.remote}:'")
        return res.ok

    def list_folders(self):
        pairs = self.registry.pairs
        for ii, pair in enumerate(pairs, 1):
            self.echo(f"{ii}. {pair.source_path} -> {self.config.remote}:/{pair.remote_path}")
        return pairs

    def manage_folders(self):
        self.registry.load()
        while True:
            self.echo("")
            self.echo(RULE)
            self.echo("Manage Sync Folders")
            self.echo(RULE)
            self.echo("Current folders:")
            self.echo("")
            self.list_folders()
            self.echo("")
            self.echo("Actions:")
            self.echo("a. Add new folder")
            self.echo("d. Delete folder")
            self.echo("b. Back to main menu")
            self.echo(RULE)
            action = self.prompt("Choose an action: ").strip().lower()

            if action == "a":
                self.add_folder()
            elif action == "d":
                self.delete_folder()
            elif action == "b":
                return
            else:
                log.warning("Invalid option")

    def add_folder(self):
        self.echo("")
        self.echo("=== Add New Sync Folder ===")
        self.echo("")
        pair = SyncPair(
            self.prompt("Enter source folder path (e.g., /13_media_share_00/MUSIC/GHM): ").strip(),
            self.prompt("Enter remote destination folder name (e.g., GHM): ").strip(),
            self.prompt("Enter mount point (e.g., /13_media_share_00) or leave blank: ").strip(),
            self.prompt(
                "Enter network share (e.g., //192.168.2.18/13_media_share_00) or leave blank: "
            ).strip(),
        )
        if not pair.source_path or not pair.remote_path:
            log.warning("Source and destination are required")
            return False

        def confirm():
            return self.prompt("Add anyway? (y/n): ").strip().lower() == "y"

        return self.registry.add(pair, confirm=confirm)

    def delete_folder(self):
        self.registry.load()
        self.echo("")
        self.echo("=== Delete Sync Folder ===")
        self.echo("")
        self.list_folders()
        self.echo("")
        choice = self.prompt("Enter number to delete (or 'c' to cancel): ").strip()
        if choice.lower() == "c":
            return None
        try:
            return self.registry.delete(int(choice))
        except ValueError:
            log.warning(f"Invalid selection: '{choice}'")
            return None

    def install_schedule(self):
        self.echo("")
        self.echo("Choose sync frequency:")
        self.echo("1. Every hour")
        self.echo("2. Every 6 hours")
        self.echo("3. Daily at 2 AM")
        self.echo("4. Custom")
        choice = self.prompt("Choose [1-4]: ").strip()
        choices = {"1": "hourly", "2": "every-6-hours", "3": "daily", "4": "custom"}
        if choice not in choices:
            log.warning("Invalid option")
            return None

        custom = None
        if choices[choice] == "custom":
            custom = self.prompt("Enter cron schedule (e.g., '0 2 * * *' for daily at 2 AM): ")

        installer = SchedulerInstaller(self.config, self.runner)
        try:
            return installer.install(choices[choice], custom)
        except (ValueError, OSError, subprocess.CalledProcessError) as err:
            log.warning(str(err))
            return None

    def view_log(self, N=50):
        if not os.path.exists(self.config.log_file):
            log.warning("Log file does not exist yet")
            return
        for line in utils.tail(self.config.log_file, N):
            self.echo(line)
