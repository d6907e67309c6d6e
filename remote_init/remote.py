"""
SSH transport.

Every interaction with the target host goes through :class:`RemoteHost`,
which shells out to the system ``ssh`` and ``scp`` clients so the operator's
keys, agent and ``~/.ssh/config`` apply unchanged.
"""

import logging
import subprocess
from typing import List, Optional

from remote_init.config import InitConfig
from remote_init.errors import RemoteCommandError
from remote_init.ui import print_dry_run

logger = logging.getLogger("remote_init")

SSH_COMMAND = "ssh"
SCP_COMMAND = "scp"
COMMAND_NOT_FOUND = 127


class RemoteHost:
    """Run shell commands on, and copy files to, a single remote host."""

    def __init__(
        self,
        host: str,
        port: Optional[int] = None,
        identity_file: Optional[str] = None,
        connect_timeout: int = 10,
        dry_run: bool = False,
    ) -> None:
        self.host = host
        self.port = port
        self.identity_file = identity_file
        self.connect_timeout = connect_timeout
        self.dry_run = dry_run

    @classmethod
    def from_config(cls, config: InitConfig) -> "RemoteHost":
        return cls(
            config.remote_host,
            port=config.ssh_port,
            identity_file=config.identity_file,
            connect_timeout=config.connect_timeout,
            dry_run=config.dry_run,
        )

    def __repr__(self) -> str:
        return f"RemoteHost({self.host!r})"

    # ----------------------------------------------------------------
    # Argument construction
    # ----------------------------------------------------------------
    def _options(self, port_flag: str) -> List[str]:
        opts = [
            "-o",
            f"ConnectTimeout={self.connect_timeout}",
            "-o",
            "StrictHostKeyChecking=accept-new",
        ]
        if self.port is not None:
            opts += [port_flag, str(self.port)]
        if self.identity_file:
            opts += ["-i", self.identity_file]
        return opts

    def ssh_args(self) -> List[str]:
        return [SSH_COMMAND] + self._options("-p") + [self.host]

    def scp_args(self, local_path: str, remote_path: str) -> List[str]:
        return [SCP_COMMAND] + self._options("-P") + [local_path, f"{self.host}:{remote_path}"]

    # ----------------------------------------------------------------
    # Execution
    # ----------------------------------------------------------------
    def _execute(self, args: List[str], display: str, capture: bool) -> int:
        logger.debug(f"Executing on {self.host}: {display}")
        try:
            if capture:
                result = subprocess.run(
                    args,
                    stdin=subprocess.DEVNULL,
                    capture_output=True,
                    text=True,
                )
                if result.returncode != 0 and result.stderr:
                    logger.debug(f"stderr ({self.host}): {result.stderr.strip()}")
            else:
                result = subprocess.run(args)
        except FileNotFoundError:
            logger.error(f"{args[0]} not found on the local machine")
            raise RemoteCommandError(display, COMMAND_NOT_FOUND)
        logger.debug(f"Exit status {result.returncode}: {display}")
        return result.returncode

    def run(self, command: str, check: bool = True, display: Optional[str] = None) -> int:
        """
        Run ``command`` on the host with output streamed to the terminal.

        :param command: Shell command line, interpreted by the remote shell.
        :param check: Raise RemoteCommandError on a non-zero exit status.
        :param display: Redacted form of the command used in logs and errors.
        :return: The exit status.
        """
        display = display or command
        if self.dry_run:
            print_dry_run(f"ssh {self.host} {display}")
            return 0
        returncode = self._execute(self.ssh_args() + [command], display, capture=False)
        if check and returncode != 0:
            raise RemoteCommandError(display, returncode)
        return returncode

    def succeeds(self, command: str) -> bool:
        """Return True if ``command`` exits 0 on the host. Output is discarded."""
        if self.dry_run:
            print_dry_run(f"ssh {self.host} {command}  (assumed to fail)")
            return False
        return self._execute(self.ssh_args() + [command], command, capture=True) == 0

    def copy_to(self, local_path: str, remote_path: str) -> None:
        """Copy a local file to ``remote_path`` on the host with scp."""
        display = f"scp {local_path} {self.host}:{remote_path}"
        if self.dry_run:
            print_dry_run(display)
            return
        returncode = self._execute(self.scp_args(local_path, remote_path), display, capture=False)
        if returncode != 0:
            raise RemoteCommandError(display, returncode)
