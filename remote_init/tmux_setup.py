"""tmux installation and configuration sync."""

import os

from remote_init.config import InitConfig
from remote_init.remote import RemoteHost
from remote_init.result import CONFIGURED, INSTALLED, StepResult
from remote_init.ui import print_section, print_step, print_success, print_warning

REMOTE_TMUX_CONF = "~/.tmux.conf"


def ensure_tmux(remote: RemoteHost, config: InitConfig) -> StepResult:
    """
    Install tmux if missing, then copy the local tmux configuration over.

    The configuration is copied on every run so the host follows the
    operator's local ~/.tmux.conf.
    """
    print_section("tmux")
    print_step("Checking tmux installation...")
    if remote.succeeds("command -v tmux"):
        print_success("tmux is already installed, skipping...")
        status, changed = CONFIGURED, False
    else:
        print_step("Installing tmux...")
        remote.run("sudo apt-get update && sudo apt-get install -y tmux")
        print_success("tmux installed.")
        status, changed = INSTALLED, True

    local_conf = config.tmux_conf_path
    if not os.path.isfile(local_conf):
        print_warning(f"No tmux configuration at {local_conf}; not copying.")
        return StepResult("tmux", status, "no local config to copy", changed=changed)

    print_step("Copying tmux configuration...")
    remote.copy_to(local_conf, REMOTE_TMUX_CONF)
    print_success(f"Copied {local_conf} to {REMOTE_TMUX_CONF}")
    return StepResult("tmux", status, f"config copied from {local_conf}", changed=True)
