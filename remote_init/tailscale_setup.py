"""
Tailscale installation and exit-node network preparation.

Before Tailscale can act as an exit node the host needs IP forwarding
enabled and a firewall that lets forwarded traffic through. ufw is removed
and the iptables default policies are opened. Tailscale manages its own
rules once it is up.
"""

import shlex
from typing import List, Optional, Tuple

from remote_init.config import InitConfig, mask_key
from remote_init.remote import RemoteHost
from remote_init.result import CONFIGURED, INSTALLED, StepResult
from remote_init.ui import print_section, print_step, print_success

# ----------------------------------------------------------------
# Configuration & Constants
# ----------------------------------------------------------------
TAILSCALE_INSTALL_URL = "https://tailscale.com/install.sh"
SYSCTL_CONF = "/etc/sysctl.conf"
FORWARDING_SETTINGS = [
    "net.ipv4.ip_forward = 1",
    "net.ipv6.conf.all.forwarding = 1",
]
IPTABLES_COMMANDS = [
    "sudo iptables -P INPUT ACCEPT",
    "sudo iptables -P OUTPUT ACCEPT",
    "sudo iptables -P FORWARD ACCEPT",
    "sudo iptables -F",
]

CHECK_TAILSCALE = "command -v tailscale"
CHECK_TAILSCALE_RUNNING = "sudo tailscale status"


def append_setting_command(setting: str) -> str:
    return f"echo '{setting}' | sudo tee -a {SYSCTL_CONF}"


def ensure_setting_command(setting: str) -> str:
    """Append ``setting`` only when the file does not already contain it."""
    return f"grep -q '{setting}' {SYSCTL_CONF} || {append_setting_command(setting)}"


def tailscale_up_command(auth_key: Optional[str]) -> Tuple[str, str]:
    """
    Build the ``tailscale up`` invocation.

    Returns the command and a display form with the auth key masked. With a
    key the node re-authenticates non-interactively, resets previously set
    flags and advertises itself as an exit node. Without one, tailscale
    prints a login URL for the operator to open.
    """
    if not auth_key:
        command = "sudo tailscale up"
        return command, command
    base = "sudo tailscale up --advertise-exit-node --reset --authkey"
    return f"{base} {shlex.quote(auth_key)}", f"{base} {mask_key(auth_key)}"


def start_tailscale(remote: RemoteHost, config: InitConfig) -> None:
    if config.tailscale_key:
        print_step("Starting Tailscale with auth key and exit node configuration...")
    else:
        print_step("Starting Tailscale (interactive mode)...")
    command, display = tailscale_up_command(config.tailscale_key)
    remote.run(command, display=display)


def _configure_firewall(remote: RemoteHost, purge_ufw: str) -> None:
    print_step("Configuring firewall settings...")
    remote.run(purge_ufw)
    for command in IPTABLES_COMMANDS:
        remote.run(command)


def fresh_install(remote: RemoteHost, config: InitConfig) -> List[str]:
    print_step("Configuring network settings for Tailscale...")
    for setting in FORWARDING_SETTINGS:
        remote.run(append_setting_command(setting))
    remote.run(f"sudo sysctl -p {SYSCTL_CONF}")

    _configure_firewall(remote, "sudo apt-get purge -y ufw")

    print_step("Installing Tailscale...")
    remote.run(f"curl -fsSL {TAILSCALE_INSTALL_URL} | sudo sh")
    start_tailscale(remote, config)
    return ["installed", "started"]


def reconcile_existing(remote: RemoteHost, config: InitConfig) -> List[str]:
    """Re-apply network settings on a host that already has Tailscale."""
    print_step("Tailscale is already installed, checking network configuration...")
    for setting in FORWARDING_SETTINGS:
        remote.run(ensure_setting_command(setting))
    remote.run(f"sudo sysctl -p {SYSCTL_CONF}")

    _configure_firewall(
        remote, "dpkg -l | grep -q '^ii.*ufw' && sudo apt-get purge -y ufw || true"
    )

    actions = ["network settings verified"]
    if config.tailscale_key:
        start_tailscale(remote, config)
        actions.append("re-authenticated with auth key")
    elif not remote.succeeds(CHECK_TAILSCALE_RUNNING):
        start_tailscale(remote, config)
        actions.append("started")
    else:
        print_success("Tailscale is running.")
    return actions


def ensure_tailscale(remote: RemoteHost, config: InitConfig) -> StepResult:
    print_section("Tailscale")
    print_step("Checking Tailscale installation...")
    if not remote.succeeds(CHECK_TAILSCALE):
        actions = fresh_install(remote, config)
        print_success("Tailscale installed and started.")
        return StepResult("Tailscale", INSTALLED, ", ".join(actions), changed=True)

    actions = reconcile_existing(remote, config)
    return StepResult(
        "Tailscale", CONFIGURED, ", ".join(actions), changed=len(actions) > 1
    )
