"""
Docker Engine installation from Docker's apt repository.

The host counts as set up when the docker binary exists and ``docker ps``
works for the remote user. Otherwise the full install sequence runs again,
which is safe because every command in it is idempotent.
"""

from typing import List

from remote_init.config import InitConfig
from remote_init.remote import RemoteHost
from remote_init.result import CONFIGURED, INSTALLED, StepResult
from remote_init.ui import print_section, print_step, print_success

# ----------------------------------------------------------------
# Configuration & Constants
# ----------------------------------------------------------------
DOCKER_KEYRING = "/usr/share/keyrings/docker-archive-keyring.gpg"
DOCKER_GPG_URL = "https://download.docker.com/linux/ubuntu/gpg"
DOCKER_REPO_URL = "https://download.docker.com/linux/ubuntu"
DOCKER_SOURCES_LIST = "/etc/apt/sources.list.d/docker.list"

PREREQUISITE_PACKAGES = [
    "apt-transport-https",
    "ca-certificates",
    "curl",
    "gnupg",
    "lsb-release",
]
DOCKER_PACKAGES = ["docker-ce", "docker-ce-cli", "containerd.io"]

CHECK_DOCKER = "command -v docker && docker ps"
CHECK_DOCKER_GROUP = "groups $USER | grep -q docker"
ADD_USER_TO_GROUP = "sudo usermod -aG docker $USER"


def install_commands() -> List[str]:
    """The ordered remote commands that install Docker Engine."""
    return [
        f"sudo apt-get install -y {' '.join(PREREQUISITE_PACKAGES)}",
        f"curl -fsSL {DOCKER_GPG_URL} | sudo gpg --batch --yes --dearmor -o {DOCKER_KEYRING}",
        (
            f'echo "deb [arch=$(dpkg --print-architecture) signed-by={DOCKER_KEYRING}] '
            f'{DOCKER_REPO_URL} $(lsb_release -cs) stable" '
            f"| sudo tee {DOCKER_SOURCES_LIST} > /dev/null"
        ),
        f"sudo apt-get update && sudo apt-get install -y {' '.join(DOCKER_PACKAGES)}",
    ]


def ensure_docker(remote: RemoteHost, config: InitConfig) -> StepResult:
    print_section("Docker")
    print_step("Checking Docker installation...")
    if not remote.succeeds(CHECK_DOCKER):
        print_step("Installing Docker...")
        for command in install_commands():
            remote.run(command)
        print_step("Adding user to docker group...")
        remote.run(ADD_USER_TO_GROUP)
        print_success("Docker installed.")
        return StepResult(
            "Docker",
            INSTALLED,
            "docker-ce installed, user added to docker group",
            changed=True,
            relogin_required=True,
        )

    print_success("Docker is already installed, skipping...")
    if remote.succeeds(CHECK_DOCKER_GROUP):
        return StepResult("Docker", CONFIGURED, "already installed")

    print_step("Adding user to docker group...")
    remote.run(ADD_USER_TO_GROUP)
    return StepResult(
        "Docker",
        CONFIGURED,
        "already installed, user added to docker group",
        changed=True,
        relogin_required=True,
    )
