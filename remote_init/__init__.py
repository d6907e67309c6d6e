"""
remote_init

Provision a remote Ubuntu host over SSH: tmux, Docker and Tailscale are
installed and configured idempotently, each step checking the host before
it changes anything.
"""

__version__ = "1.0.0"

from remote_init.config import InitConfig
from remote_init.errors import ConfigError, RemoteCommandError, RemoteInitError
from remote_init.remote import RemoteHost
from remote_init.result import StepResult

__all__ = [
    "__version__",
    "ConfigError",
    "InitConfig",
    "RemoteCommandError",
    "RemoteHost",
    "RemoteInitError",
    "StepResult",
]
