"""
Run configuration.

Values come from the environment (REMOTE_HOST, TAILSCALE_KEY, REMOTE_PORT)
and may be overridden by command line options.
"""

import os
from dataclasses import dataclass, field, fields
from typing import FrozenSet, Mapping, Optional

from remote_init.errors import ConfigError

# ----------------------------------------------------------------
# Configuration & Constants
# ----------------------------------------------------------------
ENV_REMOTE_HOST = "REMOTE_HOST"
ENV_TAILSCALE_KEY = "TAILSCALE_KEY"
ENV_REMOTE_PORT = "REMOTE_PORT"

USAGE = "Usage: REMOTE_HOST=user@hostname [TAILSCALE_KEY=tskey-...] remote-init"

DEFAULT_TMUX_CONF = "~/.tmux.conf"
DEFAULT_CONNECT_TIMEOUT = 10  # seconds
DEFAULT_LOG_FILE = os.path.expanduser("~/.local/state/remote_init/remote_init.log")

STEP_NAMES = ("tmux", "docker", "tailscale")
TAILSCALE_KEY_PREFIX = "tskey-"


@dataclass(frozen=True)
class InitConfig:
    """Everything a provisioning run needs to know about its target."""

    remote_host: str
    tailscale_key: Optional[str] = None
    tmux_conf: str = DEFAULT_TMUX_CONF
    ssh_port: Optional[int] = None
    identity_file: Optional[str] = None
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT
    skip: FrozenSet[str] = field(default_factory=frozenset)
    dry_run: bool = False
    log_file: Optional[str] = DEFAULT_LOG_FILE

    def __post_init__(self) -> None:
        if not self.remote_host or not self.remote_host.strip():
            raise ConfigError(f"{ENV_REMOTE_HOST} environment variable is not set", USAGE)
        if self.ssh_port is not None and not 1 <= self.ssh_port <= 65535:
            raise ConfigError(f"Invalid SSH port: {self.ssh_port}", USAGE)
        if self.connect_timeout <= 0:
            raise ConfigError(
                f"Connect timeout must be positive, got {self.connect_timeout}", USAGE
            )
        unknown = set(self.skip) - set(STEP_NAMES)
        if unknown:
            raise ConfigError(f"Unknown step(s) to skip: {', '.join(sorted(unknown))}")

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, **overrides
    ) -> "InitConfig":
        """
        Build a configuration from environment variables.

        Keyword overrides whose value is None are ignored, so unset command
        line options fall through to the environment and then to defaults.
        """
        env = os.environ if environ is None else environ
        values = {
            "remote_host": env.get(ENV_REMOTE_HOST, "").strip(),
            "tailscale_key": env.get(ENV_TAILSCALE_KEY) or None,
        }
        port = env.get(ENV_REMOTE_PORT)
        if port:
            try:
                values["ssh_port"] = int(port)
            except ValueError:
                raise ConfigError(f"{ENV_REMOTE_PORT} must be an integer, got {port!r}", USAGE)

        known = {f.name for f in fields(cls)}
        for key, value in overrides.items():
            if key not in known:
                raise TypeError(f"Unknown configuration option: {key}")
            if value is not None:
                values[key] = value
        values["remote_host"] = (values.get("remote_host") or "").strip()
        if "skip" in values:
            values["skip"] = frozenset(values["skip"])
        return cls(**values)

    @property
    def tmux_conf_path(self) -> str:
        return os.path.expanduser(self.tmux_conf)

    @property
    def masked_key(self) -> Optional[str]:
        """The Tailscale auth key with its secret part hidden."""
        return mask_key(self.tailscale_key)

    def wants(self, step: str) -> bool:
        return step not in self.skip


def mask_key(key: Optional[str]) -> Optional[str]:
    """Keep the ``tskey-`` prefix and at most four characters, hide the rest.

    Short keys reveal no more than half of what follows the prefix.
    """
    if not key:
        return None
    prefix = TAILSCALE_KEY_PREFIX if key.startswith(TAILSCALE_KEY_PREFIX) else ""
    body = key[len(prefix):]
    shown = min(4, len(body) // 2)
    return f"{prefix}{body[:shown]}{'*' * 8}"
