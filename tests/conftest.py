from __future__ import annotations

from typing import Callable, List, Optional, Tuple

import pytest

from remote_init.config import InitConfig
from remote_init.errors import RemoteCommandError


class FakeRemote:
    """Records commands instead of running them over SSH.

    ``present`` is the set of probe commands that succeed; ``fail_on`` makes
    ``run`` raise for any command containing that text.
    """

    def __init__(self, present=(), fail_on: Optional[str] = None):
        self.host = "user@example"
        self.present = set(present)
        self.fail_on = fail_on
        self.calls: List[Tuple[str, str]] = []

    def succeeds(self, command: str) -> bool:
        self.calls.append(("probe", command))
        return command in self.present

    def run(self, command: str, check: bool = True, display: Optional[str] = None) -> int:
        self.calls.append(("run", display or command))
        if self.fail_on and self.fail_on in command:
            raise RemoteCommandError(display or command, 100)
        return 0

    def copy_to(self, local_path: str, remote_path: str) -> None:
        self.calls.append(("copy", f"{local_path} -> {remote_path}"))

    @property
    def ran(self) -> List[str]:
        return [cmd for kind, cmd in self.calls if kind == "run"]

    @property
    def probes(self) -> List[str]:
        return [cmd for kind, cmd in self.calls if kind == "probe"]


@pytest.fixture
def make_config(tmp_path) -> Callable[..., InitConfig]:
    def _make(**overrides) -> InitConfig:
        values = {
            "remote_host": "user@example",
            "tmux_conf": str(tmp_path / "missing.tmux.conf"),
            "log_file": None,
        }
        values.update(overrides)
        return InitConfig(**values)

    return _make


@pytest.fixture
def fake_remote() -> Callable[..., FakeRemote]:
    return FakeRemote
