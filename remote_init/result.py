"""Outcome record for a single provisioning step."""

from dataclasses import dataclass

INSTALLED = "installed"
CONFIGURED = "configured"
SKIPPED = "skipped"
FAILED = "failed"
NOT_RUN = "not run"


@dataclass
class StepResult:
    """
    What a step did to the host.

    ``changed`` is True when the step modified the host. ``relogin_required``
    is True when the remote user must start a new login session for the
    change to apply (docker group membership).
    """

    name: str
    status: str
    detail: str = ""
    changed: bool = False
    relogin_required: bool = False
