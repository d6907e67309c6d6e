"""
Command line entry point.

Usage:
  REMOTE_HOST=user@hostname [TAILSCALE_KEY=tskey-...] remote-init [OPTIONS]

Steps run in order (tmux, Docker, Tailscale). The first failing remote
command stops the run.
"""

import signal
import sys
from typing import Callable, List, Optional, Tuple

import click
from rich.traceback import install as install_rich_traceback

from remote_init import __version__
from remote_init.config import InitConfig
from remote_init.docker_setup import ensure_docker
from remote_init.errors import ConfigError, RemoteCommandError
from remote_init.remote import RemoteHost
from remote_init.result import FAILED, NOT_RUN, SKIPPED, StepResult
from remote_init.tailscale_setup import ensure_tailscale
from remote_init.tmux_setup import ensure_tmux
from remote_init.ui import (
    NordColors,
    console,
    create_header,
    display_panel,
    print_error,
    print_step,
    print_success,
    print_summary,
    print_warning,
    setup_logging,
)

Step = Callable[[RemoteHost, InitConfig], StepResult]

STEPS: List[Tuple[str, str, Step]] = [
    ("tmux", "tmux", ensure_tmux),
    ("docker", "Docker", ensure_docker),
    ("tailscale", "Tailscale", ensure_tailscale),
]

RELOGIN_NOTICE = (
    "Please log out and log back in to the remote machine "
    "for docker group changes to take effect."
)


def signal_handler(sig: int, frame) -> None:
    """Exit with the conventional 128 + signal status after a termination signal."""
    print_warning(f"Initialization interrupted by signal {sig}.")
    sys.exit(128 + sig)


def run_steps(remote: RemoteHost, config: InitConfig) -> Tuple[List[StepResult], bool]:
    """
    Run every enabled step against ``remote``.

    Returns the per-step results and whether the run completed. After a
    RemoteCommandError the failing step is marked failed and the remaining
    steps are reported as not run.
    """
    results: List[StepResult] = []
    failed = False
    for key, title, step in STEPS:
        if failed:
            results.append(StepResult(title, NOT_RUN, "stopped after earlier failure"))
            continue
        if not config.wants(key):
            print_step(f"Skipping {title} (disabled on the command line)")
            results.append(StepResult(title, SKIPPED, "disabled on the command line"))
            continue
        try:
            results.append(step(remote, config))
        except RemoteCommandError as e:
            print_error(str(e))
            results.append(StepResult(title, FAILED, f"exit {e.returncode}: {e.command}"))
            failed = True
    return results, not failed


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--host", "remote_host", help="Target as user@hostname (default: $REMOTE_HOST).")
@click.option("--tailscale-key", help="Tailscale auth key (default: $TAILSCALE_KEY).")
@click.option("-p", "--port", "ssh_port", type=int, help="SSH port (default: $REMOTE_PORT).")
@click.option(
    "-i",
    "--identity",
    "identity_file",
    type=click.Path(exists=True, dir_okay=False),
    help="SSH private key to authenticate with.",
)
@click.option("--tmux-conf", help="Local tmux configuration to copy (default: ~/.tmux.conf).")
@click.option("--connect-timeout", type=int, help="SSH connect timeout in seconds.")
@click.option("--skip-tmux", is_flag=True, help="Do not touch tmux.")
@click.option("--skip-docker", is_flag=True, help="Do not touch Docker.")
@click.option("--skip-tailscale", is_flag=True, help="Do not touch Tailscale.")
@click.option("--dry-run", is_flag=True, help="Print the remote commands instead of running them.")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Write the run log here.")
@click.option("--debug", is_flag=True, help="Log every remote command.")
@click.version_option(__version__, prog_name="remote-init")
def main(
    remote_host: Optional[str],
    tailscale_key: Optional[str],
    ssh_port: Optional[int],
    identity_file: Optional[str],
    tmux_conf: Optional[str],
    connect_timeout: Optional[int],
    skip_tmux: bool,
    skip_docker: bool,
    skip_tailscale: bool,
    dry_run: bool,
    log_file: Optional[str],
    debug: bool,
) -> None:
    """Install and configure tmux, Docker and Tailscale on a remote Ubuntu host."""
    install_rich_traceback(show_locals=debug)
    signal.signal(signal.SIGTERM, signal_handler)
    skip = {
        name
        for name, flag in (
            ("tmux", skip_tmux),
            ("docker", skip_docker),
            ("tailscale", skip_tailscale),
        )
        if flag
    }
    try:
        config = InitConfig.from_env(
            remote_host=remote_host,
            tailscale_key=tailscale_key,
            ssh_port=ssh_port,
            identity_file=identity_file,
            tmux_conf=tmux_conf,
            connect_timeout=connect_timeout,
            skip=skip,
            dry_run=dry_run or None,
            log_file=log_file,
        )
    except ConfigError as e:
        print_error(f"Error: {e}")
        if e.usage:
            console.print(e.usage, style=NordColors.SNOW_STORM_1, markup=False)
        sys.exit(1)

    setup_logging(config.log_file, debug=debug)
    console.print(create_header())
    print_step(f"Starting remote Ubuntu machine initialization on {config.remote_host}...")
    if config.dry_run:
        print_warning("Dry run: no commands will be executed on the remote host.")

    try:
        results, completed = run_steps(RemoteHost.from_config(config), config)
    except KeyboardInterrupt:
        print_warning("Initialization interrupted by user.")
        sys.exit(130)
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        console.print_exception()
        sys.exit(1)

    print_summary(results)
    if not completed:
        display_panel(
            "Remote initialization stopped after a failed command. Check the log for details.",
            style=NordColors.RED,
            title="Initialization Failed",
        )
        sys.exit(1)

    print_success("Remote initialization complete!")
    if any(result.relogin_required for result in results):
        print_warning(RELOGIN_NOTICE)
