"""
Console presentation and logging setup.

All operator-facing output goes through the helpers in this module so that
every message shown on screen is also written to the log file.
"""

import logging
import os
from typing import Iterable, Optional

import pyfiglet
from rich.console import Console
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text

from remote_init import __version__
from remote_init.result import StepResult

# ----------------------------------------------------------------
# Configuration & Constants
# ----------------------------------------------------------------
APP_NAME: str = "Remote Init"
APP_SUBTITLE: str = "Ubuntu Host Provisioning over SSH"
LOG_FORMAT: str = "%(asctime)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("remote_init")
logger.addHandler(logging.NullHandler())


# ----------------------------------------------------------------
# Nord-Themed Colors
# ----------------------------------------------------------------
class NordColors:
    """Nord color palette for consistent theming throughout the application."""

    POLAR_NIGHT_1 = "#2E3440"
    SNOW_STORM_1 = "#D8DEE9"
    SNOW_STORM_2 = "#E5E9F0"
    FROST_1 = "#8FBCBB"
    FROST_2 = "#88C0D0"
    FROST_3 = "#81A1C1"
    FROST_4 = "#5E81AC"
    RED = "#BF616A"  # Critical errors
    ORANGE = "#D08770"  # Warnings
    YELLOW = "#EBCB8B"  # Cautions
    GREEN = "#A3BE8C"  # Success messages
    PURPLE = "#B48EAD"  # Dry-run output


console: Console = Console()


# ----------------------------------------------------------------
# Logging Setup
# ----------------------------------------------------------------
def setup_logging(log_file: Optional[str], debug: bool = False) -> None:
    """
    Configure file logging for the run.

    Console output is handled by the print helpers, so only a file handler is
    attached. If the log directory cannot be created the run continues
    without a log file.
    """
    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    if not log_file:
        logger.addHandler(logging.NullHandler())
        return
    try:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handler = logging.FileHandler(log_file)
    except OSError as e:
        logger.addHandler(logging.NullHandler())
        print_warning(f"Logging setup failed: {e}")
        print_step("Continuing without file logging...")
        return
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    logger.addHandler(handler)
    logger.debug(f"Logging configured to: {log_file}")


# ----------------------------------------------------------------
# UI Helper Functions
# ----------------------------------------------------------------
def create_header() -> Panel:
    """Create an ASCII art header with gradient styling using Pyfiglet."""
    ascii_art = ""
    for font in ("slant", "small", "mini"):
        try:
            ascii_art = pyfiglet.Figlet(font=font, width=60).renderText(APP_NAME)
        except pyfiglet.FontNotFound:
            continue
        if ascii_art.strip():
            break
    if not ascii_art.strip():
        ascii_art = APP_NAME

    lines = [line for line in ascii_art.split("\n") if line.strip()]
    colors = [
        NordColors.FROST_1,
        NordColors.FROST_2,
        NordColors.FROST_3,
        NordColors.FROST_2,
    ]
    styled = Text()
    for i, line in enumerate(lines):
        styled.append(line + "\n", style=f"bold {colors[i % len(colors)]}")
    return Panel(
        styled,
        border_style=Style(color=NordColors.FROST_1),
        padding=(1, 2),
        title=f"[bold {NordColors.SNOW_STORM_2}]v{__version__}[/]",
        title_align="right",
        subtitle=f"[bold {NordColors.SNOW_STORM_1}]{APP_SUBTITLE}[/]",
        subtitle_align="center",
    )


def print_message(
    text: str, style: str = NordColors.FROST_2, prefix: str = "•"
) -> None:
    """Print a styled message to the console and log it."""
    console.print(f"{prefix} {text}", style=style, markup=False, highlight=False)
    logger.info(f"{prefix} {text}")


def print_step(text: str) -> None:
    print_message(text, NordColors.FROST_2, "•")


def print_success(text: str) -> None:
    print_message(text, NordColors.GREEN, "✓")


def print_warning(text: str) -> None:
    console.print(f"⚠ {text}", style=NordColors.YELLOW, markup=False, highlight=False)
    logger.warning(text)


def print_error(text: str) -> None:
    console.print(f"✗ {text}", style=f"bold {NordColors.RED}", markup=False, highlight=False)
    logger.error(text)


def print_dry_run(text: str) -> None:
    console.print(f"[dry-run] {text}", style=NordColors.PURPLE, markup=False, highlight=False)
    logger.info(f"[dry-run] {text}")


def print_section(title: str) -> None:
    """Print a section header with decorative borders."""
    border = "═" * 60
    console.print("\n" + f"[bold {NordColors.FROST_3}]{border}[/]")
    console.print(f"[bold {NordColors.FROST_2}]  {title}[/]")
    console.print(f"[bold {NordColors.FROST_3}]{border}[/]\n")
    logger.info(f"SECTION: {title}")


def display_panel(
    message: str, style: str = NordColors.FROST_2, title: Optional[str] = None
) -> None:
    """Display a message inside a Rich panel."""
    panel = Panel(
        Text(message, style=style),
        border_style=Style(color=style),
        padding=(1, 2),
        title=f"[bold {style}]{title}[/]" if title else None,
    )
    console.print(panel)
    logger.info(f"PANEL ({title if title else 'Untitled'}): {message}")


STATUS_STYLES = {
    "installed": NordColors.GREEN,
    "configured": NordColors.GREEN,
    "skipped": NordColors.FROST_3,
    "failed": NordColors.RED,
    "not run": NordColors.YELLOW,
}


def print_summary(results: Iterable[StepResult]) -> None:
    """Render the per-step outcome table shown at the end of a run."""
    table = Table(
        title="Remote Initialization Results",
        title_style=f"bold {NordColors.FROST_2}",
        border_style=NordColors.FROST_3,
        expand=True,
    )
    table.add_column("Step", style=f"bold {NordColors.FROST_1}")
    table.add_column("Result")
    table.add_column("Detail", style=NordColors.SNOW_STORM_1)
    for result in results:
        color = STATUS_STYLES.get(result.status, NordColors.SNOW_STORM_1)
        table.add_row(result.name, Text(result.status.title(), style=f"bold {color}"), result.detail)
        logger.info(f"RESULT: {result.name} -> {result.status} ({result.detail})")
    console.print(table)
