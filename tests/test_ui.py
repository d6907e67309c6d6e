from __future__ import annotations

import logging

from remote_init import ui
from remote_init.result import FAILED, INSTALLED, StepResult


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "nested" / "run.log"
    ui.setup_logging(str(log_file), debug=True)
    ui.print_step("hello from the test")
    for handler in ui.logger.handlers:
        handler.flush()
    text = log_file.read_text()
    assert "hello from the test" in text
    assert " - INFO - " in text
    assert ui.logger.level == logging.DEBUG


def test_setup_logging_survives_unwritable_dir(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("")
    ui.setup_logging(str(blocker / "run.log"))
    assert all(isinstance(h, logging.NullHandler) for h in ui.logger.handlers)


def test_header_renders():
    panel = ui.create_header()
    assert panel.subtitle is not None


def test_summary_lists_every_step(capsys):
    ui.print_summary(
        [
            StepResult("tmux", INSTALLED, "ok"),
            StepResult("Docker", FAILED, "exit 100: apt-get"),
        ]
    )
    out = capsys.readouterr().out
    assert "tmux" in out
    assert "Failed" in out
