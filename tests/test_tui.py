"""Tests for TUI output."""

from __future__ import annotations

from pathlib import Path

import pytest
from rich.console import Console

from torc.protocols import Reporter
from torc.tui import TUI
from torc.types import StatusReport


@pytest.fixture
def tui() -> TUI:
    """TUI recording into memory."""
    instance = TUI()
    instance.console = Console(record=True, width=120, force_terminal=False)
    return instance


def rendered(tui: TUI) -> str:
    return tui.console.export_text()


class TestTUI:
    """Tests for the TUI class."""

    def test_is_reporter(self) -> None:
        assert isinstance(TUI(), Reporter)

    def test_messages_escape_markup(self, tui: TUI) -> None:
        """Test brackets in messages are printed literally."""
        tui.show_error("cp: cannot stat '[web]'")

        assert "[web]" in rendered(tui)

    def test_access_urls(self, tui: TUI) -> None:
        """Test localhost and every address get both UIs."""
        tui.show_access_urls(8080, 9090, ["192.168.1.20"])

        text = rendered(tui)
        assert "http://localhost:8080/" in text
        assert "http://localhost:9090/" in text
        assert "http://192.168.1.20:8080/" in text
        assert "http://192.168.1.20:9090/" in text

    def test_status_running_with_logs(self, tui: TUI) -> None:
        report = StatusReport(
            running=True,
            service_path=Path("/etc/systemd/system/torc-server.service"),
            logs=["listening on :8080"],
        )

        tui.show_status(report)

        text = rendered(tui)
        assert "Running" in text
        assert "/etc/systemd/system/torc-server.service" in text
        assert "listening on :8080" in text

    def test_status_not_running(self, tui: TUI) -> None:
        tui.show_status(StatusReport(running=False, service_path=Path("/x.plist")))

        assert "Not running" in rendered(tui)

    def test_show_output_empty(self, tui: TUI) -> None:
        """Test empty output prints nothing."""
        tui.show_output("")

        assert rendered(tui) == ""

    def test_management_hints(self, tui: TUI) -> None:
        tui.show_management_hints([("Stop", "sudo systemctl stop torc-server")])

        assert "sudo systemctl stop torc-server" in rendered(tui)
