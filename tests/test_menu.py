"""Tests for the menu file model and editor."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from torc.menu import MENU_FILE, MenuDocument, MenuEditor, locate_menu_file

MENU_TEXT = '"Latte",\n"Mocha",\n'


class TestMenuDocument:
    """Tests for MenuDocument."""

    def test_parse(self) -> None:
        assert MenuDocument.parse(MENU_TEXT).items == ["Latte", "Mocha"]

    def test_render_matches_file_format(self) -> None:
        """Test rendering reproduces the quoted, comma-terminated format."""
        assert MenuDocument(["Latte", "Mocha"]).render() == MENU_TEXT

    def test_parse_is_lenient(self) -> None:
        """Test stray whitespace, blank lines and missing commas."""
        text = '  "Flat White" ,\n\n"Chai"\n   \n""\n'

        assert MenuDocument.parse(text).items == ["Flat White", "Chai"]

    def test_names_with_commas(self) -> None:
        """Test only the trailing comma is dropped."""
        assert MenuDocument.parse('"Milk, oat",\n').items == ["Milk, oat"]

    def test_empty(self) -> None:
        assert MenuDocument.parse("").items == []

    def test_load_and_save(self, tmp_path: Path) -> None:
        """Test save writes the whole file, creating directories."""
        path = tmp_path / "nested" / MENU_FILE
        document = MenuDocument(["Latte"])

        document.save(path)

        assert path.read_text() == '"Latte",\n'
        assert MenuDocument.load(path) == document

    def test_save_replaces_in_one_step(self, tmp_path: Path) -> None:
        """Test save swaps in a complete file and leaves no temp file."""
        path = tmp_path / MENU_FILE
        path.write_text(MENU_TEXT)

        MenuDocument(["Flat White"]).save(path)

        assert path.read_text() == '"Flat White",\n'
        assert sorted(p.name for p in tmp_path.iterdir()) == [MENU_FILE]

    def test_failed_save_keeps_old_menu(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test an interrupted save leaves the previous menu untouched."""
        path = tmp_path / MENU_FILE
        path.write_text(MENU_TEXT)

        def interrupted(src, dst) -> None:
            raise OSError("disk full")

        monkeypatch.setattr("torc.menu.os.replace", interrupted)

        with pytest.raises(OSError, match="disk full"):
            MenuDocument(["Flat White"]).save(path)

        assert path.read_text() == MENU_TEXT
        assert sorted(p.name for p in tmp_path.iterdir()) == [MENU_FILE]

    def test_add(self) -> None:
        document = MenuDocument(["Latte"])

        document.add("  Mocha ")

        assert document.items == ["Latte", "Mocha"]

    def test_add_blank(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            MenuDocument().add("   ")

    def test_remove(self) -> None:
        """Test positions are 1-based."""
        document = MenuDocument(["Latte", "Mocha", "Chai"])

        assert document.remove(2) == "Mocha"
        assert document.items == ["Latte", "Chai"]

    @pytest.mark.parametrize("position", [0, 3, -1])
    def test_remove_out_of_range(self, position: int) -> None:
        document = MenuDocument(["Latte", "Mocha"])

        with pytest.raises(IndexError):
            document.remove(position)

        assert document.items == ["Latte", "Mocha"]

    def test_rename(self) -> None:
        document = MenuDocument(["Latte", "Mocha"])

        assert document.rename(1, "Cortado") == "Latte"
        assert document.items == ["Cortado", "Mocha"]

    def test_rename_blank_keeps_name(self) -> None:
        document = MenuDocument(["Latte"])

        with pytest.raises(ValueError):
            document.rename(1, "")

        assert document.items == ["Latte"]


class TestLocateMenuFile:
    """Tests for locate_menu_file."""

    def test_prefers_install_root(self, linux_profile, project_root: Path) -> None:
        """Test the deployed menu wins over a checkout."""
        linux_profile.install_root.mkdir(parents=True)
        (linux_profile.install_root / MENU_FILE).write_text(MENU_TEXT)

        assert locate_menu_file(linux_profile, project_root) == (
            linux_profile.install_root / MENU_FILE
        )

    def test_falls_back_to_checkout(self, linux_profile, project_root: Path) -> None:
        result = locate_menu_file(linux_profile, project_root / "web")

        assert result == project_root.resolve() / MENU_FILE

    def test_not_found(self, linux_profile, tmp_path: Path) -> None:
        start = tmp_path / "nowhere"
        start.mkdir()

        assert locate_menu_file(linux_profile, start) is None

    def test_uses_configured_marker(self, linux_profile, project_root: Path) -> None:
        """Test the checkout is recognized by the configured build marker."""
        (project_root / "main.go").rename(project_root / "server.go")

        assert locate_menu_file(linux_profile, project_root) is None
        assert locate_menu_file(linux_profile, project_root, marker="server.go") == (
            project_root.resolve() / MENU_FILE
        )


@pytest.fixture
def menu_path(tmp_path: Path) -> Path:
    path = tmp_path / MENU_FILE
    path.write_text(MENU_TEXT)
    return path


@pytest.fixture
def tui() -> MagicMock:
    """Create a mock TUI for the editor."""
    return MagicMock()


def run_editor(path: Path, tui: MagicMock, actions: list[str]) -> bool:
    tui.prompt_menu_action.side_effect = actions
    return MenuEditor(MenuDocument.load(path), path, tui).run()


class TestMenuEditor:
    """Tests for MenuEditor."""

    def test_add_and_save(self, menu_path: Path, tui: MagicMock) -> None:
        """Test an added item is written on save."""
        tui.ask.return_value = "Flat White"

        saved = run_editor(menu_path, tui, ["a", "s"])

        assert saved is True
        assert menu_path.read_text() == '"Latte",\n"Mocha",\n"Flat White",\n'

    def test_quit_discards(self, menu_path: Path, tui: MagicMock) -> None:
        """Test quitting leaves the file untouched."""
        tui.ask_int.return_value = 1

        saved = run_editor(menu_path, tui, ["r", "q"])

        assert saved is False
        assert menu_path.read_text() == MENU_TEXT

    def test_remove(self, menu_path: Path, tui: MagicMock) -> None:
        tui.ask_int.return_value = 1

        run_editor(menu_path, tui, ["r", "s"])

        assert menu_path.read_text() == '"Mocha",\n'
        tui.show_info.assert_called_with("Removed: Latte")

    def test_remove_invalid_number(self, menu_path: Path, tui: MagicMock) -> None:
        tui.ask_int.return_value = 9

        run_editor(menu_path, tui, ["r", "s"])

        tui.show_error.assert_called_once_with("Invalid item number")
        assert menu_path.read_text() == MENU_TEXT

    def test_edit(self, menu_path: Path, tui: MagicMock) -> None:
        """Test renaming shows the current name first."""
        tui.ask_int.return_value = 2
        tui.ask.return_value = "Mocha Grande"

        run_editor(menu_path, tui, ["e", "s"])

        assert menu_path.read_text() == '"Latte",\n"Mocha Grande",\n'
        tui.show_info.assert_any_call("Current name: Mocha")

    def test_add_blank_rejected(self, menu_path: Path, tui: MagicMock) -> None:
        tui.ask.return_value = ""

        run_editor(menu_path, tui, ["a", "s"])

        tui.show_error.assert_called_once()
        assert menu_path.read_text() == MENU_TEXT

    def test_empty_menu(self, tmp_path: Path, tui: MagicMock) -> None:
        """Test remove and edit on an empty menu only warn."""
        path = tmp_path / MENU_FILE
        path.write_text("")

        run_editor(path, tui, ["r", "e", "q"])

        assert tui.show_warning.call_count == 2
        tui.ask_int.assert_not_called()
