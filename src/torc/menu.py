"""Menu file model and the interactive menu editor.

The menu file holds one item per line as a double-quoted name followed by a
comma, for example:

    "Latte",
    "Mocha",
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from torc.gitops import BUILD_MARKER, find_project_root
from torc.types import PlatformProfile

if TYPE_CHECKING:
    from torc.tui import TUI

logger = logging.getLogger(__name__)

MENU_FILE = "menu.txt"


@dataclass
class MenuDocument:
    """Ordered menu item names.

    Positions passed to remove() and rename() are 1-based, matching what the
    editor shows.
    """

    items: list[str] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str) -> MenuDocument:
        """Parse menu file content.

        Each line is trimmed, one trailing comma dropped and surrounding
        double quotes stripped. Lines left empty are ignored.
        """
        items = []
        for line in text.splitlines():
            cleaned = line.strip()
            if cleaned.endswith(","):
                cleaned = cleaned[:-1].rstrip()
            cleaned = cleaned.strip('"')
            if cleaned:
                items.append(cleaned)
        return cls(items=items)

    @classmethod
    def load(cls, path: Path) -> MenuDocument:
        """Read a menu file."""
        return cls.parse(path.read_text(encoding="utf-8"))

    def render(self) -> str:
        """Serialize in the quoted, comma-terminated line format."""
        return "\n".join(f'"{item}",' for item in self.items) + "\n"

    def save(self, path: Path) -> None:
        """Write the whole menu to path, creating parent directories.

        The content goes to a sibling temp file that is then renamed over
        path, so the running server never reads a partial menu.
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(f"{path.name}.tmp")
        try:
            tmp.write_text(self.render(), encoding="utf-8")
            os.replace(tmp, path)
        finally:
            tmp.unlink(missing_ok=True)
        logger.info("Saved %d menu items to %s", len(self.items), path)

    def add(self, name: str) -> None:
        """Append an item.

        Raises:
            ValueError: If the name is blank.
        """
        self.items.append(self._clean(name))

    def remove(self, position: int) -> str:
        """Remove the item at a 1-based position.

        Returns:
            The removed name.

        Raises:
            IndexError: If the position is out of range.
        """
        self._check_position(position)
        return self.items.pop(position - 1)

    def rename(self, position: int, name: str) -> str:
        """Replace the item at a 1-based position.

        Returns:
            The previous name.

        Raises:
            IndexError: If the position is out of range.
            ValueError: If the name is blank.
        """
        self._check_position(position)
        cleaned = self._clean(name)
        previous = self.items[position - 1]
        self.items[position - 1] = cleaned
        return previous

    def _check_position(self, position: int) -> None:
        if not 1 <= position <= len(self.items):
            raise IndexError(f"No menu item {position}")

    @staticmethod
    def _clean(name: str) -> str:
        cleaned = name.strip()
        if not cleaned:
            raise ValueError("Menu item name cannot be empty")
        return cleaned


def locate_menu_file(
    profile: PlatformProfile,
    start_path: Path | None = None,
    marker: str = BUILD_MARKER,
) -> Path | None:
    """Find the menu file to edit.

    Prefers the deployed copy in the install root, then the one in a local
    source checkout.

    Returns:
        Path to the menu file, or None if neither exists.
    """
    installed = profile.install_root / MENU_FILE
    if installed.is_file():
        return installed

    project_root = find_project_root(start_path, marker)
    if project_root is not None and (project_root / MENU_FILE).is_file():
        return project_root / MENU_FILE
    return None


class MenuEditor:
    """Line-oriented editing loop over a MenuDocument.

    Changes live in memory until the operator saves; quitting discards them.
    """

    def __init__(self, document: MenuDocument, path: Path, tui: TUI) -> None:
        self.document = document
        self.path = path
        self.tui = tui

    def run(self) -> bool:
        """Run the editor until save or quit.

        Returns:
            True if the menu was saved.
        """
        actions = {"a": self._add, "r": self._remove, "e": self._edit}
        while True:
            self.tui.show_menu_items(self.document.items)
            choice = self.tui.prompt_menu_action()
            if choice == "s":
                self.document.save(self.path)
                return True
            if choice == "q":
                return False
            actions[choice]()

    def _add(self) -> None:
        try:
            self.document.add(self.tui.ask("Enter new menu item name"))
        except ValueError as e:
            self.tui.show_error(str(e))

    def _remove(self) -> None:
        if not self.document.items:
            self.tui.show_warning("Menu is empty, nothing to remove")
            return
        position = self.tui.ask_int("Enter item number to remove")
        try:
            removed = self.document.remove(position)
        except IndexError:
            self.tui.show_error("Invalid item number")
            return
        self.tui.show_info(f"Removed: {removed}")

    def _edit(self) -> None:
        if not self.document.items:
            self.tui.show_warning("Menu is empty, nothing to edit")
            return
        position = self.tui.ask_int("Enter item number to edit")
        if not 1 <= position <= len(self.document.items):
            self.tui.show_error("Invalid item number")
            return
        self.tui.show_info(f"Current name: {self.document.items[position - 1]}")
        try:
            self.document.rename(position, self.tui.ask("Enter new name"))
        except ValueError as e:
            self.tui.show_error(str(e))
