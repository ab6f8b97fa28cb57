"""
UI preferences persisted in local storage: colour theme and debug panel.
"""

from typing import Literal

from adducation.storage.local_store import SHOW_DEBUG_KEY, THEME_KEY, LocalStore

Theme = Literal["light", "dark"]


class Preferences:
    """Theme and debug-panel visibility."""

    def __init__(self, store: LocalStore):
        self.store = store

    @property
    def theme(self) -> Theme:
        return "dark" if self.store.get_item(THEME_KEY) == "dark" else "light"

    @theme.setter
    def theme(self, value: Theme):
        if value not in ("light", "dark"):
            raise ValueError(f"Unknown theme: {value}")
        self.store.set_item(THEME_KEY, value)

    def toggle_theme(self) -> Theme:
        self.theme = "dark" if self.theme == "light" else "light"
        return self.theme

    @property
    def show_debug(self) -> bool:
        return self.store.get_item(SHOW_DEBUG_KEY) == "true"

    def toggle_debug(self) -> bool:
        value = not self.show_debug
        self.store.set_item(SHOW_DEBUG_KEY, str(value).lower())
        return value
