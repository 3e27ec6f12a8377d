import logging

from .constants import THEME_KEY
from .storage import StateStore


logger = logging.getLogger("uvicorn.error")
THEMES = {"light", "dark"}
DEFAULT_THEME = "light"


class ThemePreference:
    def __init__(self, state_store: StateStore) -> None:
        self._state_store = state_store

    def get(self) -> str:
        value = self._state_store.get(THEME_KEY)
        return value if value in THEMES else DEFAULT_THEME

    def set(self, theme: str) -> str:
        if theme not in THEMES:
            raise ValueError(f'Theme must be one of: {", ".join(sorted(THEMES))}.')
        self._state_store.set(THEME_KEY, theme)
        logger.info("theme_updated theme=%s", theme)
        return theme
