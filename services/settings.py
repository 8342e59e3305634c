"""Settings service for display preferences stored alongside the ledger."""

import re

from logger import get_logger

logger = get_logger()

CURRENCY_KEY = "settings.currency"
THEME_KEY = "settings.theme"

THEMES = ("dark", "light", "system")
DEFAULT_THEME = "system"

_CURRENCY_CODE = re.compile(r"^[A-Z]{3}$")


class SettingsService:
    """Service for reading display currency and theme preferences.

    Args:
        storage: Key-value store holding the persisted blobs.
        default_currency: Currency written when none has been stored yet.
    """

    def __init__(self, storage, default_currency: str = "INR"):
        self.storage = storage
        self.default_currency = default_currency.upper()

    @property
    def currency(self) -> str:
        """The display currency code, storing the default if none is set."""
        stored = self.storage.get(CURRENCY_KEY)
        if stored:
            return stored

        self.storage.set(CURRENCY_KEY, self.default_currency)
        return self.default_currency

    @property
    def theme(self) -> str:
        """The theme preference, one of 'dark', 'light' or 'system'.

        Unknown stored values read as 'system' without being rewritten.
        """
        stored = self.storage.get(THEME_KEY)
        if not stored:
            self.storage.set(THEME_KEY, DEFAULT_THEME)
            return DEFAULT_THEME
        if stored not in THEMES:
            logger.warning(f"Unknown theme preference '{stored}', using {DEFAULT_THEME}")
            return DEFAULT_THEME
        return stored

    def set_currency(self, code: str) -> str:
        """Store a new display currency.

        Args:
            code: ISO 4217-style currency code (case-insensitive).

        Returns:
            The normalized code that was stored.

        Raises:
            ValueError: If code is not three letters.
        """
        normalized = code.strip().upper()
        if not _CURRENCY_CODE.match(normalized):
            raise ValueError(f"Invalid currency code: {code}")

        self.storage.set(CURRENCY_KEY, normalized)
        return normalized
