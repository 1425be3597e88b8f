"""Notification and error message lookup."""
from typing import Optional

from app.config import settings
from app.localization.translations import TRANSLATIONS

FALLBACK_LOCALE = "en"


def supported_locale(locale: Optional[str]) -> str:
    """Known locale for ``locale`` (``ru-RU`` -> ``ru``), else the fallback."""
    code = (locale or settings.LOCALE or FALLBACK_LOCALE).split("-")[0].strip().lower()
    return code if code in TRANSLATIONS else FALLBACK_LOCALE


def get_translation(key: str, locale: Optional[str] = None, **kwargs) -> str:
    """Message for ``key``; missing keys fall back to English, then to the key itself.

    ``kwargs`` fill ``{placeholders}``. A template that cannot be filled is
    returned unformatted.
    """
    catalog = TRANSLATIONS[supported_locale(locale)]
    message = catalog.get(key) or TRANSLATIONS[FALLBACK_LOCALE].get(key, key)
    if not kwargs:
        return message
    try:
        return message.format(**kwargs)
    except (KeyError, IndexError):
        return message
