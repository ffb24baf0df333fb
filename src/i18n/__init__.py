"""
Internationalization helpers for os-update.
Messages are looked up in the "os-update" gettext domain and fall back to
the untranslated English text when no catalog is installed.
"""

import gettext
import os
from typing import Optional

DEFAULT_LANGUAGE = "en"

TEXT_DOMAIN = "os-update"

# Current language (can be changed at runtime)
CURRENT_LANGUAGE = DEFAULT_LANGUAGE

# Cache for loaded translation objects
TRANSLATIONS = {}


def set_language(language: str) -> None:
    """Set the current language for translations."""
    global CURRENT_LANGUAGE  # pylint: disable=global-statement
    CURRENT_LANGUAGE = language or DEFAULT_LANGUAGE


def get_language() -> str:
    """Get the current language."""
    return CURRENT_LANGUAGE


def get_translation(language: Optional[str] = None) -> gettext.NullTranslations:
    """Get translation object for the specified language."""
    if language is None:
        language = CURRENT_LANGUAGE

    if language not in TRANSLATIONS:
        localedir = os.path.join(os.path.dirname(__file__), "locales")
        TRANSLATIONS[language] = gettext.translation(
            TEXT_DOMAIN, localedir, [language], fallback=True
        )

    return TRANSLATIONS[language]


def _(message: str, language: Optional[str] = None) -> str:
    """Translate a message."""
    return get_translation(language).gettext(message)
