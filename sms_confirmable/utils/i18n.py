from __future__ import annotations

"""
Internationalization (i18n) utility module for translated messages.

This module provides functionality for:
- Loading and managing translations for multiple languages
- Translating messages (error messages, SMS bodies) by language
- Rendering durations such as the confirmation window in words
- Fallback mechanisms for missing translations

The module uses Python's built-in gettext for catalogue management and Babel
for locale-aware formatting.
"""

import gettext
import os
from datetime import timedelta
from typing import Dict, Optional

from babel.core import UnknownLocaleError
from babel.dates import format_timedelta

from sms_confirmable.core.config.settings import settings
from sms_confirmable.core.logging import logger

# Store translations for each language
_translations: Dict[str, gettext.NullTranslations] = {}

# Catalogue parsed from the *.po* files, used when the compiled *.mo* files are
# missing or out of date.
_fallback_catalogs: Dict[str, Dict[str, str]] = {}

LOCALES_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "locales"))


def setup_i18n(locales_path: str = LOCALES_PATH) -> None:
    """
    Initialize the internationalization system by loading translations.

    Loads translation files for each supported language from the locales
    directory and parses the .po files as a fallback for environments where
    the .mo files were not compiled.

    Raises:
        FileNotFoundError: If the locales directory is not found.
    """
    if not os.path.exists(locales_path):
        raise FileNotFoundError(f"Locales directory not found: {locales_path}")

    for lang in settings.SUPPORTED_LANGUAGES:
        translation = gettext.translation(
            domain="messages",
            localedir=locales_path,
            languages=[lang],
            fallback=True,
        )
        _translations[lang] = translation

        po_path = os.path.join(locales_path, lang, "LC_MESSAGES", "messages.po")
        catalog: Dict[str, str] = {}
        if os.path.exists(po_path):
            file_size = os.path.getsize(po_path)
            if file_size > 10 * 1024 * 1024:  # 10MB limit
                logger.warning("i18n_po_file_too_large", lang=lang, size=file_size)
                continue
            catalog = _parse_po_file(po_path)

        _fallback_catalogs[lang] = catalog
        logger.info("i18n_initialized", language=lang, entries=len(catalog))

    logger.info("i18n_setup_complete", default_locale=settings.DEFAULT_LANGUAGE)


def _parse_po_file(po_path: str) -> Dict[str, str]:
    catalog: Dict[str, str] = {}
    with open(po_path, "r", encoding="utf-8") as po_file:
        current_msgid: Optional[str] = None
        for raw_line in po_file:
            line = raw_line.strip()
            if line.startswith("msgid "):
                current_msgid = line[6:].strip().strip('"')
            elif line.startswith("msgstr ") and current_msgid is not None:
                msgstr = line[7:].strip().strip('"')
                if current_msgid:
                    catalog[current_msgid] = msgstr or current_msgid
                current_msgid = None
    return catalog


def get_translated_message(key: str, locale: str = settings.DEFAULT_LANGUAGE, **params) -> str:
    """
    Retrieve a translated message for the given key and locale.

    Falls back to the default language, then to the key itself. Named
    ``params`` are interpolated with ``str.format``.

    Args:
        key: The message key to translate.
        locale: The target language code.
        **params: Values for the ``{placeholders}`` in the message.

    Returns:
        The translated message or the original key if translation fails.
    """
    if locale not in _translations:
        if _translations:
            logger.warning("unsupported_locale_requested", requested_locale=locale,
                           fallback_locale=settings.DEFAULT_LANGUAGE)
        locale = settings.DEFAULT_LANGUAGE

    translation = _translations.get(locale)
    if not translation:  # setup_i18n has not run
        logger.error("translation_missing_for_locale", locale=locale)
        translated = key
    else:
        translated = translation.gettext(key)
        if translated == key:
            translated = _fallback_catalogs.get(locale, {}).get(key, key)
            if translated == key:
                logger.warning("translation_key_not_found", key=key, locale=locale)

    if params:
        try:
            translated = translated.format(**params)
        except (KeyError, IndexError, ValueError):
            logger.warning("translation_params_mismatch", key=key, locale=locale)
    return translated


def format_period(period: timedelta, locale: str = settings.DEFAULT_LANGUAGE) -> str:
    """Render a duration in words, e.g. ``timedelta(days=1)`` -> ``"1 day"``.

    Args:
        period: Duration to render.
        locale: Language used for the unit names.

    Returns:
        Localized duration; the English rendering for unknown locales.
    """
    try:
        return format_timedelta(period, threshold=1, locale=locale)
    except (UnknownLocaleError, ValueError):
        logger.warning("unsupported_locale_requested", requested_locale=locale,
                       fallback_locale="en")
        return format_timedelta(period, threshold=1, locale="en")
