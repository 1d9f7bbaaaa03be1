from __future__ import annotations

"""
Internationalization (i18n) utilities for translating user-facing messages.

This module provides functionality for:
- Loading translations for the configured languages
- Translating message keys based on the caller's language
- Determining the language of an HTTP request
- Falling back to the raw ``.po`` catalogue when compiled ``.mo`` files are
  missing or stale

Translations are loaded lazily on first use, so modules that raise translated
exceptions can be imported before the application is initialised.
"""

import gettext
import os
from typing import Dict, Optional

from fastapi import Request

from warden.core.config.settings import settings
from warden.core.logging import logger

LOCALES_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "locales")
MAX_PO_FILE_SIZE = 1024 * 1024

_translations: Dict[str, gettext.NullTranslations] = {}

# Parsed from the *.po* files. Used when gettext returns the msgid unchanged,
# which happens whenever the *.mo* file has not been compiled.
_fallback_catalogs: Dict[str, Dict[str, str]] = {}


def _parse_po_file(po_path: str) -> Dict[str, str]:
    catalog: Dict[str, str] = {}
    if os.path.getsize(po_path) > MAX_PO_FILE_SIZE:
        logger.warning("i18n_po_file_too_large", path=po_path)
        return catalog

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


def setup_i18n() -> None:
    """
    Load translations for every supported language.

    Raises:
        FileNotFoundError: If the locales directory is missing.
    """
    if not os.path.isdir(LOCALES_PATH):
        raise FileNotFoundError(f"Locales directory not found: {LOCALES_PATH}")

    for lang in settings.SUPPORTED_LANGUAGES:
        _translations[lang] = gettext.translation(
            domain="messages",
            localedir=LOCALES_PATH,
            languages=[lang],
            fallback=True,
        )
        po_path = os.path.join(LOCALES_PATH, lang, "LC_MESSAGES", "messages.po")
        _fallback_catalogs[lang] = _parse_po_file(po_path) if os.path.exists(po_path) else {}
        logger.debug("i18n_initialized", language=lang, entries=len(_fallback_catalogs[lang]))


def get_translated_message(key: str, locale: Optional[str] = None) -> str:
    """
    Retrieve a translated message for the given key and locale.

    Unsupported locales fall back to the default language; unknown keys fall
    back to the key itself.

    Args:
        key: The message key to translate.
        locale: The target language code (defaults to DEFAULT_LANGUAGE).

    Returns:
        The translated message or the original key if no translation exists.
    """
    if not _translations:
        setup_i18n()

    if locale not in _translations:
        locale = settings.DEFAULT_LANGUAGE

    translation = _translations.get(locale)
    if translation is None:
        logger.error("translation_missing_for_locale", locale=locale)
        return key

    translated = translation.gettext(key)
    if translated == key:
        translated = _fallback_catalogs.get(locale, {}).get(key, key)
        if translated == key:
            logger.warning("translation_key_not_found", key=key, locale=locale)
    return translated


def get_request_language(request: Request) -> str:
    """
    Determine the preferred language of a request.

    Checks the ``lang`` query parameter, then the Accept-Language header, then
    the default language from settings.
    """
    lang = request.query_params.get("lang")
    if lang and lang in settings.SUPPORTED_LANGUAGES:
        return lang

    accept_language = request.headers.get("Accept-Language", settings.DEFAULT_LANGUAGE)
    for candidate in accept_language.split(","):
        candidate = candidate.split(";")[0].strip().split("-")[0]
        if candidate in settings.SUPPORTED_LANGUAGES:
            return candidate

    return settings.DEFAULT_LANGUAGE
