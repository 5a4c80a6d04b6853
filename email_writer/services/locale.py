"""
Locale catalog loading, locale resolution, and UI string lookup.
"""

import os
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Sequence

from email_writer.config import log_event, FALLBACK_LOCALE, APP_LOCALE_PLACEHOLDER

Catalog = Mapping[str, Mapping[str, str]]

# Checked in order, like gettext does
_LOCALE_ENV_VARS = ("LC_ALL", "LC_MESSAGES", "LANG")
_NEUTRAL_LOCALES = ("C", "POSIX")


class CatalogError(Exception):
    """Raised when the locale catalog cannot be loaded."""


# --- CATALOG ---

def load_catalog(locales_dir: Path) -> Catalog:
    """
    Load every <tag>.json file in locales_dir.
    Returns a read-only mapping of locale tag -> translated strings.
    """
    locales_dir = Path(locales_dir)
    catalog = {}

    for path in sorted(locales_dir.glob("*.json")):
        try:
            strings = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise CatalogError(f"Could not read locale file {path.name}: {e}") from e

        if not isinstance(strings, dict):
            raise CatalogError(f"Locale file {path.name} must contain a JSON object")

        # Non-string values (null, numbers) are dropped so lookup falls back to en-US
        catalog[path.stem] = MappingProxyType({
            str(k): v for k, v in strings.items() if isinstance(v, str)
        })

    if FALLBACK_LOCALE not in catalog:
        raise CatalogError(f"Fallback locale {FALLBACK_LOCALE} missing from {locales_dir}")

    log_event(logging.INFO, "catalog_loaded", locales=",".join(catalog))
    return MappingProxyType(catalog)


# --- RESOLUTION ---

def normalize_tag(value) -> str:
    """Turn a POSIX-style value like 'fr_FR.UTF-8@euro' into 'fr-FR'."""
    if not isinstance(value, str):
        return ""
    tag = value.strip().split(".", 1)[0].split("@", 1)[0]
    return tag.replace("_", "-")


def find_matching_locale(candidate, available: Iterable[str], fallback: str = FALLBACK_LOCALE) -> str:
    """
    Map a candidate tag onto a supported locale.

    Exact matches win. Otherwise the first supported tag (in sorted order)
    sharing the candidate's language subtag is used, so 'es-AR' picks
    'es-ES' over 'es-MX'. Anything else gets the fallback.
    """
    keys = sorted(available)

    if isinstance(candidate, str) and candidate in keys:
        return candidate

    tag = normalize_tag(candidate)
    if tag in keys:
        return tag

    language = tag.split("-", 1)[0].lower()
    if language:
        prefix = language + "-"
        for key in keys:
            if key.lower().startswith(prefix):
                return key

    return fallback


def system_language_preferences(environ: Optional[Mapping[str, str]] = None) -> List[str]:
    """
    Ordered language preferences reported by the process environment.
    LANGUAGE may hold a colon-separated list; the locale variables hold one tag each.
    """
    env = os.environ if environ is None else environ

    raw = env.get("LANGUAGE", "").split(":")
    raw.extend(env.get(name, "") for name in _LOCALE_ENV_VARS)

    preferences = []
    for value in raw:
        tag = normalize_tag(value)
        if tag and tag not in _NEUTRAL_LOCALES and tag not in preferences:
            preferences.append(tag)
    return preferences


def resolve_locale(
    override: Optional[str],
    preferences: Sequence[str],
    available: Iterable[str],
    fallback: str = FALLBACK_LOCALE,
) -> str:
    """
    Pick the locale for this process.
    An explicit override beats the environment; with neither, use the fallback.
    """
    available = list(available)

    if isinstance(override, str) and override.strip() and override.strip() != APP_LOCALE_PLACEHOLDER:
        source, candidate = "override", override.strip()
    elif preferences:
        source, candidate = "environment", preferences[0]
    else:
        log_event(logging.INFO, "locale_resolved", source="fallback", locale=fallback)
        return fallback

    resolved = find_matching_locale(candidate, available, fallback)
    log_event(logging.INFO, "locale_resolved", source=source, candidate=candidate, locale=resolved)
    return resolved


# --- SETTINGS & LOOKUP ---

@dataclass(frozen=True)
class LocaleSettings:
    """The resolved locale and the catalog it was resolved against."""
    locale: str
    catalog: Catalog
    fallback: str = FALLBACK_LOCALE

    @classmethod
    def resolve(
        cls,
        catalog: Catalog,
        override: Optional[str] = None,
        preferences: Sequence[str] = (),
    ) -> "LocaleSettings":
        return cls(locale=resolve_locale(override, preferences, catalog.keys()), catalog=catalog)


class Translator:
    """Looks up UI strings in the resolved locale, then the fallback locale."""

    def __init__(self, settings: LocaleSettings):
        self.settings = settings
        self._strings = settings.catalog.get(settings.locale, {})
        self._fallback_strings = settings.catalog.get(settings.fallback, {})

    @property
    def locale(self) -> str:
        return self.settings.locale

    def t(self, key: str, **kwargs) -> str:
        text = self._strings.get(key) or self._fallback_strings.get(key) or key
        if not kwargs:
            return text
        try:
            return text.format(**kwargs)
        except (KeyError, IndexError, ValueError) as e:
            log_event(logging.WARNING, "translation_format_error", key=key, locale=self.locale, error=str(e))
            return text
