"""Services package for the email writer."""

from email_writer.services.locale import (
    CatalogError,
    LocaleSettings,
    Translator,
    load_catalog,
    find_matching_locale,
    resolve_locale,
    system_language_preferences,
)

from email_writer.services.completion import (
    Completer,
    CompletionClient,
    CompletionError,
    BackendUnavailableError,
    CompletionHTTPError,
    UnexpectedResponseError,
)

from email_writer.services.prompt import (
    TONE_OPTIONS,
    DEFAULT_TONE,
    ValidationError,
    validate_email_request,
    build_email_prompt,
    generate_email,
    translated_tones,
)

__all__ = [
    # Locale
    "CatalogError",
    "LocaleSettings",
    "Translator",
    "load_catalog",
    "find_matching_locale",
    "resolve_locale",
    "system_language_preferences",
    # Completion
    "Completer",
    "CompletionClient",
    "CompletionError",
    "BackendUnavailableError",
    "CompletionHTTPError",
    "UnexpectedResponseError",
    # Prompt
    "TONE_OPTIONS",
    "DEFAULT_TONE",
    "ValidationError",
    "validate_email_request",
    "build_email_prompt",
    "generate_email",
    "translated_tones",
]
