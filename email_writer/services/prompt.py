"""
Email prompt construction and generation.
"""

import logging
from typing import Optional, Tuple

from email_writer.config import log_event, MAX_THOUGHTS_LENGTH, MAX_CONTEXT_LENGTH
from email_writer.models import ToneOption, EmailRequest
from email_writer.services.completion import Completer, UnexpectedResponseError


# --- TONES ---

TONE_OPTIONS: Tuple[ToneOption, ...] = (
    ToneOption("professional", "professional_tone", "professional_description"),
    ToneOption("warm", "warm_tone", "warm_description"),
    ToneOption("concise", "concise_tone", "concise_description"),
    ToneOption("formal", "formal_tone", "formal_description"),
    ToneOption("casual", "casual_tone", "casual_description"),
    ToneOption("persuasive", "persuasive_tone", "persuasive_description"),
)
TONE_VALUES = frozenset(option.value for option in TONE_OPTIONS)
DEFAULT_TONE = "professional"


class ValidationError(ValueError):
    """Bad form input. `key` names the catalog string describing the problem."""

    def __init__(self, key: str, **params):
        super().__init__(key)
        self.key = key
        self.params = params


def _clean_text(value) -> str:
    # Browsers submit textarea line breaks as CRLF but count them as one character
    if not isinstance(value, str):
        return ""
    return value.replace("\r\n", "\n").strip()


def validate_email_request(thoughts, tone=None, context=None) -> EmailRequest:
    """Normalize raw form values into an EmailRequest."""
    thoughts = _clean_text(thoughts)
    if not thoughts:
        raise ValidationError("thoughts_required")
    if len(thoughts) > MAX_THOUGHTS_LENGTH:
        raise ValidationError("thoughts_too_long", limit=MAX_THOUGHTS_LENGTH)

    tone = tone.strip().lower() if isinstance(tone, str) and tone.strip() else DEFAULT_TONE
    if tone not in TONE_VALUES:
        raise ValidationError("unknown_tone", tone=tone)

    context = _clean_text(context)
    if len(context) > MAX_CONTEXT_LENGTH:
        raise ValidationError("context_too_long", limit=MAX_CONTEXT_LENGTH)

    return EmailRequest(thoughts=thoughts, tone=tone, context=context or None)


# --- PROMPT ---

def build_email_prompt(request: EmailRequest, locale: str) -> str:
    """Fill the email-writer template for one request."""
    context_block = ""
    if request.context:
        context_block = f"""

Context - I am responding to this email:
"{request.context}"

"""

    return f"""You are an expert email writer. Transform the following raw thoughts into a well-crafted email with a {request.tone} tone.

Raw thoughts: "{request.thoughts}"{context_block}

Instructions:
- Write a complete, professional email body
- Use a {request.tone} tone throughout
- Make it clear, engaging, and well-structured
- Ensure proper email etiquette
- Do not include a subject line

Please respond in {locale} language.

Respond with ONLY the email body content. Do not include any explanations or additional text outside of the email."""


def generate_email(request: EmailRequest, locale: str, completer: Completer) -> str:
    """
    Run one generation through the completer.
    CompletionError propagates to the caller unchanged; a blank reply
    raises UnexpectedResponseError.
    """
    prompt = build_email_prompt(request, locale)
    log_event(
        logging.INFO,
        "email_generate",
        tone=request.tone,
        locale=locale,
        has_context=request.context is not None,
    )
    email = completer.complete(prompt).strip()
    if not email:
        log_event(logging.ERROR, "email_generate_empty", tone=request.tone, locale=locale)
        raise UnexpectedResponseError()
    return email


def translated_tones(t, selected: Optional[str] = None):
    """Tone options with their labels looked up through `t`."""
    return [
        {
            "value": option.value,
            "label": t(option.label_key),
            "description": t(option.description_key),
            "selected": option.value == (selected or DEFAULT_TONE),
        }
        for option in TONE_OPTIONS
    ]
