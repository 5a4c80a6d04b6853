"""
Flask routes for the email writer: the form page and its JSON API.
"""

import logging

from flask import Blueprint, current_app, request, jsonify, render_template

from email_writer.config import log_event, MAX_THOUGHTS_LENGTH, MAX_CONTEXT_LENGTH
from email_writer.services.completion import CompletionError, BackendUnavailableError
from email_writer.services.prompt import (
    DEFAULT_TONE,
    ValidationError,
    validate_email_request,
    generate_email,
    translated_tones,
)

# Create blueprint
web = Blueprint('web', __name__)


def _services():
    return current_app.extensions["email_writer"]


# --- PAGE ROUTES ---

@web.route('/', methods=['GET', 'POST'])
def index():
    """Serve the form; on POST, generate and show the email."""
    services = _services()
    t = services.translator.t
    form = {"thoughts": "", "tone": DEFAULT_TONE, "context": ""}
    email = ""
    error = ""

    if request.method == 'POST':
        form.update(
            thoughts=request.form.get('thoughts', ''),
            tone=request.form.get('tone', DEFAULT_TONE),
            context=request.form.get('context', ''),
        )
        try:
            email_request = validate_email_request(form["thoughts"], form["tone"], form["context"])
            email = generate_email(email_request, services.locale.locale, services.completer)
        except ValidationError as e:
            log_event(logging.WARNING, "form_invalid", reason=e.key)
            error = t(e.key, **e.params)
        except CompletionError as e:
            log_event(logging.ERROR, "form_generate_error", error=str(e))
            error = str(e) or t("generic_error")

    return render_template(
        'index.html',
        t=t,
        locale=services.locale.locale,
        tones=translated_tones(t, form["tone"]),
        form=form,
        email=email,
        error=error,
        max_thoughts=MAX_THOUGHTS_LENGTH,
        max_context=MAX_CONTEXT_LENGTH,
    )


@web.route('/health')
def health():
    """Health check endpoint."""
    services = _services()
    return jsonify({
        "status": "ok",
        "locale": services.locale.locale,
        "api_url": services.settings.api_url,
    })


# --- API ROUTES ---

@web.route('/api/config')
def get_config():
    """Resolved locale, tone choices and input limits for API clients."""
    services = _services()
    return jsonify({
        "locale": services.locale.locale,
        "locales": sorted(services.locale.catalog),
        "tones": translated_tones(services.translator.t),
        "default_tone": DEFAULT_TONE,
        "max_thoughts_length": MAX_THOUGHTS_LENGTH,
        "max_context_length": MAX_CONTEXT_LENGTH,
    })


@web.route('/api/generate-email', methods=['POST'])
def api_generate_email():
    """Generate an email from JSON input."""
    services = _services()
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    try:
        email_request = validate_email_request(data.get('thoughts'), data.get('tone'), data.get('context'))
    except ValidationError as e:
        log_event(logging.WARNING, "api_invalid", reason=e.key)
        return jsonify({"error": services.translator.t(e.key, **e.params)}), 400

    log_event(logging.INFO, "api_generate_email", chars=len(email_request.thoughts), tone=email_request.tone)

    try:
        email = generate_email(email_request, services.locale.locale, services.completer)
    except BackendUnavailableError as e:
        return jsonify({"error": str(e)}), 503
    except CompletionError as e:
        log_event(logging.ERROR, "api_generate_error", error=str(e))
        return jsonify({"error": str(e)}), 502

    return jsonify({
        "email": email,
        "locale": services.locale.locale,
        "tone": email_request.tone,
    })
