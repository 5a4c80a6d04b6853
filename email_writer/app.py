"""
Email Writer - turns rough notes into a finished email.

Serves a single form page and a small JSON API in front of a completion proxy.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from flask import Flask
from flask_cors import CORS

from email_writer.config import Settings, log_event
from email_writer.routes import web
from email_writer.services.completion import Completer, CompletionClient
from email_writer.services.locale import (
    LocaleSettings,
    Translator,
    load_catalog,
    system_language_preferences,
)


@dataclass
class AppServices:
    """Everything the routes need, built once per app."""
    settings: Settings
    locale: LocaleSettings
    translator: Translator
    completer: Completer


def create_app(
    settings: Optional[Settings] = None,
    completer: Optional[Completer] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Flask:
    """
    Build the Flask app.

    The locale is resolved here, once, from APP_LOCALE or the process
    language settings. Pass `completer` to replace the HTTP client.
    """
    settings = settings or Settings.from_env(environ)

    catalog = load_catalog(settings.locales_dir)
    locale = LocaleSettings.resolve(
        catalog,
        override=settings.app_locale,
        preferences=system_language_preferences(environ),
    )

    if completer is None:
        completer = CompletionClient(api_url=settings.api_url, timeout=settings.api_timeout)

    app = Flask(__name__, template_folder="templates")
    CORS(app)
    app.extensions["email_writer"] = AppServices(
        settings=settings,
        locale=locale,
        translator=Translator(locale),
        completer=completer,
    )
    app.register_blueprint(web)
    return app


def main():
    app = create_app()
    services = app.extensions["email_writer"]
    settings = services.settings

    log_event(
        logging.INFO,
        "server_startup",
        locale=services.locale.locale,
        api_url=settings.api_url,
        port=settings.port,
    )

    print(f"""
    ╔═══════════════════════════════════════════════════╗
    ║              ✉️  EMAIL WRITER                      ║
    ╠═══════════════════════════════════════════════════╣
    ║   Locale:    {services.locale.locale:<37}║
    ║   Backend:   {settings.api_url:<37}║
    ╠═══════════════════════════════════════════════════╣
    ║   Server: http://localhost:{settings.port:<23}║
    ╚═══════════════════════════════════════════════════╝
    """)
    app.run(debug=settings.debug, port=settings.port, threaded=True)


if __name__ == '__main__':
    main()
