"""ZeptoMail implementation of EmailProvider.

HTML bodies come from the Jinja2 templates in the templates/ directory
next to this module; every message also carries a plain-text body.
Rendering and delivery problems are logged and reported as False, never
raised.
"""

import os
from typing import Optional

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from config import EmailSettings
from infrastructure.http_client import HttpClient
from shared.logging import get_logger

log = get_logger(__name__)

_ZEPTO_API_URL = "https://api.zeptomail.com/v1.1/email"
_AUTH_PREFIX = "Zoho-enczapikey "
_DEFAULT_TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")


def _authorization(token: str) -> str:
    # Accept tokens pasted either with or without the scheme prefix
    return token if token.startswith(_AUTH_PREFIX) else _AUTH_PREFIX + token


class ZeptoMailProvider:
    def __init__(
        self,
        settings: EmailSettings,
        http_client: HttpClient,
        app_name: str = "Restaurant Reservations",
        app_url: str = "http://localhost:8000",
        template_dir: str = _DEFAULT_TEMPLATE_DIR,
    ) -> None:
        self._settings = settings
        self._http = http_client
        self._app_name = app_name
        self._app_url = app_url
        self._templates = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html"]),
        )

    def _render(self, template_name: str, **context) -> str:
        template = self._templates.get_template(template_name)
        return template.render(app_name=self._app_name, app_url=self._app_url, **context)

    def _payload(
        self, to_email: str, to_name: Optional[str], subject: str, html: str, text: str
    ) -> dict:
        return {
            "from": {
                "address": self._settings.zepto_from_email,
                "name": self._settings.zepto_from_name,
            },
            "to": [{"email_address": {"address": to_email, "name": to_name or to_email}}],
            "subject": subject,
            "htmlbody": html,
            "textbody": text,
        }

    async def _deliver(
        self,
        to_email: str,
        to_name: str,
        subject: str,
        template_name: str,
        context: dict,
        text: str,
    ) -> bool:
        if not self._settings.zepto_api_token:
            log.error("email_not_sent", to_email=to_email, reason="token_not_configured")
            return False

        try:
            html = self._render(template_name, **context)
        except TemplateError as e:
            log.error(
                "email_render_failed",
                to_email=to_email,
                template=template_name,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False
        payload = self._payload(to_email, to_name, subject, html, text)

        try:
            response = await self._http.post_json(
                _ZEPTO_API_URL,
                payload,
                headers={"Authorization": _authorization(self._settings.zepto_api_token)},
            )
        except Exception as e:
            log.error(
                "email_send_error",
                to_email=to_email,
                subject=subject,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        if 200 <= response.status_code < 300:
            log.info("email_sent", to_email=to_email, subject=subject)
            return True
        log.error(
            "email_rejected",
            to_email=to_email,
            subject=subject,
            status_code=response.status_code,
            response=response.text[:200],
        )
        return False

    async def send_verification_email(
        self, email: str, name: str, otp_code: str, expires_in_minutes: int
    ) -> bool:
        subject = f"Your verification code - {self._app_name}"
        text = (
            f"Hello {name},\n\n"
            f"Your {self._app_name} verification code is: {otp_code}\n"
            f"It expires in {expires_in_minutes} minutes.\n"
        )
        context = {
            "name": name,
            "otp_code": otp_code,
            "expires_in_minutes": expires_in_minutes,
        }
        return await self._deliver(email, name, subject, "verification.html", context, text)

    async def send_welcome_email(self, email: str, name: str) -> bool:
        subject = f"Welcome to {self._app_name}!"
        text = (
            f"Welcome, {name}!\n\n"
            f"Your email is verified. Book a table at {self._app_url}\n"
        )
        return await self._deliver(email, name, subject, "welcome.html", {"name": name}, text)
