"""Transactional Email — console, SendGrid and Mailjet providers with jinja2 templates.

Invariants:
    - Exactly one provider active per process, chosen from settings
    - A provider missing credentials is replaced by the console provider at build time
    - Provider HTTP failures raise EmailDeliveryError; callers decide whether it is fatal
    - Template variables are HTML-escaped (autoescape)

Design Decisions:
    - httpx against the providers' REST APIs over vendor SDKs: one HTTP client for
      both providers, trivially mockable
    - Templates inline in a DictLoader: three short emails do not justify a template
      directory that packaging has to ship
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Protocol

import httpx
from jinja2 import DictLoader, Environment, select_autoescape

from cresp.config import Settings, get_settings
from cresp.core.errors import EmailDeliveryError

logger = logging.getLogger(__name__)

SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"
MAILJET_URL = "https://api.mailjet.com/v3.1/send"
HTTP_TIMEOUT_SECONDS = 10.0

_LAYOUT = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>{% block title %}{% endblock %}</title></head>
<body style="margin:0;padding:0;font-family:Arial,sans-serif;background-color:#f5f5f5;">
  <table width="100%" cellpadding="0" cellspacing="0" style="padding:20px 0;">
    <tr><td align="center">
      <table width="600" cellpadding="0" cellspacing="0" style="background:#ffffff;border-radius:8px;">
        <tr><td style="background:#667eea;padding:40px 20px;text-align:center;">
          <h1 style="margin:0;color:#ffffff;font-size:32px;">Cresp</h1>
        </td></tr>
        <tr><td style="padding:40px 30px;color:#333333;font-size:16px;line-height:1.6;">
          {% block body %}{% endblock %}
        </td></tr>
      </table>
    </td></tr>
  </table>
</body>
</html>
"""

_TEMPLATES = {
    "layout.html": _LAYOUT,
    "verify_email.html": """{% extends "layout.html" %}
{% block title %}Verify Your Email{% endblock %}
{% block body %}
<h2>Hi {{ username }}!</h2>
<p>Thanks for signing up for Cresp! We're excited to have you join our community of creative professionals.</p>
<p>To get started, please verify your email address:</p>
<p><a href="{{ url }}" style="background:#667eea;color:#ffffff;padding:14px 28px;border-radius:6px;text-decoration:none;">Verify Email Address</a></p>
<p>This link expires in 24 hours. If you didn't create an account, you can ignore this email.</p>
{% endblock %}
""",
    "verify_email.txt": """Hi {{ username }}!

Thanks for signing up for Cresp. Verify your email address here:
{{ url }}

This link expires in 24 hours.
""",
    "reset_password.html": """{% extends "layout.html" %}
{% block title %}Reset Your Password{% endblock %}
{% block body %}
<h2>Hi {{ username }},</h2>
<p>We received a request to reset your password.</p>
<p><a href="{{ url }}" style="background:#667eea;color:#ffffff;padding:14px 28px;border-radius:6px;text-decoration:none;">Reset Password</a></p>
<p>This link expires in 1 hour. If you didn't request a reset, you can ignore this email.</p>
{% endblock %}
""",
    "reset_password.txt": """Hi {{ username }},

Reset your Cresp password here:
{{ url }}

This link expires in 1 hour.
""",
    "welcome.html": """{% extends "layout.html" %}
{% block title %}Welcome to Cresp{% endblock %}
{% block body %}
<h2>Welcome aboard, {{ username }}!</h2>
<p>Your email is verified. Log in to set up your profile and share your first project.</p>
<p><a href="{{ url }}" style="background:#667eea;color:#ffffff;padding:14px 28px;border-radius:6px;text-decoration:none;">Log In</a></p>
{% endblock %}
""",
    "welcome.txt": """Welcome aboard, {{ username }}!

Your email is verified. Log in at {{ url }}
""",
}

_env = Environment(
    loader=DictLoader(_TEMPLATES),
    autoescape=select_autoescape(enabled_extensions=("html",), default_for_string=True),
)


def render(template: str, **context) -> str:
    return _env.get_template(template).render(**context)


@dataclass(frozen=True)
class EmailMessage:
    to_email: str
    to_name: str | None
    subject: str
    html: str
    text: str | None = None


@dataclass(frozen=True)
class EmailResult:
    success: bool
    message_id: str | None = None


class EmailProvider(Protocol):
    """Contract for outbound email transports."""
    name: str

    @property
    def is_configured(self) -> bool: ...

    async def send(self, message: EmailMessage) -> EmailResult: ...


class ConsoleProvider:
    """Development transport — writes the message to the log instead of sending it.

    Keeps no copy of sent messages: it is the process-wide fallback provider and
    messages carry live verification and reset links.
    """

    name = "console"

    def __init__(self):
        self._count = 0

    @property
    def is_configured(self) -> bool:
        return True

    async def send(self, message: EmailMessage) -> EmailResult:
        self._count += 1
        logger.info(
            f"Email to {message.to_email}: {message.subject}\n{message.text or ''}",
            extra={"provider": self.name},
        )
        return EmailResult(success=True, message_id=f"console-{self._count}")


class SendGridProvider:
    name = "sendgrid"

    def __init__(self, api_key: str, from_email: str, from_name: str):
        self._api_key = api_key
        self._from = {"email": from_email, "name": from_name}

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key and self._api_key.startswith("SG."))

    async def send(self, message: EmailMessage) -> EmailResult:
        to = {"email": message.to_email}
        if message.to_name:
            to["name"] = message.to_name
        content = []
        if message.text:
            content.append({"type": "text/plain", "value": message.text})
        content.append({"type": "text/html", "value": message.html})
        payload = {
            "personalizations": [{"to": [to]}],
            "from": self._from,
            "subject": message.subject,
            "content": content,
        }
        try:
            async with httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS) as client:
                response = await client.post(
                    SENDGRID_URL, json=payload,
                    headers={"Authorization": f"Bearer {self._api_key}"},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise EmailDeliveryError(self.name, str(e))
        return EmailResult(success=True, message_id=response.headers.get("x-message-id"))


class MailjetProvider:
    name = "mailjet"

    def __init__(self, api_key: str, secret_key: str, from_email: str, from_name: str):
        self._auth = (api_key, secret_key)
        self._from = {"Email": from_email, "Name": from_name}

    @property
    def is_configured(self) -> bool:
        return all(self._auth)

    async def send(self, message: EmailMessage) -> EmailResult:
        to = {"Email": message.to_email}
        if message.to_name:
            to["Name"] = message.to_name
        body = {
            "From": self._from,
            "To": [to],
            "Subject": message.subject,
            "HTMLPart": message.html,
        }
        if message.text:
            body["TextPart"] = message.text
        try:
            async with httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS) as client:
                response = await client.post(
                    MAILJET_URL, json={"Messages": [body]}, auth=self._auth,
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise EmailDeliveryError(self.name, str(e))
        try:
            data = response.json()
        except ValueError as e:
            raise EmailDeliveryError(self.name, f"Unreadable response: {e}")
        messages = data.get("Messages") or [{}]
        recipients = messages[0].get("To") or [{}]
        return EmailResult(success=True, message_id=str(recipients[0].get("MessageID", "")) or None)


class EmailService:
    """Renders the transactional templates and hands them to the active provider."""

    def __init__(self, provider: EmailProvider, app_url: str):
        self.provider = provider
        self.app_url = app_url.rstrip("/")

    async def send_verification_email(self, email: str, username: str, token: str) -> EmailResult:
        url = f"{self.app_url}/verify-email?token={token}"
        return await self.provider.send(EmailMessage(
            to_email=email, to_name=username,
            subject="Verify your email address - Cresp",
            html=render("verify_email.html", username=username, url=url),
            text=render("verify_email.txt", username=username, url=url),
        ))

    async def send_password_reset_email(self, email: str, username: str, token: str) -> EmailResult:
        url = f"{self.app_url}/reset-password?token={token}"
        return await self.provider.send(EmailMessage(
            to_email=email, to_name=username,
            subject="Reset your password - Cresp",
            html=render("reset_password.html", username=username, url=url),
            text=render("reset_password.txt", username=username, url=url),
        ))

    async def send_welcome_email(self, email: str, username: str) -> EmailResult:
        url = f"{self.app_url}/login"
        return await self.provider.send(EmailMessage(
            to_email=email, to_name=username,
            subject="Welcome to Cresp! 🎉",
            html=render("welcome.html", username=username, url=url),
            text=render("welcome.txt", username=username, url=url),
        ))


def build_email_provider(settings: Settings) -> EmailProvider:
    provider: EmailProvider
    if settings.email_provider == "sendgrid":
        provider = SendGridProvider(settings.sendgrid_api_key, settings.from_email, settings.from_name)
    elif settings.email_provider == "mailjet":
        provider = MailjetProvider(
            settings.mailjet_api_key, settings.mailjet_secret_key,
            settings.from_email, settings.from_name,
        )
    else:
        return ConsoleProvider()
    if not provider.is_configured:
        logger.warning(
            f"{provider.name} not configured, falling back to console",
            extra={"provider": provider.name},
        )
        return ConsoleProvider()
    return provider


@lru_cache
def _default_email_service() -> EmailService:
    settings = get_settings()
    return EmailService(build_email_provider(settings), settings.app_url)


def get_email_service() -> EmailService:
    """FastAPI dependency for the configured email service."""
    return _default_email_service()
