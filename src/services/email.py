"""
Transactional email: SMTP delivery and the notification templates.
"""

import asyncio
import logging
import smtplib
import ssl
from email.errors import MessageError
from email.mime.text import MIMEText
from html import escape

from core.config import PROVIDER_TIMEOUT_SECONDS
from core.errors import MailDeliveryFailed

logger = logging.getLogger(__name__)

SIGNATURE_TEAM = "Het WoonExpertVlaanderen team"


# =============================================================================
# TEMPLATES
# =============================================================================


def format_request_type(request_type: str) -> str:
    """Render a '/'-joined multi-type value as 'a + b'."""
    parts = [part.strip() for part in request_type.split("/")]
    return " + ".join(part for part in parts if part)


def render_new_request(request_type: str, link: str) -> str:
    """Notice that a new inspection request came in."""
    link_attr = escape(link, quote=True)
    return (
        "<p>Er is een nieuwe keuringsaanvraag binnengekomen voor "
        f"{escape(format_request_type(request_type))}</p>"
        "<p>Bekijk de details van deze keuring via de volgende link: "
        f'<a href="{link_attr}">{escape(link)}</a></p>'
    )


def render_certificate_available(request_type: str, location: str, klant: str, link: str) -> str:
    """Notice that a certificate can be downloaded."""
    link_attr = escape(link, quote=True)
    return (
        "<p>Beste, </p>"
        "<p>Er is een attest beschikbaar voor de volgende keuring</p>"
        "<ul>"
        f"<li><b>Type:</b> {escape(request_type)}</li>"
        f"<li><b>Adres:</b> {escape(location)}</li>"
        f"<li><b>Klant:</b> {escape(klant)}</li>"
        "</ul>"
        "<p>Klik op de onderstaande link om het attest te raadplegen:</p>"
        f'<a href="{link_attr}">{escape(link)}</a>'
        "<p>Indien er een attest ontbreekt, zal dit spoedig beschikbaar worden gesteld.</p>"
        "<p>Met vriendelijke groet,</p>"
        f"<p>{SIGNATURE_TEAM}</p>"
    )


def render_visit_date_changed(
    visit_date: str, request_types: list[str], location: str, klant: str
) -> str:
    """Notice that an inspection visit moved to a new date."""
    types = " & ".join(escape(request_type) for request_type in request_types)
    return (
        "<p>Beste, </p>"
        f"<p>De volgende keuring in ons systeem is gepland voor <b>{escape(visit_date)}</b>. "
        "<ul>"
        f"<li>Type: {types}</li>"
        f"<li>Locatie: {escape(location)}</li>"
        f"<li>Klant: {escape(klant)}</li>"
        "</ul>"
        "<p>Neem contact met me op als u vragen hebt over de planning.</p>"
    )


# =============================================================================
# DELIVERY
# =============================================================================


class Mailer:
    """Sends HTML mail through an implicit-TLS SMTP server."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        from_address: str,
        *,
        timeout: float = PROVIDER_TIMEOUT_SECONDS,
    ):
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self.from_address = from_address
        self._timeout = timeout

    def build_message(self, to: str, subject: str, html: str) -> MIMEText:
        message = MIMEText(html, "html", "utf-8")
        message["From"] = self.from_address
        message["To"] = to
        message["Subject"] = subject
        return message

    async def send(self, to: str, subject: str, html: str) -> None:
        """
        Deliver one message. Awaited to completion, never retried.

        Raises:
            MailDeliveryFailed: the server refused the message or was unreachable
        """
        message = self.build_message(to, subject, html)
        # smtplib is blocking; keep it off the event loop
        await asyncio.to_thread(self._send_sync, message)
        logger.info("Sent '%s' to %s", subject, to)

    def _send_sync(self, message: MIMEText) -> None:
        context = ssl.create_default_context()
        try:
            with smtplib.SMTP_SSL(
                self._host, self._port, context=context, timeout=self._timeout
            ) as server:
                if self._username:
                    server.login(self._username, self._password)
                server.send_message(message)
        except (smtplib.SMTPException, MessageError, OSError) as e:
            logger.error("SMTP delivery to %s failed: %s", message["To"], e)
            raise MailDeliveryFailed(str(e) or type(e).__name__) from e
