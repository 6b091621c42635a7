"""
Mailer adapter backed by Django's email framework.
"""
import logging
import smtplib
from typing import Mapping, Optional

from asgiref.sync import sync_to_async
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

from accounts.ports.mailer import Mailer
from core.domain.exceptions import ServiceUnavailableError
from core.domain.value_objects import MailKind
from core.metrics import emails_sent_total

logger = logging.getLogger(__name__)


class DjangoMailer(Mailer):
    """
    Renders ``accounts/email/<kind>_subject.txt``, ``<kind>.txt`` and
    ``<kind>.html`` and sends them through the configured EMAIL_BACKEND.
    """

    def __init__(self, from_email: Optional[str] = None):
        self._from_email = from_email

    async def send(self, to: str, kind: MailKind, params: Mapping[str, str]) -> None:
        await sync_to_async(self._send)(to, kind, dict(params))

    def _send(self, to: str, kind: MailKind, params: dict) -> None:
        template = f"accounts/email/{kind.value}"
        subject = "".join(render_to_string(f"{template}_subject.txt", params).splitlines())
        text_body = render_to_string(f"{template}.txt", params)
        html_body = render_to_string(f"{template}.html", params)

        message = EmailMultiAlternatives(
            subject=subject,
            body=text_body,
            from_email=self._from_email or settings.DEFAULT_FROM_EMAIL,
            to=[to],
        )
        message.attach_alternative(html_body, "text/html")

        try:
            message.send(fail_silently=False)
        except (smtplib.SMTPException, OSError) as e:
            emails_sent_total.labels(kind=kind.value, outcome="failed").inc()
            logger.error("Failed to send %s email: %s", kind.value, e, extra={"mail_kind": kind.value})
            raise ServiceUnavailableError("Email delivery is unavailable") from e

        emails_sent_total.labels(kind=kind.value, outcome="sent").inc()
        logger.info("Sent %s email", kind.value, extra={"mail_kind": kind.value})
