"""
Integration tests for the Django mail adapter.
"""

import smtplib

import pytest
from asgiref.sync import async_to_sync
from django.core import mail
from django.core.mail import EmailMultiAlternatives

from accounts.infrastructure.mailer import DjangoMailer
from core.domain.exceptions import ServiceUnavailableError
from core.domain.value_objects import MailKind
from core.metrics import emails_sent_total

PARAMS = {"username": "alice", "link": "http://frontend.test/confirm-email?token=abc"}


@pytest.mark.integration
class TestDjangoMailer:
    """Rendering and delivery failures of DjangoMailer."""

    def test_sends_text_and_html(self):
        async_to_sync(DjangoMailer(from_email="store@example.com").send)(
            "alice@example.com", MailKind.CONFIRMATION, PARAMS
        )

        assert len(mail.outbox) == 1
        message = mail.outbox[0]
        assert message.to == ["alice@example.com"]
        assert message.from_email == "store@example.com"
        assert message.subject == "Confirm your email address"
        assert PARAMS["link"] in message.body
        assert message.alternatives[0][1] == "text/html"

    def test_smtp_failure_is_unavailable(self, monkeypatch):
        def refuse(self, fail_silently=False):
            raise smtplib.SMTPServerDisconnected("Connection unexpectedly closed")

        monkeypatch.setattr(EmailMultiAlternatives, "send", refuse)
        failed = emails_sent_total.labels(kind=MailKind.PASSWORD_RESET.value, outcome="failed")
        before = failed._value.get()

        with pytest.raises(ServiceUnavailableError):
            async_to_sync(DjangoMailer().send)("alice@example.com", MailKind.PASSWORD_RESET, PARAMS)

        assert mail.outbox == []
        assert failed._value.get() == before + 1
