"""
Mailer port (interface).
"""
from abc import ABC, abstractmethod
from typing import Mapping

from core.domain.value_objects import MailKind


class Mailer(ABC):
    """Outbound transactional email."""

    @abstractmethod
    async def send(self, to: str, kind: MailKind, params: Mapping[str, str]) -> None:
        """
        Send one templated email.

        Args:
            to: Recipient address
            kind: Which template to render
            params: Template parameters (``username`` and ``link``)

        Raises:
            ServiceUnavailableError: If the message could not be handed to the relay
        """
        pass
