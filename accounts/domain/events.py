"""
Account domain events.
"""

import uuid
from datetime import datetime
from typing import Optional

from core.domain.events import DomainEvent


class UserRegistered(DomainEvent):
    """Event raised when a new account is created."""

    def __init__(self, user_id: uuid.UUID, email: str, occurred_at: Optional[datetime] = None):
        super().__init__(user_id, occurred_at)
        self.user_id = user_id
        self.email = email


class EmailConfirmed(DomainEvent):
    """Event raised when a user confirms their email address."""

    def __init__(self, user_id: uuid.UUID, occurred_at: Optional[datetime] = None):
        super().__init__(user_id, occurred_at)
        self.user_id = user_id


class UserLoggedIn(DomainEvent):
    """Event raised when a session token is issued for valid credentials."""

    def __init__(self, user_id: uuid.UUID, occurred_at: Optional[datetime] = None):
        super().__init__(user_id, occurred_at)
        self.user_id = user_id


class PasswordResetRequested(DomainEvent):
    """Event raised when a reset link is sent to an existing account."""

    def __init__(self, user_id: uuid.UUID, occurred_at: Optional[datetime] = None):
        super().__init__(user_id, occurred_at)
        self.user_id = user_id


class PasswordResetCompleted(DomainEvent):
    """Event raised when a reset token is redeemed."""

    def __init__(self, user_id: uuid.UUID, occurred_at: Optional[datetime] = None):
        super().__init__(user_id, occurred_at)
        self.user_id = user_id


class PasswordChanged(DomainEvent):
    """Event raised when an authenticated user changes their password."""

    def __init__(self, user_id: uuid.UUID, occurred_at: Optional[datetime] = None):
        super().__init__(user_id, occurred_at)
        self.user_id = user_id
