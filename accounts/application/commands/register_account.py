"""
RegisterAccountCommand.

Command to create a new, unconfirmed account.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class RegisterAccountCommand:
    """
    Command to register an account.

    The display name defaults to the local part of the email.
    """

    email: str
    password: str
    display_name: Optional[str] = None
