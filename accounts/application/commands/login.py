"""
LoginCommand.
"""
from dataclasses import dataclass


@dataclass
class LoginCommand:
    """Exchange credentials for a session token."""

    email: str
    password: str
