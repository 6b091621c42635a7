"""
Builders for the links embedded in transactional emails.
"""
from urllib.parse import urlencode


def confirmation_link(frontend_url: str, raw_token: str) -> str:
    """Link to the front-end page that redeems a confirmation token."""
    return f"{frontend_url.rstrip('/')}/confirm-email?{urlencode({'token': raw_token})}"


def password_reset_link(frontend_url: str, raw_token: str) -> str:
    """Link to the front-end page that redeems a reset token."""
    return f"{frontend_url.rstrip('/')}/reset-password?{urlencode({'token': raw_token})}"
