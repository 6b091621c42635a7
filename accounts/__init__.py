"""
Accounts module - user accounts and their security lifecycle.

This module handles:
- User and Profile entities
- Registration and email confirmation
- Credential verification and signed session tokens
- Password reset and change
- Role assignment and the authorization guards
"""
