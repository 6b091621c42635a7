"""
Licenses module - license key and License management.

This module handles:
- License entity and domain logic
- License key generation
- License lifecycle (issue, activate, bind HWID, update, deactivate, release, delete)
- License status evaluation
"""
