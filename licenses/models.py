"""
Model registry entry point for the licenses app.
"""
from licenses.infrastructure.models import License  # noqa: F401
