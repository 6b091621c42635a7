"""
Database utilities.
"""

import functools
import logging
from typing import Callable, TypeVar

from django.db import InterfaceError, OperationalError

from core.domain.exceptions import ServiceUnavailableError

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable)


def translate_store_errors(func: F) -> F:
    """
    Convert connectivity failures raised by the database driver into
    ServiceUnavailableError.

    Apply below ``@sync_to_async`` so the translation runs in the worker
    thread that talks to the database.

    Usage:
        @sync_to_async
        @translate_store_errors
        def find_by_id(self, user_id):
            ...
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (OperationalError, InterfaceError) as e:
            logger.error("Persistent store unavailable: %s", e, exc_info=True)
            raise ServiceUnavailableError("Persistent store is unavailable") from e

    return wrapper  # type: ignore[return-value]
