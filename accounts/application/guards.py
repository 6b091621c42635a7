"""
Authorization guards.

Guards run in a fixed order over a shared context. Each one either
enriches the context or raises, which stops the pipeline; nothing is
read from or written to the request object.

Usage:
    pipeline = GuardPipeline(
        RequireAuthenticated(authenticate_handler),
        RequireAdmin(account_repository),
    )
    user = await pipeline.run(request.headers.get("Authorization"))
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from accounts.application.handlers.session_handlers import AuthenticateHandler
from accounts.domain.user import User
from accounts.ports.account_repository import AccountRepository
from core.domain.exceptions import ForbiddenError, UnauthenticatedError
from core.domain.value_objects import Role


@dataclass
class GuardContext:
    """State threaded through a guard pipeline."""

    authorization: Optional[str]
    user: Optional[User] = None


class Guard(ABC):
    """A single authorization step."""

    @abstractmethod
    async def check(self, context: GuardContext) -> None:
        """Raise to reject the request, or return to let the next guard run."""
        pass


class RequireAuthenticated(Guard):
    """Resolves the bearer token into a user."""

    def __init__(self, authenticate_handler: AuthenticateHandler):
        self.authenticate_handler = authenticate_handler

    async def check(self, context: GuardContext) -> None:
        context.user = await self.authenticate_handler.handle(context.authorization)


class RequireAdmin(Guard):
    """
    Requires the admin role.

    The role is read from the store on every call, so revoking it takes
    effect on the very next request.
    """

    def __init__(self, account_repository: AccountRepository):
        self.account_repository = account_repository

    async def check(self, context: GuardContext) -> None:
        if context.user is None:
            raise UnauthenticatedError()
        if not await self.account_repository.has_role(context.user.id, Role.ADMIN):
            raise ForbiddenError()


class GuardPipeline:
    """Ordered sequence of guards."""

    def __init__(self, *guards: Guard):
        self.guards = guards

    async def run(self, authorization: Optional[str]) -> Optional[User]:
        """
        Run every guard in order.

        Returns:
            The authenticated user, or None for a pipeline with no
            authentication step
        """
        context = GuardContext(authorization=authorization)
        for guard in self.guards:
            await guard.check(context)
        return context.user
