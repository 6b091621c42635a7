"""
Base API view that authorizes requests through a guard pipeline.
"""

from typing import Optional

from asgiref.sync import async_to_sync
from rest_framework.request import Request
from rest_framework.views import APIView

from accounts.application.guards import GuardPipeline, RequireAdmin, RequireAuthenticated
from accounts.domain.user import User
from api.v1 import providers


class GuardedAPIView(APIView):
    """
    APIView that runs the guard pipeline before any handler method.

    ``require_auth`` resolves the bearer token; ``require_admin`` adds a
    fresh admin role check. The resolved user is kept on the view as
    ``self.user``.
    """

    require_auth = True
    require_admin = False

    user: Optional[User] = None

    def get_guard_pipeline(self) -> GuardPipeline:
        guards = []
        if self.require_auth or self.require_admin:
            guards.append(RequireAuthenticated(providers.authenticate_handler()))
        if self.require_admin:
            guards.append(RequireAdmin(providers.account_repository))
        return GuardPipeline(*guards)

    def initial(self, request: Request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        self.user = async_to_sync(self.get_guard_pipeline().run)(
            request.headers.get("Authorization")
        )
