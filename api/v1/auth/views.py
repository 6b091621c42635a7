"""
Auth API views.

Registration, email confirmation, login, password reset and change, and
the current user.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response

from accounts.application.commands.confirm_email import ConfirmEmailCommand, ResendConfirmationCommand
from accounts.application.commands.login import LoginCommand
from accounts.application.commands.password_commands import (
    ChangePasswordCommand,
    ForgotPasswordCommand,
    ResetPasswordCommand,
)
from accounts.application.commands.register_account import RegisterAccountCommand
from accounts.application.queries.get_current_user import GetCurrentUserQuery
from api.v1 import providers
from api.v1.auth.serializers import (
    ChangePasswordRequestSerializer,
    EmailRequestSerializer,
    LoginRequestSerializer,
    MessageSerializer,
    RegisterRequestSerializer,
    RegistrationResultSerializer,
    ResetPasswordRequestSerializer,
    SessionSerializer,
    TokenRequestSerializer,
    UserSerializer,
)
from api.views import GuardedAPIView
from core.instrumentation import get_tracer, mark_failed, mark_ok

tracer = get_tracer(__name__)

LOGOUT_MESSAGE = "Logged out"


def _invalid(serializer, span) -> Response:
    mark_failed(span, "validation_failed")
    return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)


class RegisterView(GuardedAPIView):
    """View for account registration."""

    require_auth = False

    @extend_schema(
        operation_id="register",
        summary="Register",
        description=(
            "Create an unconfirmed account and email a confirmation link. "
            "No session token is issued until the email is confirmed."
        ),
        tags=["Auth"],
        request=RegisterRequestSerializer,
        responses={
            201: RegistrationResultSerializer,
            400: {"description": "Validation error"},
            409: {"description": "Email already registered"},
        },
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_register)(request)

    async def _handle_register(self, request: Request) -> Response:
        with tracer.start_as_current_span("register") as span:
            serializer = RegisterRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _invalid(serializer, span)

            data = serializer.validated_data
            result = await providers.register_handler().handle(
                RegisterAccountCommand(
                    email=data["email"],
                    password=data["password"],
                    display_name=data.get("display_name") or None,
                )
            )
            span.set_attribute("user.id", str(result.user_id))
            mark_ok(span)
            return Response(RegistrationResultSerializer(result).data, status=status.HTTP_201_CREATED)


class ConfirmEmailView(GuardedAPIView):
    """View for email confirmation."""

    require_auth = False

    @extend_schema(
        operation_id="confirm_email",
        summary="Confirm email",
        description="Consume a confirmation token and return a session.",
        tags=["Auth"],
        request=TokenRequestSerializer,
        responses={200: SessionSerializer, 400: {"description": "Invalid or expired token"}},
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_confirm)(request)

    async def _handle_confirm(self, request: Request) -> Response:
        with tracer.start_as_current_span("confirm_email") as span:
            serializer = TokenRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _invalid(serializer, span)

            session = await providers.confirm_email_handler().handle(
                ConfirmEmailCommand(token=serializer.validated_data["token"])
            )
            span.set_attribute("user.id", str(session.user.id))
            return Response(SessionSerializer(session).data)


class ResendConfirmationView(GuardedAPIView):
    """View for resending the confirmation email."""

    require_auth = False

    @extend_schema(
        operation_id="resend_confirmation",
        summary="Resend confirmation",
        tags=["Auth"],
        request=EmailRequestSerializer,
        responses={
            200: MessageSerializer,
            404: {"description": "No account for this email"},
            409: {"description": "Email already confirmed"},
            503: {"description": "Mail delivery failed"},
        },
    )
    def post(self, request: Request) -> Response:
        serializer = EmailRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        result = async_to_sync(providers.resend_confirmation_handler().handle)(
            ResendConfirmationCommand(email=serializer.validated_data["email"])
        )
        return Response(MessageSerializer(result).data)


class LoginView(GuardedAPIView):
    """View for login."""

    require_auth = False

    @extend_schema(
        operation_id="login",
        summary="Login",
        tags=["Auth"],
        request=LoginRequestSerializer,
        responses={
            200: SessionSerializer,
            401: {"description": "Invalid email or password"},
            403: {"description": "Email not confirmed"},
        },
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_login)(request)

    async def _handle_login(self, request: Request) -> Response:
        with tracer.start_as_current_span("login") as span:
            serializer = LoginRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _invalid(serializer, span)

            data = serializer.validated_data
            session = await providers.login_handler().handle(
                LoginCommand(email=data["email"], password=data["password"])
            )
            span.set_attribute("user.id", str(session.user.id))
            mark_ok(span)
            return Response(SessionSerializer(session).data)


class ForgotPasswordView(GuardedAPIView):
    """View for requesting a password reset link."""

    require_auth = False

    @extend_schema(
        operation_id="forgot_password",
        summary="Forgot password",
        description="Always answers with the same message whether or not the account exists.",
        tags=["Auth"],
        request=EmailRequestSerializer,
        responses={200: MessageSerializer, 503: {"description": "Mail delivery failed"}},
    )
    def post(self, request: Request) -> Response:
        serializer = EmailRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        result = async_to_sync(providers.forgot_password_handler().handle)(
            ForgotPasswordCommand(email=serializer.validated_data["email"])
        )
        return Response(MessageSerializer(result).data)


class ResetPasswordView(GuardedAPIView):
    """View for completing a password reset."""

    require_auth = False

    @extend_schema(
        operation_id="reset_password",
        summary="Reset password",
        description="Set a new password with an emailed reset token and sign in.",
        tags=["Auth"],
        request=ResetPasswordRequestSerializer,
        responses={200: SessionSerializer, 400: {"description": "Invalid or expired token"}},
    )
    def post(self, request: Request) -> Response:
        serializer = ResetPasswordRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        session = async_to_sync(providers.reset_password_handler().handle)(
            ResetPasswordCommand(token=data["token"], new_password=data["new_password"])
        )
        return Response(SessionSerializer(session).data)


class ChangePasswordView(GuardedAPIView):
    """View for changing the password of the signed-in user."""

    @extend_schema(
        operation_id="change_password",
        summary="Change password",
        tags=["Auth"],
        request=ChangePasswordRequestSerializer,
        responses={200: MessageSerializer, 401: {"description": "Current password is incorrect"}},
    )
    def post(self, request: Request) -> Response:
        serializer = ChangePasswordRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        result = async_to_sync(providers.change_password_handler().handle)(
            ChangePasswordCommand(
                user_id=self.user.id,
                current_password=data["current_password"],
                new_password=data["new_password"],
            )
        )
        return Response(MessageSerializer(result).data)


class MeView(GuardedAPIView):
    """View for the signed-in user."""

    @extend_schema(
        operation_id="me",
        summary="Current user",
        tags=["Auth"],
        responses={200: UserSerializer, 401: {"description": "Unauthenticated"}},
    )
    def get(self, request: Request) -> Response:
        user = async_to_sync(providers.current_user_handler().handle)(
            GetCurrentUserQuery(user_id=self.user.id)
        )
        return Response(UserSerializer(user).data)


class LogoutView(GuardedAPIView):
    """Sessions are stateless; logout only acknowledges."""

    require_auth = False

    @extend_schema(
        operation_id="logout",
        summary="Logout",
        tags=["Auth"],
        request=None,
        responses={200: MessageSerializer},
    )
    def post(self, request: Request) -> Response:
        return Response({"message": LOGOUT_MESSAGE})
