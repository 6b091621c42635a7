"""
URL configuration for auth API endpoints.
"""

from django.urls import path

from api.v1.auth import views

urlpatterns = [
    path("register", views.RegisterView.as_view(), name="register"),
    path("confirm-email", views.ConfirmEmailView.as_view(), name="confirm-email"),
    path(
        "resend-confirmation",
        views.ResendConfirmationView.as_view(),
        name="resend-confirmation",
    ),
    path("login", views.LoginView.as_view(), name="login"),
    path("forgot-password", views.ForgotPasswordView.as_view(), name="forgot-password"),
    path("reset-password", views.ResetPasswordView.as_view(), name="reset-password"),
    path("change-password", views.ChangePasswordView.as_view(), name="change-password"),
    path("me", views.MeView.as_view(), name="me"),
    path("logout", views.LogoutView.as_view(), name="logout"),
]
