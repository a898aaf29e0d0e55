"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, current_app

from pos_backoffice.api.deps import (
    auth_service,
    current_access,
    json_response,
    load_body,
    message_response,
    require_auth,
    timing,
)
from pos_backoffice.core.extensions import limiter
from pos_backoffice.schemas import (
    AcceptInvitationSchema,
    AuthResultSchema,
    ChangePasswordSchema,
    ForgotPasswordSchema,
    LoginSchema,
    RefreshTokenSchema,
    RegisterSchema,
    ResetPasswordSchema,
    TokenPairSchema,
    TokenSchema,
)
from pos_backoffice.services.auth.dto import (
    AcceptInvitationIn,
    ChangePasswordIn,
    ForgotPasswordIn,
    LoginIn,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    ResetPasswordIn,
    VerifyEmailIn,
)

bp = Blueprint("auth", __name__, url_prefix="/auth")

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshTokenSchema()
token_schema = TokenSchema()
forgot_schema = ForgotPasswordSchema()
reset_schema = ResetPasswordSchema()
change_schema = ChangePasswordSchema()
accept_schema = AcceptInvitationSchema()
auth_result_schema = AuthResultSchema()
token_pair_schema = TokenPairSchema()


def _auth_rate_limit() -> str:
    return str(current_app.config.get("AUTH_RATE_LIMIT", "20 per 2 seconds"))


# Shared bucket: the limit applies to the public auth routes taken together
public_limit = limiter.shared_limit(_auth_rate_limit, scope="auth-public")


@bp.post("/register")
@public_limit
@timing
def register():
    """Create a tenant with its owner and return ``{user, tokens}``."""

    payload = load_body(register_schema)
    result = auth_service().register(RegisterIn(**payload))
    return json_response(auth_result_schema.dump(result), status=201)


@bp.post("/login")
@public_limit
@timing
def login():
    """Authenticate credentials and issue a token pair."""

    payload = load_body(login_schema)
    result = auth_service().login(LoginIn(**payload))
    return json_response(auth_result_schema.dump(result))


@bp.post("/refresh")
@public_limit
@timing
def refresh():
    """Rotate a refresh token."""

    payload = load_body(refresh_schema)
    tokens = auth_service().refresh(RefreshIn(**payload))
    return json_response(token_pair_schema.dump(tokens))


@bp.post("/verify-email")
@public_limit
@timing
def verify_email():
    payload = load_body(token_schema)
    auth_service().verify_email(VerifyEmailIn(**payload))
    return message_response("email verified successfully")


@bp.post("/forgot-password")
@public_limit
@timing
def forgot_password():
    """Always answer the same way, whether or not the email is known."""

    payload = load_body(forgot_schema)
    auth_service().forgot_password(ForgotPasswordIn(**payload))
    return message_response("if the email exists, a reset link has been sent")


@bp.post("/reset-password")
@public_limit
@timing
def reset_password():
    payload = load_body(reset_schema)
    auth_service().reset_password(ResetPasswordIn(**payload))
    return message_response("password reset successfully")


@bp.post("/accept-invitation")
@public_limit
@timing
def accept_invitation():
    """Redeem an invitation token and sign the new user in."""

    payload = load_body(accept_schema)
    result = auth_service().accept_invitation(AcceptInvitationIn(**payload))
    return json_response(auth_result_schema.dump(result), status=201)


@bp.post("/logout")
@require_auth
@timing
def logout():
    payload = load_body(refresh_schema)
    auth_service().logout(LogoutIn(**payload))
    return message_response("logged out successfully")


@bp.put("/change-password")
@require_auth
@timing
def change_password():
    """Change the caller's password; existing sessions are kept."""

    payload = load_body(change_schema)
    auth_service().change_password(
        ChangePasswordIn(user_id=current_access().user_id, **payload)
    )
    return message_response("password changed successfully")
