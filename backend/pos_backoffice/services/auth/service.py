# pos_backoffice/services/auth/service.py
from __future__ import annotations

import logging
import re
import uuid
from typing import Any

from sqlalchemy.exc import IntegrityError

from pos_backoffice.infra.security.token_hasher import generate_token, hash_token
from pos_backoffice.models import (
    SYSTEM_ADMIN_DESCRIPTION,
    SYSTEM_ADMIN_ROLE,
    InvitationStatus,
    Role,
    Store,
    Tenant,
    User,
)
from pos_backoffice.models.base import utcnow
from pos_backoffice.models.user import normalize_email
from pos_backoffice.services._shared.base import BaseService
from pos_backoffice.services._shared.errors import (
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
    violates,
)
from pos_backoffice.services._shared.ports import (
    Notifier,
    PasswordHasher,
    RefreshTokenStore,
    TokenProvider,
)
from pos_backoffice.services.auth.dto import (
    AcceptInvitationIn,
    AuthResultOut,
    AuthTokenConfig,
    ChangePasswordIn,
    ForgotPasswordIn,
    LoginIn,
    LogoutIn,
    MeOut,
    RefreshIn,
    RegisterIn,
    ResetPasswordIn,
    RoleRefOut,
    StoreRefOut,
    TokenPairOut,
    UserOut,
    VerifyEmailIn,
)
from pos_backoffice.services.auth.refresh_tokens import RefreshTokenManager
from pos_backoffice.services.authorization.service import collect_permissions

log = logging.getLogger(__name__)

MSG_TENANT_EXISTS = "a tenant with a similar name already exists"
MSG_EMAIL_EXISTS = "a user with this email already exists"
MSG_BAD_CREDENTIALS = "invalid email or password"
MSG_DEACTIVATED = "account is deactivated"
MSG_BAD_CURRENT_PASSWORD = "current password is incorrect"

_SLUG_DROP = re.compile(r"[^a-z0-9-]")


def slugify(name: str) -> str:
    """
    Derive a URL-safe tenant slug.

    Lower-cases, turns spaces into ``-`` and drops every character outside
    ``[a-z0-9-]``: ``"Café Central 2"`` becomes ``"caf-central-2"``.
    """
    return _SLUG_DROP.sub("", name.strip().lower().replace(" ", "-"))


def to_user_out(user: User) -> UserOut:
    """Map an ORM ``User`` to its public DTO."""
    return UserOut(
        id=user.id,
        tenant_id=user.tenant_id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        is_email_verified=user.is_email_verified,
        is_active=user.is_active,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


class _SingleUseTokenMessages:
    """Client messages for one kind of emailed token."""

    def __init__(self, kind: str, invalid: str) -> None:
        self.invalid = invalid
        self.used = f"{kind} token already used"
        self.expired = f"{kind} token has expired"


_VERIFICATION = _SingleUseTokenMessages("verification", "invalid or expired verification token")
_RESET = _SingleUseTokenMessages("reset", "invalid or expired reset token")


class AuthService(BaseService):
    """
    Authentication lifecycle service.

    Owns registration, login, logout, token refresh, email verification,
    password reset and change, invitation acceptance and the ``/me``
    aggregation. Multi-row workflows run in a single read-write Unit of Work;
    slow password hashing happens before the transaction opens.

    Every security-sensitive negative outcome that could reveal whether an
    account exists (unknown email, wrong password) is reported with the same
    message.
    """

    def __init__(
        self,
        *,
        password_hasher: PasswordHasher,
        token_provider: TokenProvider,
        refresh_store: RefreshTokenStore,
        notifier: Notifier,
        token_cfg: AuthTokenConfig | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param password_hasher: Argon2id (or test) hasher.
        :param token_provider: Adapter for issuing signed access tokens.
        :param refresh_store: Stateful store for refresh tokens (atomic rotation).
        :param notifier: Hand-off for verification and reset emails.
        :param token_cfg: Token lifetimes.
        """
        super().__init__()
        self.hasher = password_hasher
        self.tokens = token_provider
        self.notifier = notifier
        self.cfg = token_cfg or AuthTokenConfig()
        self.refresh_tokens = RefreshTokenManager(
            store=refresh_store, ttl=self.cfg.refresh_expires
        )

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> AuthResultOut:
        """
        Create a tenant with its owner, first store and Administrator role.

        Everything is created in one transaction: a failure anywhere leaves
        no tenant behind. The verification email is a best-effort step after
        commit.

        :raises ValidationError: If the tenant name yields an empty slug.
        :raises ConflictError: On a duplicate tenant slug or email.
        """
        slug = slugify(dto.tenant_name)
        if not slug:
            raise ValidationError(
                "validation failed",
                {"tenant_name": "must contain at least one letter or digit"},
            )
        email = normalize_email(dto.email)
        password_hash = self.hasher.hash(dto.password)

        try:
            with self.rw_uow() as uow:
                if uow.tenants.slug_exists(slug):
                    raise ConflictError("Tenant", MSG_TENANT_EXISTS)
                if uow.users.exists_by_email(email):
                    raise ConflictError("User", MSG_EMAIL_EXISTS)

                tenant = uow.tenants.add(Tenant(name=dto.tenant_name.strip(), slug=slug))
                user = uow.users.add(
                    User(
                        tenant_id=tenant.id,
                        email=email,
                        password_hash=password_hash,
                        first_name=dto.first_name,
                        last_name=dto.last_name,
                    )
                )
                uow.stores.add(
                    Store(tenant_id=tenant.id, name=dto.store_name, address=dto.store_address)
                )
                role = uow.roles.add(
                    Role(
                        tenant_id=tenant.id,
                        name=SYSTEM_ADMIN_ROLE,
                        description=SYSTEM_ADMIN_DESCRIPTION,
                        is_system_default=True,
                    )
                )
                uow.role_permissions.replace_for_role(
                    role.id, [(f.id, list(f.actions)) for f in uow.features.list_leaves()]
                )
                uow.user_roles.assign(user.id, role.id, assigned_by=None)
                user_out = to_user_out(user)
        except IntegrityError as exc:
            # Concurrent registration won the unique index
            if violates(exc, "uq_tenants_slug"):
                raise ConflictError("Tenant", MSG_TENANT_EXISTS) from exc
            if violates(exc, "uq_users_email"):
                raise ConflictError("User", MSG_EMAIL_EXISTS) from exc
            raise

        log.info(
            "tenant registered",
            extra={"event": "auth.register", "tenant_id": str(user_out.tenant_id)},
        )
        self._send_email_verification(user_out)
        return AuthResultOut(user=user_out, tokens=self._issue_tokens(user_out))

    def _send_email_verification(self, user: UserOut) -> None:
        """Create a verification token and notify; failures are logged only."""
        try:
            plain, digest = generate_token()
            with self.rw_uow() as uow:
                uow.email_verifications.create(
                    user.id, digest, utcnow() + self.cfg.email_verification_expires
                )
            self.notifier.send_email_verification(
                email=user.email, first_name=user.first_name, token=plain
            )
        except Exception:
            log.warning(
                "email verification hand-off failed",
                exc_info=True,
                extra={"event": "auth.verification_failed", "user_id": str(user.id)},
            )

    # ------------------------------------------------------------------ #
    # Login / refresh / logout
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> AuthResultOut:
        """
        Authenticate credentials and issue a fresh token pair.

        :raises UnauthorizedError: ``"invalid email or password"`` for an
            unknown email or a wrong password, ``"account is deactivated"``
            for an inactive account with the right password.
        """
        with self.ro_uow() as uow:
            user = uow.users.get_by_email(dto.email)
            if user is None:
                # Same Argon2 cost as a real account
                self.hasher.verify(dto.password, self.hasher.dummy_hash())
                log.info("login failed: unknown email", extra={"event": "auth.login_failed"})
                raise UnauthorizedError(MSG_BAD_CREDENTIALS)
            if not self.hasher.verify(dto.password, user.password_hash):
                log.info(
                    "login failed: wrong password",
                    extra={"event": "auth.login_failed", "user_id": str(user.id)},
                )
                raise UnauthorizedError(MSG_BAD_CREDENTIALS)
            if not user.is_active:
                raise UnauthorizedError(MSG_DEACTIVATED)
            user_out = to_user_out(user)

        return AuthResultOut(user=user_out, tokens=self._issue_tokens(user_out))

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Rotate a refresh token and emit a new token pair.

        Security
        --------
        - Rotation is atomic in the store: one token yields one successor.
        - Presenting a revoked token revokes every token of its owner.
        - A deactivated or deleted owner loses every session as well.
        """
        new_refresh, user_id = self.refresh_tokens.rotate(dto.refresh_token)

        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            user_out = to_user_out(user) if user is not None and user.is_active else None

        if user_out is None:
            self.refresh_tokens.revoke_all(user_id)
            raise UnauthorizedError(MSG_DEACTIVATED)

        return TokenPairOut(
            access_token=self._access_token(user_out), refresh_token=new_refresh
        )

    def logout(self, dto: LogoutIn) -> None:
        """Revoke the presented refresh token (idempotent)."""
        self.refresh_tokens.revoke(dto.refresh_token)

    # ------------------------------------------------------------------ #
    # Email verification
    # ------------------------------------------------------------------ #

    def verify_email(self, dto: VerifyEmailIn) -> None:
        """
        Consume a verification token and mark the email as verified.

        :raises UnauthorizedError: If the token is unknown, used or expired.
        """
        with self.rw_uow() as uow:
            row = uow.email_verifications.get_by_hash(hash_token(dto.token), for_update=True)
            self._check_single_use(row, _VERIFICATION)
            uow.email_verifications.mark_used(row)
            user = self.found("User", uow.users.get(row.user_id), row.user_id)
            user.is_email_verified = True

    # ------------------------------------------------------------------ #
    # Password reset / change
    # ------------------------------------------------------------------ #

    def forgot_password(self, dto: ForgotPasswordIn) -> None:
        """
        Start a password reset.

        Returns the same way whether or not the email belongs to an account;
        only an existing active user gets a reset token.
        """
        with self.ro_uow() as uow:
            user = uow.users.get_by_email(dto.email)
            target = to_user_out(user) if user is not None and user.is_active else None

        if target is None:
            log.info("password reset requested for unknown email", extra={"event": "auth.forgot"})
            return

        plain, digest = generate_token()
        with self.rw_uow() as uow:
            uow.password_resets.create(target.id, digest, utcnow() + self.cfg.password_reset_expires)
        try:
            self.notifier.send_password_reset(
                email=target.email, first_name=target.first_name, token=plain
            )
        except Exception:
            log.warning(
                "password reset hand-off failed",
                exc_info=True,
                extra={"event": "auth.forgot", "user_id": str(target.id)},
            )

    def reset_password(self, dto: ResetPasswordIn) -> None:
        """
        Replace the password using a reset token.

        The new hash, the consumed token and the revocation of every refresh
        token of the user are committed together.

        :raises UnauthorizedError: If the token is unknown, used or expired.
        """
        token_hash = hash_token(dto.token)
        with self.ro_uow() as uow:
            self._check_single_use(uow.password_resets.get_by_hash(token_hash), _RESET)

        password_hash = self.hasher.hash(dto.password)

        with self.rw_uow() as uow:
            row = uow.password_resets.get_by_hash(token_hash, for_update=True)
            # Re-check under the lock: another request may have consumed it
            self._check_single_use(row, _RESET)
            uow.password_resets.mark_used(row)
            user = self.found("User", uow.users.get(row.user_id), row.user_id)
            user.password_hash = password_hash
            user_id = user.id
            revoked = uow.refresh_tokens.revoke_all_for_user(user_id)

        log.info(
            "password reset completed; %d refresh tokens revoked",
            revoked,
            extra={"event": "auth.reset", "user_id": str(user_id)},
        )

    def change_password(self, dto: ChangePasswordIn) -> None:
        """
        Change the password of the signed-in user. Existing sessions are kept.

        :raises UnauthorizedError: If the current password does not verify.
        """
        with self.ro_uow() as uow:
            user = self.found("User", uow.users.get(dto.user_id), dto.user_id)
            if not self.hasher.verify(dto.current_password, user.password_hash):
                raise UnauthorizedError(MSG_BAD_CURRENT_PASSWORD)

        password_hash = self.hasher.hash(dto.new_password)
        with self.rw_uow() as uow:
            user = self.found("User", uow.users.get(dto.user_id), dto.user_id)
            user.password_hash = password_hash

    # ------------------------------------------------------------------ #
    # Invitations
    # ------------------------------------------------------------------ #

    def accept_invitation(self, dto: AcceptInvitationIn) -> AuthResultOut:
        """
        Redeem an invitation: create the user with the invited role and stores.

        The email is marked verified since the invitation reached it.

        :raises UnauthorizedError: If the invitation is unknown, not pending or expired.
        :raises ConflictError: If the email already has an account.
        """
        token_hash = hash_token(dto.token)
        with self.ro_uow() as uow:
            self._check_invitation(uow.invitations.get_by_hash(token_hash))

        password_hash = self.hasher.hash(dto.password)

        try:
            with self.rw_uow() as uow:
                invitation = uow.invitations.get_by_hash(token_hash, for_update=True)
                self._check_invitation(invitation)
                if uow.users.exists_by_email(invitation.email):
                    raise ConflictError("User", MSG_EMAIL_EXISTS)

                user = uow.users.add(
                    User(
                        tenant_id=invitation.tenant_id,
                        email=invitation.email,
                        password_hash=password_hash,
                        first_name=dto.first_name,
                        last_name=dto.last_name,
                        is_email_verified=True,
                    )
                )
                uow.user_roles.assign(user.id, invitation.role_id, assigned_by=invitation.invited_by)
                uow.user_stores.replace_for_user(
                    user.id, invitation.store_uuids, assigned_by=invitation.invited_by
                )
                invitation.status = InvitationStatus.ACCEPTED
                user_out = to_user_out(user)
        except IntegrityError as exc:
            if violates(exc, "uq_users_email"):
                raise ConflictError("User", MSG_EMAIL_EXISTS) from exc
            raise

        return AuthResultOut(user=user_out, tokens=self._issue_tokens(user_out))

    # ------------------------------------------------------------------ #
    # Profile
    # ------------------------------------------------------------------ #

    def get_me(self, user_id: uuid.UUID) -> MeOut:
        """
        Aggregate profile, roles, permission map and accessible stores.

        :raises NotFoundError: If the user no longer exists.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)

            roles = [r for r in uow.roles.list_for_user(user.id) if r.tenant_id == user.tenant_id]
            permissions = collect_permissions(roles)

            all_stores = any(r.is_system_default for r in roles)
            if all_stores:
                stores = uow.stores.list_in_tenant(user.tenant_id)
            else:
                stores = uow.stores.list_by_ids(
                    user.tenant_id, uow.user_stores.store_ids_for_user(user.id)
                )

            return MeOut(
                user=to_user_out(user),
                roles=[
                    RoleRefOut(id=r.id, name=r.name, is_system_default=r.is_system_default)
                    for r in roles
                ],
                permissions={slug: sorted(actions) for slug, actions in sorted(permissions.items())},
                stores=[StoreRefOut(id=s.id, name=s.name, is_active=s.is_active) for s in stores],
                all_stores_access=all_stores,
            )

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _access_token(self, user: UserOut) -> str:
        claims: dict[str, Any] = {
            "user_id": str(user.id),
            "tenant_id": str(user.tenant_id),
            "email": user.email,
        }
        return self.tokens.create_access_token(identity=str(user.id), additional_claims=claims)

    def _issue_tokens(self, user: UserOut) -> TokenPairOut:
        # Persist the refresh token before any plaintext leaves the server
        refresh = self.refresh_tokens.issue(user.id)
        return TokenPairOut(access_token=self._access_token(user), refresh_token=refresh)

    @staticmethod
    def _check_single_use(row, messages: _SingleUseTokenMessages) -> None:
        if row is None:
            raise UnauthorizedError(messages.invalid)
        if row.is_used:
            raise UnauthorizedError(messages.used)
        if row.expires_at <= utcnow():
            raise UnauthorizedError(messages.expired)

    @staticmethod
    def _check_invitation(invitation) -> None:
        if invitation is None:
            raise UnauthorizedError("invalid invitation token")
        if invitation.status != InvitationStatus.PENDING or invitation.role_id is None:
            raise UnauthorizedError("invitation is no longer valid")
        if invitation.expires_at <= utcnow():
            raise UnauthorizedError("invitation has expired")
