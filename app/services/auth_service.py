from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app import metrics
from app.core.audit import log_audit_event, log_failure
from app.core.config import settings
from app.core.exceptions import (
    ChallengeExpiredError,
    InvalidCredentialsError,
    InvalidTOTPCodeError,
    NotFoundError,
    ValidationFailedError,
)
from app.core.security import (
    AssuranceLevel,
    create_access_token,
    hash_password,
    validate_password_strength,
    verify_password,
)
from app.core.totp import generate_secret, provisioning_uri, verify_totp
from app.models import models
from app.repositories.base import AuthSession, ChallengeTicket, Enrollment

logger = logging.getLogger(__name__)

FACTOR_VERIFIED = "verified"
FACTOR_UNVERIFIED = "unverified"


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class AuthService:
    """Password sign-in plus TOTP enrollment, challenge and verify.

    Implements ``AuthGateway`` on top of the local user tables.
    """

    def __init__(self, db: Session):
        self.db = db

    # ----------------------------- users -----------------------------

    def register(self, email: str, password: str, full_name: str | None = None) -> models.User:
        email = email.lower().strip()
        try:
            validate_password_strength(password)
        except ValueError as exc:
            raise ValidationFailedError(str(exc), field="password", code="USR405") from exc
        user = models.User(email=email, full_name=full_name, hashed_password=hash_password(password))
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise ValidationFailedError("Email already registered", field="email", code="USR406") from exc
        log_audit_event("auth.register", user_id=user.id)
        return user

    def get_user(self, user_id: str) -> models.User:
        user = self.db.get(models.User, user_id)
        if user is None or not user.is_active:
            raise NotFoundError("user", user_id)
        return user

    def has_any_user(self) -> bool:
        return self.db.query(models.User.id).first() is not None

    def _has_verified_factor(self, user_id: str) -> bool:
        return (
            self.db.query(models.MFAFactor.id)
            .filter(models.MFAFactor.user_id == user_id, models.MFAFactor.status == FACTOR_VERIFIED)
            .first()
            is not None
        )

    def _session(self, user: models.User, aal: AssuranceLevel) -> AuthSession:
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_MINUTES)
        mfa_required = aal == AssuranceLevel.AAL1 and self._has_verified_factor(user.id)
        return AuthSession(
            user=user,
            access_token=create_access_token(user.id, aal=aal),
            expires_at=expires_at,
            aal=aal,
            mfa_required=mfa_required,
        )

    # ----------------------------- sign-in -----------------------------

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        user = (
            self.db.query(models.User)
            .filter(models.User.email == email.lower().strip())
            .one_or_none()
        )
        if user is None or not user.is_active or not verify_password(password, user.hashed_password):
            metrics.login_failed()
            log_failure("auth.login", error="invalid_credentials", email=email)
            raise InvalidCredentialsError()
        session = self._session(user, AssuranceLevel.AAL1)
        metrics.login_succeeded()
        log_audit_event("auth.login", user_id=user.id, mfa_required=session.mfa_required)
        return session

    # ----------------------------- MFA -----------------------------

    def list_factors(self, user_id: str) -> list[models.MFAFactor]:
        return (
            self.db.query(models.MFAFactor)
            .filter(models.MFAFactor.user_id == user_id)
            .order_by(models.MFAFactor.created_at)
            .all()
        )

    def _factor(self, user_id: str, factor_id: str) -> models.MFAFactor:
        factor = self.db.get(models.MFAFactor, factor_id)
        if factor is None or factor.user_id != user_id:
            raise NotFoundError("factor", factor_id)
        return factor

    def enroll_totp(self, user_id: str, friendly_name: str | None = None) -> Enrollment:
        user = self.get_user(user_id)
        secret = generate_secret()
        factor = models.MFAFactor(
            user_id=user.id,
            factor_type="totp",
            friendly_name=friendly_name,
            secret=secret,
            status=FACTOR_UNVERIFIED,
        )
        self.db.add(factor)
        self.db.commit()
        log_audit_event("auth.mfa.enroll", user_id=user.id, factor_id=factor.id)
        return Enrollment(factor=factor, secret=secret, uri=provisioning_uri(secret, user.email))

    def unenroll(self, user_id: str, factor_id: str) -> None:
        factor = self._factor(user_id, factor_id)
        self.db.query(models.MFAChallenge).filter(models.MFAChallenge.factor_id == factor.id).delete()
        self.db.delete(factor)
        self.db.commit()
        log_audit_event("auth.mfa.unenroll", user_id=user_id, factor_id=factor_id)

    def challenge(self, user_id: str, factor_id: str) -> ChallengeTicket:
        factor = self._factor(user_id, factor_id)
        now = datetime.now(timezone.utc)
        challenge = models.MFAChallenge(
            factor_id=factor.id,
            created_at=now,
            expires_at=now + timedelta(seconds=settings.MFA_CHALLENGE_TTL_SECONDS),
        )
        self.db.add(challenge)
        self.db.commit()
        return ChallengeTicket(challenge_id=challenge.id, factor_id=factor.id, expires_at=challenge.expires_at)

    def verify(self, user_id: str, factor_id: str, challenge_id: str, code: str) -> AuthSession:
        factor = self._factor(user_id, factor_id)
        challenge = self.db.get(models.MFAChallenge, challenge_id)
        if challenge is None or challenge.factor_id != factor.id:
            raise NotFoundError("challenge", challenge_id)

        now = datetime.now(timezone.utc)
        if challenge.verified_at is not None or _aware(challenge.expires_at) <= now:
            metrics.mfa_rejected("expired")
            log_failure("auth.mfa.verify", user_id=user_id, error="challenge_expired", factor_id=factor.id)
            raise ChallengeExpiredError(challenge_id)

        if not verify_totp(factor.secret, code):
            metrics.mfa_rejected()
            log_failure("auth.mfa.verify", user_id=user_id, error="invalid_code", factor_id=factor.id)
            raise InvalidTOTPCodeError()

        challenge.verified_at = now
        factor.status = FACTOR_VERIFIED
        self.db.commit()
        metrics.mfa_verified()
        log_audit_event("auth.mfa.verify", user_id=user_id, factor_id=factor.id)
        return self._session(self.get_user(user_id), AssuranceLevel.AAL2)

    def assurance_level(self, user_id: str, current: AssuranceLevel) -> tuple[AssuranceLevel, AssuranceLevel]:
        """Return ``(current, next)``; next is aal2 once a factor is verified."""
        required = AssuranceLevel.AAL2 if self._has_verified_factor(user_id) else AssuranceLevel.AAL1
        return current, required
