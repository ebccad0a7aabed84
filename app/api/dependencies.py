"""Common request dependencies: database, repository, services and the signed-in user."""
from dataclasses import dataclass
from typing import Annotated, TypeAlias

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from app.core.audit import log_failure
from app.core.exceptions import MFARequiredError, NotFoundError
from app.core.security import AssuranceLevel, TokenExpiredError, TokenValidationError, decode_token
from app.db.session import get_db
from app.repositories.base import DairyRepository
from app.repositories.sql import SqlDairyRepository
from app.services.auth_service import AuthService

DbDep: TypeAlias = Annotated[Session, Depends(get_db)]


def get_repository(db: DbDep) -> DairyRepository:
    return SqlDairyRepository(db)


def get_auth_service(db: DbDep) -> AuthService:
    return AuthService(db)


RepoDep: TypeAlias = Annotated[DairyRepository, Depends(get_repository)]
AuthServiceDep: TypeAlias = Annotated[AuthService, Depends(get_auth_service)]


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    aal: AssuranceLevel


def get_token_claims(authorization: str = Header(None)) -> TokenClaims:
    if not authorization or not authorization.lower().startswith("bearer "):
        log_failure("auth.token.parse", user_id=None, error="missing_token")
        raise HTTPException(status_code=401, detail="Missing token")
    token = authorization.split(" ", 1)[1]
    try:
        payload = decode_token(token)
    except TokenExpiredError as exc:
        log_failure("auth.token.expired", user_id=None, error="expired")
        raise HTTPException(status_code=401, detail="Token expired") from exc
    except TokenValidationError as exc:
        log_failure("auth.token.invalid", user_id=None, error="invalid")
        raise HTTPException(status_code=401, detail="Invalid token") from exc
    return TokenClaims(user_id=str(payload["sub"]), aal=AssuranceLevel(payload["aal"]))


ClaimsDep: TypeAlias = Annotated[TokenClaims, Depends(get_token_claims)]


def get_current_user_id(claims: ClaimsDep, auth: AuthServiceDep) -> str:
    """Signed-in user at any assurance level (used by the MFA flow itself)."""
    try:
        auth.get_user(claims.user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc
    return claims.user_id


CurrentUserDep: TypeAlias = Annotated[str, Depends(get_current_user_id)]


def require_verified_user(user_id: CurrentUserDep, claims: ClaimsDep, auth: AuthServiceDep) -> str:
    """Signed-in user at the assurance level their account requires.

    Users with a verified TOTP factor must present an aal2 token.
    """
    current, required = auth.assurance_level(user_id, claims.aal)
    if required == AssuranceLevel.AAL2 and current != AssuranceLevel.AAL2:
        log_failure("auth.mfa.required", user_id=user_id, error="aal1_token")
        raise MFARequiredError()
    return user_id


VerifiedUserDep: TypeAlias = Annotated[str, Depends(require_verified_user)]
