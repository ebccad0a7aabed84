from fastapi import APIRouter, Header, Request

from app.api.dependencies import (
    AuthServiceDep,
    ClaimsDep,
    CurrentUserDep,
    VerifiedUserDep,
    get_current_user_id,
    get_token_claims,
    require_verified_user,
)
from app.api.rate_limit import RATE_LIMITS, limiter
from app.models import schemas
from app.repositories.base import AuthSession

router = APIRouter()


def _token_out(session: AuthSession) -> schemas.TokenOut:
    return schemas.TokenOut(
        access_token=session.access_token,
        access_expires_at=session.expires_at,
        aal=session.aal.value,
        mfa_required=session.mfa_required,
    )


@router.post("/register", response_model=schemas.UserOut, status_code=201)
@limiter.limit(RATE_LIMITS["register"])
def register(
    request: Request,
    payload: schemas.RegisterRequest,
    auth: AuthServiceDep,
    authorization: str = Header(None),
):
    """Create a back-office user.

    The very first account can be created anonymously; after that only a
    signed-in (and, where enrolled, MFA-verified) user may add accounts.
    """
    if auth.has_any_user():
        claims = get_token_claims(authorization)
        require_verified_user(get_current_user_id(claims, auth), claims, auth)
    return auth.register(payload.email, payload.password, payload.full_name)


@router.post("/login", response_model=schemas.TokenOut)
@limiter.limit(RATE_LIMITS["login"])
def login(request: Request, payload: schemas.SignInRequest, auth: AuthServiceDep):
    return _token_out(auth.sign_in_with_password(payload.email, payload.password))


@router.get("/me", response_model=schemas.UserOut)
def me(user_id: CurrentUserDep, auth: AuthServiceDep):
    return auth.get_user(user_id)


@router.get("/mfa/assurance", response_model=schemas.AssuranceOut)
def assurance(user_id: CurrentUserDep, claims: ClaimsDep, auth: AuthServiceDep):
    current, required = auth.assurance_level(user_id, claims.aal)
    return schemas.AssuranceOut(current_level=current.value, next_level=required.value)


@router.get("/mfa/factors", response_model=list[schemas.FactorOut])
def list_factors(user_id: CurrentUserDep, auth: AuthServiceDep):
    return auth.list_factors(user_id)


@router.post("/mfa/enroll", response_model=schemas.EnrollOut, status_code=201)
def enroll(payload: schemas.EnrollRequest, user_id: VerifiedUserDep, auth: AuthServiceDep):
    enrollment = auth.enroll_totp(user_id, payload.friendly_name)
    return schemas.EnrollOut(factor_id=enrollment.factor.id, secret=enrollment.secret, uri=enrollment.uri)


@router.post("/mfa/challenge", response_model=schemas.ChallengeOut)
def challenge(payload: schemas.ChallengeRequest, user_id: CurrentUserDep, auth: AuthServiceDep):
    ticket = auth.challenge(user_id, payload.factor_id)
    return schemas.ChallengeOut(challenge_id=ticket.challenge_id, expires_at=ticket.expires_at)


@router.post("/mfa/verify", response_model=schemas.TokenOut)
@limiter.limit(RATE_LIMITS["mfa_verify"])
def verify(request: Request, payload: schemas.VerifyRequest, user_id: CurrentUserDep, auth: AuthServiceDep):
    return _token_out(auth.verify(user_id, payload.factor_id, payload.challenge_id, payload.code))


@router.delete("/mfa/factors/{factor_id}", response_model=schemas.MessageOut)
def unenroll(factor_id: str, user_id: VerifiedUserDep, auth: AuthServiceDep):
    auth.unenroll(user_id, factor_id)
    return schemas.MessageOut(detail="Factor removed")
