import datetime as dt

import pytest

from app.core.exceptions import (
    ChallengeExpiredError,
    InvalidCredentialsError,
    InvalidTOTPCodeError,
    ValidationFailedError,
)
from app.core.security import AssuranceLevel, decode_token
from app.core.totp import totp
from app.models.models import MFAChallenge
from app.services.auth_service import AuthService

PASSWORD = "Dairy2024pass"


@pytest.fixture
def auth(db_session):
    return AuthService(db_session)


@pytest.fixture
def user(auth):
    return auth.register("Owner@Dairy.test", PASSWORD, "Owner")


class TestPasswordSignIn:
    def test_register_normalizes_email(self, user):
        assert user.email == "owner@dairy.test"

    def test_weak_password_rejected(self, auth):
        with pytest.raises(ValidationFailedError) as exc:
            auth.register("weak@dairy.test", "short")
        assert exc.value.code == "USR405"

    def test_duplicate_email_rejected(self, auth, user):
        with pytest.raises(ValidationFailedError) as exc:
            auth.register("owner@dairy.test", PASSWORD)
        assert exc.value.code == "USR406"

    def test_sign_in_issues_aal1(self, auth, user):
        session = auth.sign_in_with_password("owner@dairy.test", PASSWORD)
        assert session.aal is AssuranceLevel.AAL1
        assert session.mfa_required is False
        assert decode_token(session.access_token)["sub"] == user.id

    def test_wrong_password(self, auth, user):
        with pytest.raises(InvalidCredentialsError):
            auth.sign_in_with_password("owner@dairy.test", "Wrong2024pass")


class TestTotpFactor:
    def test_enroll_challenge_verify(self, auth, user):
        enrollment = auth.enroll_totp(user.id, "Phone")
        assert enrollment.factor.status == "unverified"
        assert enrollment.uri.startswith("otpauth://totp/")

        ticket = auth.challenge(user.id, enrollment.factor.id)
        session = auth.verify(user.id, enrollment.factor.id, ticket.challenge_id, totp(enrollment.secret))

        assert session.aal is AssuranceLevel.AAL2
        assert decode_token(session.access_token)["aal"] == "aal2"
        assert auth.list_factors(user.id)[0].status == "verified"

        # password alone is no longer enough
        again = auth.sign_in_with_password("owner@dairy.test", PASSWORD)
        assert again.mfa_required is True
        assert auth.assurance_level(user.id, again.aal) == (AssuranceLevel.AAL1, AssuranceLevel.AAL2)

    def test_wrong_code(self, auth, user):
        enrollment = auth.enroll_totp(user.id)
        ticket = auth.challenge(user.id, enrollment.factor.id)
        with pytest.raises(InvalidTOTPCodeError):
            auth.verify(user.id, enrollment.factor.id, ticket.challenge_id, "abcdef")
        assert auth.list_factors(user.id)[0].status == "unverified"

    def test_expired_challenge(self, auth, db_session, user):
        enrollment = auth.enroll_totp(user.id)
        ticket = auth.challenge(user.id, enrollment.factor.id)
        challenge = db_session.get(MFAChallenge, ticket.challenge_id)
        challenge.expires_at = dt.datetime.now(dt.timezone.utc) - dt.timedelta(seconds=1)
        db_session.commit()

        with pytest.raises(ChallengeExpiredError):
            auth.verify(user.id, enrollment.factor.id, ticket.challenge_id, totp(enrollment.secret))

    def test_challenge_is_single_use(self, auth, user):
        enrollment = auth.enroll_totp(user.id)
        ticket = auth.challenge(user.id, enrollment.factor.id)
        auth.verify(user.id, enrollment.factor.id, ticket.challenge_id, totp(enrollment.secret))
        with pytest.raises(ChallengeExpiredError):
            auth.verify(user.id, enrollment.factor.id, ticket.challenge_id, totp(enrollment.secret))

    def test_unenroll(self, auth, user):
        enrollment = auth.enroll_totp(user.id)
        auth.challenge(user.id, enrollment.factor.id)
        auth.unenroll(user.id, enrollment.factor.id)
        assert auth.list_factors(user.id) == []


class TestAuthEndpoints:
    def test_first_user_registers_openly_then_token_required(self, client, auth_headers):
        second = {"email": "clerk@dairy.test", "password": PASSWORD}
        assert client.post("/auth/register", json=second).status_code == 401
        resp = client.post("/auth/register", json=second, headers=auth_headers)
        assert resp.status_code == 201, resp.text
        assert resp.json()["email"] == "clerk@dairy.test"

    def test_me_and_missing_token(self, client, auth_headers):
        assert client.get("/auth/me", headers=auth_headers).json()["email"] == "owner@dairy.test"
        assert client.get("/auth/me").status_code == 401
        assert client.get("/auth/me", headers={"Authorization": "Bearer nonsense"}).status_code == 401

    def test_bad_login(self, client, auth_headers):
        resp = client.post("/auth/login", json={"email": "owner@dairy.test", "password": "Nope2024nope"})
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "USR401"

    def test_mfa_flow_upgrades_token(self, client, auth_headers):
        enroll = client.post("/auth/mfa/enroll", json={"friendly_name": "Phone"}, headers=auth_headers)
        assert enroll.status_code == 201, enroll.text
        factor = enroll.json()

        challenge = client.post("/auth/mfa/challenge", json={"factor_id": factor["factor_id"]}, headers=auth_headers)
        assert challenge.status_code == 200, challenge.text

        verify = client.post(
            "/auth/mfa/verify",
            json={
                "factor_id": factor["factor_id"],
                "challenge_id": challenge.json()["challenge_id"],
                "code": totp(factor["secret"]),
            },
            headers=auth_headers,
        )
        assert verify.status_code == 200, verify.text
        assert verify.json()["aal"] == "aal2"
        aal2_headers = {"Authorization": f"Bearer {verify.json()['access_token']}"}

        # the aal1 token is now refused on business endpoints
        refused = client.get("/customers", headers=auth_headers)
        assert refused.status_code == 403
        assert refused.json()["error"]["code"] == "USR404"
        assert client.get("/customers", headers=aal2_headers).status_code == 200

        level = client.get("/auth/mfa/assurance", headers=auth_headers).json()
        assert level == {"current_level": "aal1", "next_level": "aal2"}

        login = client.post("/auth/login", json={"email": "owner@dairy.test", "password": PASSWORD})
        assert login.json()["mfa_required"] is True

    def test_verify_with_wrong_code(self, client, auth_headers):
        factor = client.post("/auth/mfa/enroll", json={}, headers=auth_headers).json()
        challenge = client.post("/auth/mfa/challenge", json={"factor_id": factor["factor_id"]}, headers=auth_headers)
        resp = client.post(
            "/auth/mfa/verify",
            json={"factor_id": factor["factor_id"], "challenge_id": challenge.json()["challenge_id"], "code": "abcdef"},
            headers=auth_headers,
        )
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "USR402"
