from datetime import timedelta

import pytest

from community_api.services.auth_service import auth_service
from community_api.utils.auth import build_token_claims, create_access_token, decode_access_token
from community_api.utils.exceptions import AuthenticationError
from community_api.utils.firebase import FirebaseIdentity


async def test_first_login_creates_user(session, fake_verifier):
    response = await auth_service.login(session, "firebase:new-player")

    user = response.data["user"]
    assert user["firebaseUid"] == "new-player"
    assert user["email"] == "new-player@example.com"
    assert user["displayName"] == "Player new-player"

    claims = decode_access_token(response.data["accessToken"])
    assert claims["sub"] == user["id"]
    assert claims["userId"] == user["id"]
    assert claims["firebaseUid"] == "new-player"


async def test_repeat_login_reuses_user(session, fake_verifier):
    first = await auth_service.login(session, "firebase:player")
    second = await auth_service.login(session, "firebase:player")
    assert first.data["user"]["id"] == second.data["user"]["id"]


async def test_email_match_relinks_uid(session, make_user):
    existing = await make_user("old-uid")

    user = await auth_service.find_or_create_user(
        session, FirebaseIdentity(uid="new-uid", email="old-uid@example.com", name=None, picture=None)
    )

    assert user.id == existing.id
    assert user.firebase_uid == "new-uid"
    # Missing provider claims leave the stored profile alone
    assert user.display_name == "Player old-uid"


async def test_identity_without_email(session):
    with pytest.raises(AuthenticationError):
        await auth_service.find_or_create_user(
            session, FirebaseIdentity(uid="anon", email=None, name=None, picture=None)
        )


async def test_invalid_firebase_token(session, fake_verifier):
    with pytest.raises(AuthenticationError):
        await auth_service.login(session, "not-a-firebase-token")


async def test_bearer_accepts_both_token_kinds(session, make_user, fake_verifier):
    user = await make_user("player")

    via_jwt = await auth_service.authenticate_bearer(session, create_access_token(build_token_claims(user)))
    via_firebase = await auth_service.authenticate_bearer(session, "firebase:player")

    assert via_jwt.id == user.id
    assert via_firebase.id == user.id


async def test_bearer_rejects_unknown_user(session, make_user, fake_verifier):
    user = await make_user("ghost")
    token = create_access_token(build_token_claims(user))
    await session.delete(user)
    await session.commit()

    with pytest.raises(AuthenticationError):
        await auth_service.authenticate_bearer(session, token)


def test_expired_access_token():
    token = create_access_token({"sub": "user_1"}, expires_delta=timedelta(seconds=-1))
    assert decode_access_token(token) is None
