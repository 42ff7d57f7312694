from __future__ import annotations

import pytest
from jose import jwt

from school_admin.auth.dependencies import _bearer_token, principal_from_claims
from school_admin.auth.jwt import decode_token
from school_admin.configs.settings import Settings
from school_admin.domain.enums import UserType
from school_admin.errors import AuthError


def test_bearer_token_ok() -> None:
    assert _bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"


@pytest.mark.parametrize("value", [None, "", "Basic xxx", "Bearer", "Bearer "])
def test_bearer_token_invalid(value) -> None:
    with pytest.raises(AuthError):
        _bearer_token(value)


def test_principal_from_claims_school_user() -> None:
    principal = principal_from_claims(
        {
            "sub": "sa-1",
            "permissions": ["edit_own_school"],
            "roles": ["school_admin"],
            "userType": "school_admin",
            "schoolId": "school-1",
        }
    )

    assert principal.user_id == "sa-1"
    assert principal.permissions == ("edit_own_school",)
    assert principal.user_type is UserType.SCHOOL_ADMIN
    assert principal.is_school_user
    assert principal.system_scope is False
    assert principal.school_id == "school-1"
    assert principal.active is True


def test_principal_from_claims_system_scope_defaults_from_user_type() -> None:
    assert principal_from_claims({"sub": "a", "userType": "system_admin"}).system_scope is True
    assert principal_from_claims({"sub": "a", "userType": "teacher"}).system_scope is False
    assert principal_from_claims({"sub": "a", "userType": "teacher", "systemScope": True}).system_scope is True


def test_principal_from_claims_unknown_user_type_is_ignored() -> None:
    assert principal_from_claims({"sub": "a", "userType": "janitor"}).user_type is None


@pytest.mark.parametrize(
    "claims",
    [
        {},
        {"sub": ""},
        {"sub": "a", "permissions": "view_schools"},
        {"sub": "a", "roles": "auditor"},
    ],
)
def test_principal_from_claims_rejects_bad_claims(claims) -> None:
    with pytest.raises(AuthError):
        principal_from_claims(claims)


def test_decode_token_roundtrip_and_bad_signature() -> None:
    settings = Settings(jwt_secret="s3cret")
    token = jwt.encode({"sub": "u-1"}, "s3cret", algorithm="HS256")

    assert decode_token(token, settings)["sub"] == "u-1"
    with pytest.raises(AuthError):
        decode_token(jwt.encode({"sub": "u-1"}, "other", algorithm="HS256"), settings)
