from __future__ import annotations

from typing import Any

from fastapi import Depends, Header

from school_admin.auth.jwt import decode_token
from school_admin.auth.models import Principal
from school_admin.configs.settings import Settings, get_settings
from school_admin.domain.enums import UserType
from school_admin.errors import AuthError
from school_admin.configs.logging_config import get_logger

log = get_logger(__name__)


def _bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise AuthError("missing authorization header")
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise AuthError("invalid authorization header")
    return token


def _user_type(value: Any) -> UserType | None:
    if value is None:
        return None
    try:
        return UserType(str(value))
    except ValueError:
        log.info("auth.unknown_user_type value=%s", value)
        return None


def principal_from_claims(claims: dict[str, Any]) -> Principal:
    user_id = claims.get("sub")
    permissions = claims.get("permissions") or []
    roles = claims.get("roles") or []

    if not user_id:
        log.info("auth.token_missing_claims has_sub=%s", bool(user_id))
        raise AuthError("token missing required claims")
    if not isinstance(permissions, list):
        log.info("auth.invalid_permissions_claim type=%s", type(permissions).__name__)
        raise AuthError("invalid permissions claim")
    if not isinstance(roles, list):
        log.info("auth.invalid_roles_claim type=%s", type(roles).__name__)
        raise AuthError("invalid roles claim")

    user_type = _user_type(claims.get("userType"))
    system_scope = claims.get("systemScope")
    if system_scope is None:
        system_scope = user_type is not None and user_type.is_system_user
    school_id = claims.get("schoolId")

    return Principal(
        user_id=str(user_id),
        permissions=tuple(str(p) for p in permissions),
        system_scope=bool(system_scope),
        active=bool(claims.get("active", True)),
        school_id=str(school_id) if school_id is not None else None,
        user_type=user_type,
        roles=tuple(str(r) for r in roles),
    )


async def get_principal(
    authorization: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> Principal:
    """
    Resolve the authenticated principal from the bearer token.

    The principal is built once per request and never mutated afterwards.
    """
    token = _bearer_token(authorization)
    claims = decode_token(token, settings)
    principal = principal_from_claims(claims)

    if not principal.active:
        log.info("auth.inactive_principal user_id=%s", principal.user_id)
        raise AuthError("account is inactive")

    log.info(
        "auth.principal user_id=%s user_type=%s system_scope=%s school_id=%s",
        principal.user_id,
        principal.user_type.value if principal.user_type else None,
        principal.system_scope,
        principal.school_id,
    )
    return principal
