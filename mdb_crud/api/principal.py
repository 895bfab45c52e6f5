"""
Authenticated principal.

Authentication happens upstream; its middleware leaves the token claims on
``request.state.user``. This module only reads them.
"""

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from fastapi import Request

from ..constants import CLAIM_FULL_NAME, CLAIM_ROLE, CLAIM_USER_ID, CLAIM_USER_NAME
from ..exceptions import ServiceError


@dataclass(frozen=True)
class Principal:
    user_id: UUID
    full_name: str = ""
    user_name: str = ""
    role: str = ""


def _claim(claims: dict[str, Any], name: str) -> str:
    value = claims.get(name)
    return "" if value is None else str(value)


def principal_from_claims(claims: dict[str, Any] | None) -> Principal:
    """
    Build a Principal from token claims.

    Raises:
        ServiceError: (401) if the user id claim is missing or not a UUID
    """
    if not claims:
        raise ServiceError("Invalid token", status_code=401)

    user_id = _claim(claims, CLAIM_USER_ID)
    if not user_id:
        raise ServiceError("Invalid token", status_code=401)
    try:
        parsed = UUID(user_id)
    except ValueError as e:
        raise ServiceError("Invalid token", status_code=401) from e

    return Principal(
        user_id=parsed,
        full_name=_claim(claims, CLAIM_FULL_NAME),
        user_name=_claim(claims, CLAIM_USER_NAME),
        role=_claim(claims, CLAIM_ROLE),
    )


async def get_principal(request: Request) -> Principal:
    """Dependency that requires an authenticated principal."""
    return principal_from_claims(getattr(request.state, "user", None))


async def get_optional_principal(request: Request) -> Principal | None:
    """Dependency returning the principal, or None for anonymous requests."""
    claims = getattr(request.state, "user", None)
    if not claims:
        return None
    return principal_from_claims(claims)
