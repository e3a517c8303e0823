"""Caller identity for protected endpoints.

API Gateway validates the JWT before a request reaches this service and
passes the caller's identity on:

1. HTTP API with JWT authorizer: claims mapped to `x-user-sub` and
   `x-user-roles` (comma-separated authorities) headers
2. REST API with Cognito User Pools: claims in
   event.requestContext.authorizer.claims (exposed by Mangum as
   `aws.event` in the ASGI scope), roles in `cognito:groups`

The backend trusts these values since they come from API Gateway, not the
client.
"""

import logging
from typing import Any

from fastapi import Depends, HTTPException, Request
from starlette.status import HTTP_403_FORBIDDEN

from staybook.models import Authority, BookingError, ErrorCode, Principal

logger = logging.getLogger(__name__)

USER_SUB_HEADER = "x-user-sub"
USER_ROLES_HEADER = "x-user-roles"
GROUPS_CLAIM = "cognito:groups"


def _authorizer_claims(request: Request) -> dict[str, Any]:
    event = request.scope.get("aws.event", {})
    claims: dict[str, Any] = (
        event.get("requestContext", {}).get("authorizer", {}).get("claims", {})
    )
    return claims


def _parse_authorities(raw: str | list[str] | None) -> frozenset[Authority]:
    """Turn a role list into known authorities; unknown roles are ignored."""
    if not raw:
        return frozenset()
    if isinstance(raw, str):
        # Cognito renders groups either comma- or space-separated
        raw = raw.replace(",", " ").split()
    known = {a.value: a for a in Authority}
    return frozenset(known[role.strip()] for role in raw if role.strip() in known)


def resolve_principal(request: Request) -> Principal | None:
    """Build the caller's Principal, or None for an anonymous request."""
    sub = request.headers.get(USER_SUB_HEADER)
    roles: str | list[str] | None = request.headers.get(USER_ROLES_HEADER)

    if not sub:
        claims = _authorizer_claims(request)
        sub = claims.get("sub")
        roles = claims.get(GROUPS_CLAIM)

    if not sub or not sub.strip():
        return None
    return Principal(public_id=sub.strip(), authorities=_parse_authorities(roles))


def get_principal(request: Request) -> Principal:
    """Dependency: the authenticated caller.

    Raises:
        BookingError: NOT_AUTHORIZED (401) if no identity was passed on
    """
    principal = resolve_principal(request)
    if principal is None:
        logger.warning("auth_principal_missing", extra={"path": request.url.path})
        raise BookingError(ErrorCode.NOT_AUTHORIZED)
    return principal


def require_landlord(principal: Principal = Depends(get_principal)) -> Principal:
    """Dependency: the authenticated caller, who must hold ROLE_LANDLORD.

    Raises:
        HTTPException: 403 if the caller is not a landlord
    """
    if not principal.is_landlord:
        logger.warning(
            "auth_landlord_required",
            extra={"principal_id": principal.public_id[:8] + "..."},
        )
        raise HTTPException(
            status_code=HTTP_403_FORBIDDEN,
            detail="Landlord role required",
        )
    return principal
