"""
Resolve an AuthContext from a Supabase access token.
Token verification is delegated to Supabase auth; the admin flag comes from user_roles.
"""
import logging
from typing import Any, Optional

from beautyscan.models.auth_context import AuthContext

logger = logging.getLogger(__name__)

USER_ROLES_TABLE = "user_roles"


class AuthenticationError(Exception):
    pass


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def is_admin(client: Any, user_id: str) -> bool:
    resp = (
        client.table(USER_ROLES_TABLE)
        .select("role")
        .eq("user_id", user_id)
        .eq("role", "admin")
        .execute()
    )
    return bool(resp.data)


def resolve_auth_context(client: Any, access_token: Optional[str]) -> AuthContext:
    """Raises AuthenticationError when the token is missing or rejected."""
    if not access_token:
        raise AuthenticationError("Missing bearer token")
    try:
        resp = client.auth.get_user(access_token)
    except Exception as e:
        # supabase-py raises AuthApiError (and friends) for expired/invalid tokens
        logger.info("AUTH token rejected: %s", e)
        raise AuthenticationError("Invalid or expired token") from e
    user = getattr(resp, "user", None)
    if user is None or not getattr(user, "id", None):
        raise AuthenticationError("Invalid or expired token")

    user_id = str(user.id)
    ctx = AuthContext(user_id=user_id, is_admin=is_admin(client, user_id))
    logger.debug("AUTH resolved user_id=%s is_admin=%s", ctx.user_id, ctx.is_admin)
    return ctx
