import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from budget_api.db.session import get_db
from budget_api.models.user import User
from budget_api.services.identity import IdentityError, IdentityProvider

logger = logging.getLogger(__name__)


def get_identity_provider(request: Request) -> IdentityProvider:
    provider = getattr(request.app.state, "identity", None)
    if provider is None:
        raise HTTPException(status_code=500, detail="Authentication error")
    return provider


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return authorization[len("Bearer "):].strip() or None


def get_current_user_id(
    request: Request,
    authorization: Optional[str] = Header(None),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> str:
    """Resolve the bearer token to a uid, or fail with 401."""
    token = _bearer_token(authorization)
    if token is None:
        raise HTTPException(status_code=401, detail="No authentication token provided")

    try:
        user_id = identity.verify_token(token)
    except IdentityError as e:
        logger.warning("Rejected token on %s %s: %s", request.method, request.url.path, e)
        raise HTTPException(status_code=401, detail="Invalid authentication token")

    request.state.user_id = user_id
    return user_id


def get_optional_claims(
    request: Request,
    authorization: Optional[str] = Header(None),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> Optional[dict]:
    """Verified claims when a valid bearer token is present, otherwise None."""
    token = _bearer_token(authorization)
    if token is None:
        return None
    try:
        return identity.verify_claims(token)
    except IdentityError as e:
        logger.warning("Ignoring invalid token on %s %s: %s", request.method, request.url.path, e)
        return None


def require_admin(
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> User:
    """Admin gate: the caller must exist, be an admin and not be disabled."""
    if not user_id:
        raise HTTPException(status_code=401, detail="Authentication required")

    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    # Disabled wins over admin
    if user.is_disabled:
        raise HTTPException(status_code=403, detail="Account is disabled")

    request.state.is_admin = True
    return user
