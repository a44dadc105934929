from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from ielts_portal.core.exceptions import UnauthorizedException
from ielts_portal.database import get_db
from ielts_portal.models.principal import Principal, SessionContext
from ielts_portal.services.auth_service import AuthService

security = HTTPBearer(auto_error=False)


def get_session_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> SessionContext:
    """
    FastAPI dependency resolving the bearer token into a session context.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate JWT using SECRET_KEY
    3. Load the portal session named by the 'sid' claim (must not have ended)
    4. Load the account and validate its role
    5. Return SessionContext(principal, session) for the endpoint

    Raises:
        UnauthorizedException: Missing/invalid token or ended session (401)
        InvalidRoleException: Account role is not recognized (403)
    """
    if credentials is None:
        raise UnauthorizedException("Not authenticated")
    return AuthService(db).resolve_session(credentials.credentials)


def get_current_principal(context: SessionContext = Depends(get_session_context)) -> Principal:
    """Only the principal, for endpoints that do not touch the session."""
    return context.principal
