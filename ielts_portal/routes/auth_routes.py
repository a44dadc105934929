from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ielts_portal.database import get_db
from ielts_portal.dependencies import get_current_principal, get_session_context
from ielts_portal.models.principal import Principal, SessionContext
from ielts_portal.services.auth_service import AuthService
from ielts_portal.schemas.auth_schemas import (
    LoginRequest,
    LogoutResponse,
    PrincipalResponse,
    TokenResponse,
)

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """
    Log in with e-mail and password.

    - Opens a new portal session on the Dashboard
    - Inactive accounts and accounts with an unrecognized role are refused (403)
    """
    service = AuthService(db)
    token, context = service.authenticate(credentials.email, credentials.password)
    return TokenResponse(access_token=token, user=PrincipalResponse.model_validate(context.principal))


@router.get("/me", response_model=PrincipalResponse)
def read_current_principal(principal: Principal = Depends(get_current_principal)):
    """Return the authenticated principal"""
    return principal


@router.post("/logout", response_model=LogoutResponse)
def logout(context: SessionContext = Depends(get_session_context), db: Session = Depends(get_db)):
    """End the current session; its token stops working"""
    service = AuthService(db)
    service.end_session(context)
    return {"message": "Logged out"}
