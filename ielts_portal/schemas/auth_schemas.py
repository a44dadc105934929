from pydantic import BaseModel, Field
from ielts_portal.core.roles import Role


class LoginRequest(BaseModel):
    """Credentials for POST /api/auth/login"""

    email: str = Field(..., min_length=3, max_length=255, pattern=r"^\S+@\S+$")
    password: str = Field(..., min_length=1)


class PrincipalResponse(BaseModel):
    """The authenticated actor"""

    id: int
    display_name: str
    email: str
    role: Role
    active: bool

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    """Login result"""

    access_token: str
    token_type: str = "bearer"
    user: PrincipalResponse


class LogoutResponse(BaseModel):
    message: str
