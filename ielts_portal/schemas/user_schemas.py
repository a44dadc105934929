from datetime import datetime
from pydantic import BaseModel, Field
from ielts_portal.core.roles import Role

EMAIL_PATTERN = r"^\S+@\S+$"


class UserCreate(BaseModel):
    """Schema for creating a managed account"""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6, max_length=128)
    role: Role = Field(default=Role.USER, description="Role to assign (default: User)")
    is_active: bool = True
    referral_code: str | None = Field(None, min_length=1, max_length=32)
    referred_by: str | None = Field(None, max_length=32)
    discount_amount: int | None = Field(None, ge=0, le=100, description="Percent, null for none")


class UserUpdate(BaseModel):
    """Schema for editing a managed account (password optional)"""

    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    email: str | None = Field(None, max_length=255, pattern=EMAIL_PATTERN)
    password: str | None = Field(None, min_length=6, max_length=128)
    role: Role | None = None
    is_active: bool | None = None
    referral_code: str | None = Field(None, min_length=1, max_length=32)
    referred_by: str | None = Field(None, max_length=32)
    discount_amount: int | None = Field(None, ge=0, le=100)


class UserResponse(BaseModel):
    """Managed account with the gate results for the acting principal"""

    id: int
    first_name: str
    last_name: str
    full_name: str
    email: str
    role: str  # Raw stored value, may be a legacy role
    is_active: bool
    referral_code: str
    referred_by: str | None
    discount_amount: int | None
    created_by: str
    created_at: datetime
    edited_by: str | None
    edited_at: datetime | None
    can_edit: bool
    can_delete: bool


class UserListResponse(BaseModel):
    """Schema for list of managed accounts"""

    users: list[UserResponse]
    total: int


class AssignableRolesResponse(BaseModel):
    roles: list[Role]


class UserDeleteResponse(BaseModel):
    message: str
    deleted_user_id: int
