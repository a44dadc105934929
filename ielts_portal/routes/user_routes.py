from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ielts_portal.database import get_db
from ielts_portal.dependencies import get_session_context
from ielts_portal.models.principal import SessionContext
from ielts_portal.services.user_service import UserService
from ielts_portal.schemas.user_schemas import (
    AssignableRolesResponse,
    UserCreate,
    UserDeleteResponse,
    UserListResponse,
    UserResponse,
    UserUpdate,
)

router = APIRouter()


@router.get("", response_model=UserListResponse)
def list_users(
    search: Optional[str] = Query(None, max_length=200, description="Filter by full name"),
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """
    List managed accounts.

    - **Requires Editor or higher**
    - Each row tells whether the principal may edit / delete it
    """
    service = UserService(db)
    users = service.list_users(context, search)
    return UserListResponse(users=users, total=len(users))


@router.get("/assignable-roles", response_model=AssignableRolesResponse)
def list_assignable_roles(
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Roles the principal may give to new or edited accounts"""
    service = UserService(db)
    return {"roles": service.assignable_roles(context)}


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    service = UserService(db)
    return service.get_user(user_id, context)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserCreate,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """
    Create a managed account.

    - Role must rank strictly below the principal's (SuperAdmin may assign any)
    - Only one SuperAdmin may exist
    - E-mail must be unused
    """
    service = UserService(db)
    return service.create_user(data, context)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    data: UserUpdate,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """
    Edit a managed account.

    - Own account is always editable (but not its role)
    - Others only below the principal's rank, unless SuperAdmin
    """
    service = UserService(db)
    return service.update_user(user_id, data, context)


@router.delete("/{user_id}", response_model=UserDeleteResponse)
def delete_user(
    user_id: int,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """
    Delete a managed account.

    - Never one's own account
    - Others only below the principal's rank, unless SuperAdmin
    """
    service = UserService(db)
    service.delete_user(user_id, context)
    return {"message": "User deleted successfully", "deleted_user_id": user_id}
