import logging
import secrets
from sqlalchemy.orm import Session

from ielts_portal.core import roles
from ielts_portal.core.exceptions import (
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from ielts_portal.core.roles import Role
from ielts_portal.core.security import hash_password
from ielts_portal.models.base import utcnow
from ielts_portal.models.managed_account import ManagedAccount
from ielts_portal.models.principal import SessionContext
from ielts_portal.repositories.user_repository import UserRepository
from ielts_portal.schemas.user_schemas import UserCreate, UserUpdate
from ielts_portal.services.activity_service import ActivityService

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = "An account with this email already exists."

# Columns an edit may not set to null
_REQUIRED_FIELDS = frozenset({"first_name", "last_name", "email", "referral_code", "is_active"})


class UserService:
    """Service layer for Users Management business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.activity = ActivityService(db)

    def _require_users_management(self, context: SessionContext) -> None:
        if not context.has_permission(Role.EDITOR):
            raise ForbiddenException("Users Management requires Editor or higher")

    def _deny(self, context: SessionContext, message: str) -> None:
        logger.warning("Denied for user %s (%s): %s", context.principal.id, context.principal.role.value, message)
        raise ForbiddenException(message)

    def _to_row(self, account: ManagedAccount, context: SessionContext) -> dict:
        principal = context.principal
        return {
            "id": account.id,
            "first_name": account.first_name,
            "last_name": account.last_name,
            "full_name": account.full_name,
            "email": account.email,
            "role": account.role,
            "is_active": account.is_active,
            "referral_code": account.referral_code,
            "referred_by": account.referred_by,
            "discount_amount": account.discount_amount,
            "created_by": account.created_by,
            "created_at": account.created_at,
            "edited_by": account.edited_by,
            "edited_at": account.edited_at,
            "can_edit": roles.can_edit(principal.id, principal.role, account),
            "can_delete": roles.can_delete(principal.id, principal.role, account),
        }

    def _get_account(self, user_id: int) -> ManagedAccount:
        account = self.user_repo.get_by_id(user_id)
        if account is None:
            raise NotFoundException(f"User {user_id} not found")
        return account

    def _check_super_admin_slot(self, role: Role, exclude_user_id: int | None = None) -> None:
        """At most one SuperAdmin may exist system-wide."""
        if role is Role.SUPER_ADMIN and self.user_repo.count_super_admins(exclude_user_id) > 0:
            raise ValidationException("A SuperAdmin account already exists")

    def _check_email_free(self, email: str, exclude_user_id: int | None = None) -> None:
        existing = self.user_repo.get_by_email(email)
        if existing is not None and existing.id != exclude_user_id:
            raise ValidationException(DUPLICATE_EMAIL)

    def _new_referral_code(self) -> str:
        while True:
            code = secrets.token_hex(4).upper()
            if not self.user_repo.referral_code_exists(code):
                return code

    def list_users(self, context: SessionContext, search: str | None = None) -> list[dict]:
        """
        List managed accounts with the gate results for the principal.

        Args:
            context: Session context
            search: Case-insensitive filter on the full name

        Returns:
            List of account rows with can_edit / can_delete flags
        """
        self._require_users_management(context)
        return [self._to_row(account, context) for account in self.user_repo.get_all(search)]

    def get_user(self, user_id: int, context: SessionContext) -> dict:
        self._require_users_management(context)
        return self._to_row(self._get_account(user_id), context)

    def assignable_roles(self, context: SessionContext) -> list[Role]:
        self._require_users_management(context)
        return roles.assignable_roles(context.principal.role)

    def create_user(self, data: UserCreate, context: SessionContext) -> dict:
        """
        Create a managed account.

        Raises:
            ForbiddenException: The principal may not assign the requested role
            ValidationException: Duplicate e-mail or a second SuperAdmin
        """
        self._require_users_management(context)
        principal = context.principal

        if not roles.can_assign(principal.role, data.role):
            self._deny(context, f"You do not have permission to assign the role '{data.role.value}'")
        self._check_super_admin_slot(data.role)
        self._check_email_free(data.email)

        account = ManagedAccount(
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email.strip(),
            password_hash=hash_password(data.password),
            role=data.role.value,
            is_active=data.is_active,
            referral_code=data.referral_code or self._new_referral_code(),
            referred_by=data.referred_by,
            discount_amount=data.discount_amount,
            created_by=principal.display_name,
        )
        account = self.user_repo.create(account)

        self.activity.log_activity(
            principal.display_name,
            f"created new user '{account.full_name}' with role '{account.role}'",
        )
        return self._to_row(account, context)

    def update_user(self, user_id: int, data: UserUpdate, context: SessionContext) -> dict:
        """
        Edit a managed account.

        One's own account is always editable, but its role cannot be
        changed and it cannot be deactivated from here.

        Raises:
            NotFoundException: Unknown account
            ForbiddenException: Rank does not allow the edit or the role change
            ValidationException: Duplicate e-mail or a second SuperAdmin
        """
        self._require_users_management(context)
        principal = context.principal
        account = self._get_account(user_id)
        is_self = account.id == principal.id

        if not roles.can_edit(principal.id, principal.role, account):
            self._deny(context, f"You do not have permission to edit users with role '{account.role}' or higher")

        changes = data.model_dump(exclude_unset=True)

        if changes.get("email"):
            changes["email"] = changes["email"].strip()
            self._check_email_free(changes["email"], exclude_user_id=account.id)

        new_role = changes.pop("role", None)
        if new_role is not None and roles.parse_role(account.role) is not new_role:
            if is_self:
                self._deny(context, "Cannot change your own role")
            if not roles.can_assign(principal.role, new_role):
                self._deny(context, f"You do not have permission to assign the role '{new_role.value}'")
            self._check_super_admin_slot(new_role, exclude_user_id=account.id)
            account.role = new_role.value

        if is_self and changes.get("is_active") is False:
            self._deny(context, "Cannot deactivate your own account")

        password = changes.pop("password", None)
        if password:
            account.password_hash = hash_password(password)

        for field, value in changes.items():
            if value is None and field in _REQUIRED_FIELDS:
                continue
            setattr(account, field, value)

        account.edited_by = principal.display_name
        account.edited_at = utcnow()
        account = self.user_repo.update(account)

        self.activity.log_activity(
            principal.display_name,
            f"updated user '{account.full_name}' (Role: {account.role})",
        )
        return self._to_row(account, context)

    def delete_user(self, user_id: int, context: SessionContext) -> None:
        """
        Delete a managed account.

        Raises:
            NotFoundException: Unknown account
            ForbiddenException: Own account, or rank does not allow it
        """
        self._require_users_management(context)
        principal = context.principal
        account = self._get_account(user_id)

        if account.id == principal.id:
            self._deny(context, "You cannot delete your own account")
        if not roles.can_delete(principal.id, principal.role, account):
            self._deny(context, f"You do not have permission to delete users with role '{account.role}' or higher")

        full_name = account.full_name
        self.user_repo.delete(account)
        self.activity.log_activity(principal.display_name, f"deleted user '{full_name}'")
