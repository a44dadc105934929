from sqlalchemy import func
from sqlalchemy.orm import Session
from ielts_portal.core.roles import Role
from ielts_portal.models.managed_account import ManagedAccount


class UserRepository:
    """Repository for ManagedAccount model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> ManagedAccount | None:
        """Get account by internal ID"""
        return self.db.query(ManagedAccount).filter(ManagedAccount.id == user_id).first()

    def get_by_email(self, email: str) -> ManagedAccount | None:
        """Get account by e-mail (case-insensitive)"""
        return (
            self.db.query(ManagedAccount)
            .filter(func.lower(ManagedAccount.email) == email.strip().lower())
            .first()
        )

    def get_all(self, search: str | None = None) -> list[ManagedAccount]:
        """
        List accounts ordered by creation, optionally filtered by name.

        Args:
            search: Case-insensitive substring of "first last"

        Returns:
            List of ManagedAccount objects
        """
        query = self.db.query(ManagedAccount)
        if search:
            full_name = func.lower(ManagedAccount.first_name + " " + ManagedAccount.last_name)
            # % and _ are matched literally
            query = query.filter(full_name.contains(search.strip().lower(), autoescape=True))
        return query.order_by(ManagedAccount.id).all()

    def count(self, active_only: bool = False) -> int:
        query = self.db.query(ManagedAccount)
        if active_only:
            query = query.filter(ManagedAccount.is_active.is_(True))
        return query.count()

    def count_super_admins(self, exclude_user_id: int | None = None) -> int:
        """
        Count SuperAdmin accounts (stored role compared case-insensitively).

        Args:
            exclude_user_id: Account to leave out, e.g. the one being edited
        """
        query = self.db.query(ManagedAccount).filter(
            func.lower(ManagedAccount.role) == Role.SUPER_ADMIN.value.lower()
        )
        if exclude_user_id is not None:
            query = query.filter(ManagedAccount.id != exclude_user_id)
        return query.count()

    def referral_code_exists(self, code: str) -> bool:
        return (
            self.db.query(ManagedAccount.id)
            .filter(ManagedAccount.referral_code == code)
            .first()
            is not None
        )

    def create(self, account: ManagedAccount) -> ManagedAccount:
        """Create new account"""
        self.db.add(account)
        self.db.commit()
        self.db.refresh(account)
        return account

    def update(self, account: ManagedAccount) -> ManagedAccount:
        """Update existing account"""
        self.db.commit()
        self.db.refresh(account)
        return account

    def delete(self, account: ManagedAccount) -> None:
        """Delete account (cascades to sessions and answers)"""
        self.db.delete(account)
        self.db.commit()
