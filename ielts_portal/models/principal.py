"""Principal and session context for request authorization."""

from dataclasses import dataclass

from ielts_portal.core.roles import Role, has_minimum_role
from ielts_portal.models.managed_account import ManagedAccount
from ielts_portal.models.portal_session import PortalSession


@dataclass(frozen=True)
class Principal:
    """
    The authenticated actor operating the portal.

    Built from a ManagedAccount at login (and on each request) once its
    role has been validated; role is never an unknown value here.
    """

    id: int
    display_name: str
    email: str
    role: Role
    active: bool

    @classmethod
    def from_account(cls, account: ManagedAccount, role: Role) -> "Principal":
        return cls(
            id=account.id,
            display_name=account.full_name,
            email=account.email,
            role=role,
            active=account.is_active,
        )


@dataclass
class SessionContext:
    """
    Complete session context for request authorization.

    Passed explicitly to services instead of living in global state.

    Attributes:
        principal: The authenticated actor
        session: The persisted portal session the token belongs to
    """

    principal: Principal
    session: PortalSession

    def has_permission(self, required_role: Role) -> bool:
        """Check if the principal's role meets or exceeds required role."""
        return has_minimum_role(self.principal.role, required_role)

    def __repr__(self) -> str:
        return (
            f"<SessionContext(user_id={self.principal.id}, session_id={self.session.id}, "
            f"role={self.principal.role.value})>"
        )
