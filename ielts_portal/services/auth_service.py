import logging
from uuid import uuid4
from sqlalchemy.orm import Session

from ielts_portal.core.exceptions import (
    ForbiddenException,
    InvalidRoleException,
    UnauthorizedException,
)
from ielts_portal.core.navigation import initial_state
from ielts_portal.core.roles import parse_role
from ielts_portal.core.security import create_access_token, extract_token_identity, verify_password
from ielts_portal.models.managed_account import ManagedAccount
from ielts_portal.models.portal_session import PortalSession
from ielts_portal.models.principal import Principal, SessionContext
from ielts_portal.repositories.session_repository import SessionRepository
from ielts_portal.repositories.user_repository import UserRepository
from ielts_portal.services.activity_service import ActivityService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password."


class AuthService:
    """
    Login/session boundary.

    The only place where a stored role becomes a Principal role: accounts
    whose role is not recognised are rejected here instead of being
    silently downgraded.
    """

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.session_repo = SessionRepository(db)
        self.activity = ActivityService(db)

    def _principal_for(self, account: ManagedAccount) -> Principal:
        role = parse_role(account.role)
        if role is None:
            logger.error("Account %s carries unrecognized role %r", account.id, account.role)
            raise InvalidRoleException(f"Account role '{account.role}' is not recognized")
        return Principal.from_account(account, role)

    def authenticate(self, email: str, password: str) -> tuple[str, SessionContext]:
        """
        Verify credentials and open a new portal session.

        Args:
            email: Account e-mail (case-insensitive)
            password: Plain password

        Returns:
            Tuple of (access_token, session context)

        Raises:
            UnauthorizedException: Unknown e-mail or wrong password
            ForbiddenException: Account is inactive
            InvalidRoleException: Stored role is not a known role
        """
        account = self.user_repo.get_by_email(email)
        if account is None or not verify_password(password, account.password_hash):
            logger.warning("Failed login for %s", email)
            raise UnauthorizedException(INVALID_CREDENTIALS)

        if not account.is_active:
            logger.warning("Login refused for inactive account %s", account.id)
            raise ForbiddenException("This account is inactive")

        principal = self._principal_for(account)

        portal_session = PortalSession(id=uuid4().hex, user_id=account.id)
        portal_session.apply_view_state(initial_state())
        portal_session = self.session_repo.create(portal_session)

        token = create_access_token(account.id, portal_session.id)
        self.activity.log_activity(principal.display_name, "logged in")
        return token, SessionContext(principal=principal, session=portal_session)

    def resolve_session(self, token: str) -> SessionContext:
        """
        Turn a bearer token into the current session context.

        Raises:
            UnauthorizedException: Token invalid, session ended, account gone or inactive
            InvalidRoleException: Account role became unrecognized
        """
        user_id, session_id = extract_token_identity(token)

        portal_session = self.session_repo.get_active(session_id, user_id)
        if portal_session is None:
            raise UnauthorizedException("Session has ended or does not exist")

        account = self.user_repo.get_by_id(user_id)
        if account is None:
            raise UnauthorizedException("Account no longer exists")
        if not account.is_active:
            raise UnauthorizedException("This account is inactive")

        return SessionContext(principal=self._principal_for(account), session=portal_session)

    def end_session(self, context: SessionContext) -> None:
        """Logout: the session's token stops working immediately."""
        self.session_repo.end(context.session)
        self.activity.log_activity(context.principal.display_name, "logged out")
