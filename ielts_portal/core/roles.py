"""Role authority resolver: the single home of the portal's role hierarchy."""

import logging
from enum import Enum as PyEnum
from typing import Protocol

logger = logging.getLogger(__name__)


class Role(str, PyEnum):
    """
    Portal roles with hierarchical permissions.

    Role Hierarchy (highest to lowest):
    1. SUPER_ADMIN - Everything, may assign any role
    2. ADMIN - Manage users below Admin, subscriptions, exercises
    3. EDITOR - Manage exercises, manage plain users
    4. USER - Dashboard and the task workspace only
    """

    SUPER_ADMIN = "SuperAdmin"
    ADMIN = "Admin"
    EDITOR = "Editor"
    USER = "User"


ROLE_RANK: dict[Role, int] = {
    Role.SUPER_ADMIN: 4,
    Role.ADMIN: 3,
    Role.EDITOR: 2,
    Role.USER: 1,
}

# Rank of anything that is not a known role; strictly below USER
INVALID_ROLE_RANK = 0

_ROLES_BY_KEY = {role.value.lower(): role for role in Role}


class RoleHolder(Protocol):
    """Anything with an id and a role, e.g. a managed account."""

    id: int
    role: "Role | str | None"


def parse_role(value: "Role | str | None") -> Role | None:
    """
    Normalize a role value coming from storage or a client.

    Matching is case-insensitive ("superadmin", "ADMIN" ...).

    Args:
        value: Raw role value

    Returns:
        The Role, or None when the value is not a known role
    """
    if isinstance(value, Role):
        return value
    if isinstance(value, str):
        role = _ROLES_BY_KEY.get(value.strip().lower())
        if role is not None:
            return role
    logger.debug("Unrecognized role %r treated as lowest privilege", value)
    return None


def rank(role: "Role | str | None") -> int:
    """
    Privilege level of a role.

    SuperAdmin (4) > Admin (3) > Editor (2) > User (1) > invalid (0)
    """
    parsed = parse_role(role)
    if parsed is None:
        return INVALID_ROLE_RANK
    return ROLE_RANK[parsed]


def is_super_admin(role: "Role | str | None") -> bool:
    return parse_role(role) is Role.SUPER_ADMIN


def has_minimum_role(role: "Role | str | None", minimum: Role) -> bool:
    """Check if role meets or exceeds the minimum role."""
    return rank(role) >= ROLE_RANK[minimum]


def can_assign(acting_role: "Role | str | None", target_role: "Role | str | None") -> bool:
    """
    Check if acting_role may give target_role to an account.

    Only roles strictly below the actor's own rank can be assigned,
    except for SuperAdmin who may assign any role.
    """
    if is_super_admin(acting_role):
        return True
    return rank(target_role) < rank(acting_role)


def can_edit(acting_principal_id: int, acting_role: "Role | str | None", target: RoleHolder) -> bool:
    """
    Check if the principal may edit the target account.

    Editing one's own account is always allowed. Otherwise the target
    must rank strictly below the actor, or the actor is SuperAdmin.
    """
    if target.id == acting_principal_id:
        return True
    return rank(target.role) < rank(acting_role) or is_super_admin(acting_role)


def can_delete(acting_principal_id: int, acting_role: "Role | str | None", target: RoleHolder) -> bool:
    """
    Check if the principal may delete the target account.

    Deleting one's own account is never allowed, not even for SuperAdmin.
    """
    if target.id == acting_principal_id:
        return False
    return rank(target.role) < rank(acting_role) or is_super_admin(acting_role)


def assignable_roles(acting_role: "Role | str | None") -> list[Role]:
    """Roles the actor may assign, highest rank first."""
    ordered = sorted(Role, key=lambda role: ROLE_RANK[role], reverse=True)
    return [role for role in ordered if can_assign(acting_role, role)]
