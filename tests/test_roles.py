import logging
from types import SimpleNamespace

import pytest
from ielts_portal.core import roles
from ielts_portal.core.roles import Role


def target(id: int, role: str):
    return SimpleNamespace(id=id, role=role)


class TestRank:
    """Tests for the rank table"""

    def test_total_order(self):
        """SuperAdmin > Admin > Editor > User > invalid"""
        assert (
            roles.rank(Role.SUPER_ADMIN)
            > roles.rank(Role.ADMIN)
            > roles.rank(Role.EDITOR)
            > roles.rank(Role.USER)
            > roles.rank("Guest")
        )

    def test_invalid_roles_rank_zero(self):
        assert roles.rank("Guest") == 0
        assert roles.rank("") == 0
        assert roles.rank(None) == 0

    def test_parsing_is_case_insensitive(self):
        assert roles.rank("superadmin") == 4
        assert roles.rank("ADMIN") == 3
        assert roles.rank(" editor ") == 2
        assert roles.parse_role("user") is Role.USER

    def test_invalid_role_logged_at_debug_only(self, caplog):
        """Resolver lookups stay quiet; the login boundary reports invalid roles"""
        with caplog.at_level(logging.DEBUG, logger="ielts_portal.core.roles"):
            assert roles.parse_role("Moderator") is None
            assert roles.rank("Moderator") == 0

        assert "Moderator" in caplog.text
        assert all(record.levelno == logging.DEBUG for record in caplog.records)

    def test_has_minimum_role(self):
        assert roles.has_minimum_role(Role.ADMIN, Role.EDITOR) is True
        assert roles.has_minimum_role(Role.EDITOR, Role.EDITOR) is True
        assert roles.has_minimum_role(Role.USER, Role.EDITOR) is False
        assert roles.has_minimum_role("Guest", Role.USER) is False


class TestCanAssign:
    """Tests for role assignment"""

    def test_admin_cannot_assign_own_rank(self):
        assert roles.can_assign("Admin", "Admin") is False

    def test_super_admin_can_assign_super_admin(self):
        assert roles.can_assign("SuperAdmin", "SuperAdmin") is True

    @pytest.mark.parametrize(
        "acting, target_role, expected",
        [
            ("Admin", "Editor", True),
            ("Admin", "User", True),
            ("Admin", "SuperAdmin", False),
            ("Editor", "User", True),
            ("Editor", "Editor", False),
            ("Editor", "Admin", False),
            ("User", "User", False),
            ("Guest", "User", False),
        ],
    )
    def test_strictly_lower_ranks_only(self, acting, target_role, expected):
        assert roles.can_assign(acting, target_role) is expected

    def test_assignable_roles_descending(self):
        assert roles.assignable_roles(Role.SUPER_ADMIN) == [Role.SUPER_ADMIN, Role.ADMIN, Role.EDITOR, Role.USER]
        assert roles.assignable_roles(Role.ADMIN) == [Role.EDITOR, Role.USER]
        assert roles.assignable_roles(Role.EDITOR) == [Role.USER]
        assert roles.assignable_roles(Role.USER) == []


class TestCanEdit:
    """Tests for the edit gate"""

    def test_own_account_always_editable(self):
        """An Editor may edit their own record even if it says Admin"""
        assert roles.can_edit(7, "Editor", target(7, "Admin")) is True

    def test_admin_edits_editor(self):
        assert roles.can_edit(1, "Admin", target(2, "Editor")) is True

    def test_editor_cannot_edit_other_editor(self):
        assert roles.can_edit(1, "Editor", target(2, "Editor")) is False

    def test_admin_cannot_edit_other_admin(self):
        assert roles.can_edit(1, "Admin", target(2, "Admin")) is False

    def test_super_admin_edits_anyone(self):
        assert roles.can_edit(1, "SuperAdmin", target(2, "SuperAdmin")) is True
        assert roles.can_edit(1, "SuperAdmin", target(2, "Admin")) is True

    def test_invalid_target_role_is_lowest(self):
        assert roles.can_edit(1, "User", target(2, "Legacy")) is True


class TestCanDelete:
    """Tests for the delete gate"""

    def test_super_admin_cannot_delete_self(self):
        assert roles.can_delete(1, "SuperAdmin", target(1, "SuperAdmin")) is False

    def test_nobody_deletes_self(self):
        for role in Role:
            assert roles.can_delete(5, role, target(5, Role.USER.value)) is False

    def test_admin_deletes_editor(self):
        assert roles.can_delete(1, "Admin", target(2, "Editor")) is True

    def test_editor_cannot_delete_other_editor(self):
        assert roles.can_delete(1, "Editor", target(2, "Editor")) is False

    def test_user_cannot_delete_user(self):
        assert roles.can_delete(1, "User", target(2, "User")) is False


def test_resolver_functions_are_pure():
    """Same inputs, same outputs, inputs untouched"""
    account = target(2, "Editor")
    results = [
        (
            roles.rank("Admin"),
            roles.can_assign("Admin", "Editor"),
            roles.can_edit(1, "Admin", account),
            roles.can_delete(1, "Admin", account),
        )
        for _ in range(3)
    ]

    assert results == [(3, True, True, True)] * 3
    assert account.role == "Editor" and account.id == 2
