import logging
from dataclasses import replace
from datetime import date

import pytest
from app.core.exceptions import ForbiddenException
from app.models.decision import Action, Decision, DenyReason
from app.models.role import Role
from app.models.tenant import Tenant
from app.models.transaction import RecordSnapshot, TransactionType
from app.models.user import UserStatus
from app.services.access_service import AccessDecisionService
from tests.conftest import FAMILY_A, TODAY, make_user


class TestShouldMaskAmount:
    """Tests for the façade's masking guard rails"""

    @pytest.mark.parametrize("role", list(Role))
    def test_self_never_masked(self, service, role):
        """Adult without consent, any role: own data is always visible"""
        user = make_user("u", role=role, birth_date=date(1980, 1, 1))
        assert not service.should_mask_amount(user, user)

    def test_out_of_scope_owner_masked(self, service, manager, other_family_member):
        """Even a minor is masked when the viewer cannot enumerate them"""
        minor_elsewhere = replace(other_family_member, birth_date=date(2015, 1, 1))
        assert service.should_mask_amount(manager, minor_elsewhere)

    def test_translator_sees_no_amounts(self, service, translator, minor_child):
        assert service.should_mask_amount(translator, minor_child)

    def test_manager_scenario(self, service, manager, adult_child):
        """Manager M, member B aged 22 created by M: masked until B consents"""
        assert service.should_mask_amount(manager, adult_child)
        assert not service.should_mask_amount(
            manager, replace(adult_child, allow_parent_view=True)
        )

    def test_minor_scenario(self, service, manager, admin, minor_child):
        for flag in (True, False):
            owner = replace(minor_child, allow_parent_view=flag)
            assert not service.should_mask_amount(manager, owner)
            assert not service.should_mask_amount(admin, owner)

    def test_today_is_pinned(self, manager):
        """The same owner turns adult between two evaluation dates"""
        owner = make_user("u_teen", created_by=manager.id, birth_date=date(2008, 1, 1))
        before = AccessDecisionService("fam_admin", today=date(2025, 12, 1))
        after = AccessDecisionService("fam_admin", today=date(2026, 3, 1))

        assert not before.should_mask_amount(manager, owner)
        assert after.should_mask_amount(manager, owner)


class TestMaskTransactions:
    """Tests for scope filter + masking + totals in one call"""

    def test_ledger_for_manager(self, service, manager, adult_child, minor_child, other_family_member):
        users = [manager, adult_child, minor_child, other_family_member]
        records = [
            RecordSnapshot("t1", manager.id, 500.0, "Salary", TransactionType.INCOME, date(2026, 5, 1)),
            RecordSnapshot("t2", adult_child.id, 300.0, "Salary", TransactionType.INCOME, date(2026, 5, 1)),
            RecordSnapshot("t3", minor_child.id, 15.0, "Books", TransactionType.EXPENSE, date(2026, 5, 2)),
            RecordSnapshot("t4", other_family_member.id, 99.0, "Rent", TransactionType.EXPENSE, date(2026, 5, 3)),
        ]

        ledger = service.mask_transactions(manager, users, records)

        assert [r.id for r in ledger.records] == ["t1", "t2", "t3"]
        assert [r.is_masked for r in ledger.records] == [False, True, False]
        assert ledger.total_income == 500.0
        assert ledger.total_expense == 15.0
        assert ledger.balance == 485.0
        assert ledger.has_masked_data

    def test_member_sees_only_own_records(self, service, adult_child, minor_child):
        records = [
            RecordSnapshot("t1", adult_child.id, 40.0, "Food", TransactionType.EXPENSE, date(2026, 5, 1)),
            RecordSnapshot("t2", minor_child.id, 15.0, "Books", TransactionType.EXPENSE, date(2026, 5, 2)),
        ]

        ledger = service.mask_transactions(adult_child, [adult_child, minor_child], records)

        assert [r.id for r in ledger.records] == ["t1"]
        assert not ledger.has_masked_data
        assert ledger.total_expense == 40.0

    def test_viewer_owns_records_without_repeating_self(self, service, manager, adult_child):
        """users lists only the other owners; the viewer's own rows still count"""
        records = [
            RecordSnapshot("t1", manager.id, 500.0, "Salary", TransactionType.INCOME, date(2026, 5, 1)),
        ]

        ledger = service.mask_transactions(manager, [adult_child], records)

        assert [r.id for r in ledger.records] == ["t1"]
        assert not ledger.records[0].is_masked
        assert ledger.total_income == 500.0


class TestAuthorize:
    """Tests for authorize / enforce through the façade"""

    def test_reserved_tenant_from_config(self, super_admin):
        service = AccessDecisionService(reserved_tenant_id="fam_root", today=TODAY)
        assert service.authorize(super_admin, Tenant(id="fam_root"), Action.DELETE_TENANT) == (
            Decision.deny(DenyReason.PROTECTED_TENANT)
        )
        assert service.authorize(super_admin, Tenant(id="fam_admin"), Action.DELETE_TENANT)

    def test_enforce_allows_silently(self, service, manager, adult_child):
        service.enforce(manager, adult_child, Action.DELETE_USER)

    def test_enforce_raises_with_reason(self, service, admin, super_admin):
        with pytest.raises(ForbiddenException) as exc_info:
            service.enforce(admin, super_admin, Action.DELETE_USER)

        assert exc_info.value.reason == DenyReason.INSUFFICIENT_ROLE
        assert "delete user" in str(exc_info.value)

    def test_deny_is_logged(self, service, manager, caplog):
        with caplog.at_level(logging.INFO, logger="app.services.access_service"):
            service.authorize(manager, manager, Action.DELETE_USER)

        assert "SELF_ACTION_FORBIDDEN" in caplog.text

    def test_deny_log_names_caller(self, manager, caplog):
        service = AccessDecisionService("fam_admin", today=TODAY, caller_id="ui-backend")
        with caplog.at_level(logging.INFO, logger="app.services.access_service"):
            service.authorize(manager, manager, Action.DELETE_USER)

        assert "caller ui-backend" in caplog.text


class TestFilterProfileChanges:
    """Tests for profile edit authorization through the façade"""

    def test_manager_edit_keeps_role(self, service, manager, adult_child):
        changes, dropped = service.filter_profile_changes(
            manager, adult_child, {"role": Role.MANAGER, "birth_date": "2004-01-16"}
        )
        assert changes == {"birth_date": "2004-01-16"}
        assert dropped == ["role"]

    def test_out_of_scope_edit_forbidden(self, service, manager, other_family_member):
        with pytest.raises(ForbiddenException) as exc_info:
            service.filter_profile_changes(manager, other_family_member, {"name": "X"})

        assert exc_info.value.reason == DenyReason.OUT_OF_SCOPE


class TestPendingUsers:
    """Tests for the moderation queue"""

    def test_admin_sees_pending(self, service, admin, pending_member, manager):
        assert service.pending_users(admin, [pending_member, manager]) == [pending_member]

    def test_manager_sees_none(self, service, manager):
        pending = make_user("u_p", family_id=FAMILY_A, status=UserStatus.PENDING)
        assert service.pending_users(manager, [pending]) == []

class TestCapabilities:
    """Tests for the screen capability checks"""

    @pytest.mark.parametrize(
        "role,admin_panel,translations",
        [
            (Role.SUPER_ADMIN, True, True),
            (Role.ADMIN, True, False),
            (Role.MANAGER, True, False),
            (Role.TRANSLATOR, False, True),
            (Role.MEMBER, False, False),
        ],
    )
    def test_capabilities_by_role(self, service, role, admin_panel, translations):
        actor = make_user("u", role=role)
        assert service.can_access_admin_panel(actor) is admin_panel
        assert service.can_access_translations(actor) is translations
