import logging
from datetime import date
from typing import Any, Iterable, Mapping, Optional

from app.core.exceptions import ForbiddenException
from app.models import role as role_model
from app.models.decision import Action, Decision
from app.models.transaction import LedgerView, RecordSnapshot
from app.models.user import UserSnapshot
from app.services import action_authorization, tenant_isolation, visibility_policy
from app.services.action_authorization import Target

logger = logging.getLogger(__name__)


class AccessDecisionService:
    """
    Single entry point for every access and visibility decision.

    Composes the role model, tenant isolation, visibility policy and
    action authorization. API handlers and UI views call this instead of
    comparing roles themselves.

    The service is a pure function of the snapshots it is given plus its
    immutable configuration; it holds no other state and performs no I/O.
    """

    def __init__(
        self,
        reserved_tenant_id: str,
        adult_age: int = 18,
        today: date | None = None,
        caller_id: Optional[str] = None,
    ):
        self.reserved_tenant_id = reserved_tenant_id
        self.adult_age = adult_age
        # Collaborator that asked for the decisions, for the logs only
        self.caller_id = caller_id or "in-process"
        # Fixed per instance so every decision in a request sees the same date
        self.today = today or date.today()

    def in_scope(self, actor: UserSnapshot, candidate: UserSnapshot) -> bool:
        """Check if actor may enumerate candidate (and candidate's records)."""
        return tenant_isolation.in_scope(actor, candidate)

    def visible_users(
        self, actor: UserSnapshot, users: Iterable[UserSnapshot]
    ) -> list[UserSnapshot]:
        """Users actor may list, in input order."""
        return tenant_isolation.visible_users(actor, users)

    def pending_users(
        self, actor: UserSnapshot, users: Iterable[UserSnapshot]
    ) -> list[UserSnapshot]:
        """
        Pending registrations actor could moderate.

        Empty for anyone who is not ADMIN / SUPER_ADMIN.
        """
        if not actor.role.is_admin:
            return []
        return [user for user in users if user.is_pending]

    def can_access_admin_panel(self, actor: UserSnapshot) -> bool:
        return role_model.can_access_admin_panel(actor.role)

    def can_access_translations(self, actor: UserSnapshot) -> bool:
        """Translation editor access; independent of any financial scope."""
        return role_model.can_access_translations(actor.role)

    def should_mask_amount(self, viewer: UserSnapshot, owner: UserSnapshot) -> bool:
        """
        Decide whether owner's amounts must be hidden from viewer.

        A user is never masked to themself. An out-of-scope owner is always
        masked, so a value cannot leak even if the caller skipped the
        scope check.
        """
        if viewer.id == owner.id:
            return False
        if not self.in_scope(viewer, owner):
            logger.debug("Masking out-of-scope owner %s for viewer %s", owner.id, viewer.id)
            return True
        return visibility_policy.should_mask_amount(viewer, owner, self.today, self.adult_age)

    def mask_transactions(
        self,
        viewer: UserSnapshot,
        users: Iterable[UserSnapshot],
        records: Iterable[RecordSnapshot],
    ) -> LedgerView:
        """
        Build the ledger a viewer is allowed to see.

        Args:
            viewer: Viewing user
            users: User snapshots for the record owners
            records: Candidate records

        Returns:
            LedgerView with out-of-scope records removed, masked records
            zeroed, and totals that ignore masked amounts
        """
        owners = {viewer.id: viewer, **{user.id: user for user in users}}
        scoped = tenant_isolation.records_in_scope(viewer, records, owners)
        view = visibility_policy.mask_records(
            viewer, scoped, owners, self.today, self.adult_age
        )
        logger.debug(
            "Ledger for viewer %s (caller %s): %d records, masked data: %s",
            viewer.id,
            self.caller_id,
            len(view.records),
            view.has_masked_data,
        )
        return view

    def authorize(self, actor: UserSnapshot, target: Target, action: Action) -> Decision:
        """
        Decide whether actor may perform action on target.

        Returns:
            Decision; never raises
        """
        decision = action_authorization.authorize(
            actor, target, action, self.reserved_tenant_id
        )
        if decision.allowed:
            logger.debug(
                "Allow %s by %s on %s (caller %s)",
                action.value,
                actor.id,
                target.id,
                self.caller_id,
            )
        else:
            logger.info(
                "Deny %s by %s on %s: %s (caller %s)",
                action.value,
                actor.id,
                target.id,
                decision.reason.value,
                self.caller_id,
            )
        return decision

    def enforce(self, actor: UserSnapshot, target: Target, action: Action) -> None:
        """
        Authorize and abort on Deny.

        Raises:
            ForbiddenException: Carrying the deny reason
        """
        decision = self.authorize(actor, target, action)
        if not decision.allowed:
            raise ForbiddenException(
                f"Not allowed to {action.value.lower().replace('_', ' ')}",
                reason=decision.reason,
            )

    def filter_profile_changes(
        self, actor: UserSnapshot, target: UserSnapshot, changes: Mapping[str, Any]
    ) -> tuple[dict[str, Any], list[str]]:
        """
        Authorize a profile edit and drop fields actor may not change.

        Returns:
            Tuple of (applicable changes, silently dropped field names)

        Raises:
            ForbiddenException: If actor may not edit target at all
        """
        self.enforce(actor, target, Action.EDIT_PROFILE)
        applied, dropped = action_authorization.filter_profile_changes(actor, changes)
        if dropped:
            logger.info(
                "Ignoring %s in profile edit of %s by %s (caller %s)",
                ", ".join(dropped),
                target.id,
                actor.id,
                self.caller_id,
            )
        return applied, dropped
