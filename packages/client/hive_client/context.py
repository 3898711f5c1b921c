"""
Active-organization context.

Tracks who the user is, which organizations they belong to, and which one is
selected, and keeps the derived role/permissions in step with all three.
"""

from __future__ import annotations

from typing import Iterable, Optional

import structlog

from hive_shared.schemas.common import GlobalRole, MembershipRole, Permission
from hive_shared.schemas.organizations import Membership, Organization
from hive_shared.schemas.users import User

from .http import HttpClient
from .listings import organization_detail_query
from .permissions import NO_ACCESS, ResolvedAccess, resolve

log = structlog.get_logger()


class OrganizationContext:
    """User + memberships + selected organization, with derived access."""

    def __init__(
        self,
        user: Optional[User] = None,
        memberships: Iterable[Membership] = (),
    ) -> None:
        self._user = user
        self._memberships: dict[str, Membership] = {}
        self._selected_id: Optional[str] = None
        self.organization: Optional[Organization] = None
        self.error: Optional[str] = None
        self.access: ResolvedAccess = NO_ACCESS
        self.set_memberships(memberships)

    # --- Inputs ---

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    @property
    def memberships(self) -> list[Membership]:
        return list(self._memberships.values())

    def set_user(self, user: Optional[User]) -> None:
        previous, self._user = self._user, user
        if user is None or (previous is not None and previous.id != user.id):
            self._memberships = {}
            self._selected_id = None
            self.organization = None
        # Memberships loaded before the user was known may belong to someone else
        self.set_memberships(list(self._memberships.values()))

    def set_memberships(self, memberships: Iterable[Membership]) -> None:
        self._memberships = {}
        for membership in memberships:
            if self._user is not None and membership.user_id != self._user.id:
                log.warning(
                    "context.foreign_membership_skipped",
                    user_id=membership.user_id,
                    organization_id=membership.organization_id,
                )
                continue
            self._memberships[membership.organization_id] = membership
        self._recompute()

    def select(self, organization_id: Optional[str]) -> None:
        if organization_id != self._selected_id:
            self.organization = None
            self.error = None
        self._selected_id = organization_id
        self._recompute()

    def membership_for(self, organization_id: Optional[str]) -> Optional[Membership]:
        if organization_id is None:
            return None
        return self._memberships.get(organization_id)

    def _recompute(self) -> None:
        if self._selected_id is None:
            self.access = NO_ACCESS
        else:
            self.access = resolve(self._user, self.membership_for(self._selected_id))
        log.debug(
            "context.access_resolved",
            organization_id=self._selected_id,
            role=self.access.role,
            permissions=sorted(p.value for p in self.access.permissions),
        )

    # --- Derived ---

    @property
    def role(self) -> Optional[str]:
        return self.access.role

    @property
    def permissions(self) -> frozenset[Permission]:
        return self.access.permissions

    @property
    def is_admin(self) -> bool:
        """Admin-like standing: org admin, moderator, or super admin."""
        return self.role in (
            MembershipRole.ADMIN.value,
            MembershipRole.MODERATOR.value,
            GlobalRole.SUPER_ADMIN.value,
        )

    @property
    def can_create_events(self) -> bool:
        return self.access.allows(Permission.CREATE_EVENTS)

    @property
    def can_manage_members(self) -> bool:
        return self.access.allows(Permission.MANAGE_MEMBERS)

    @property
    def can_view_analytics(self) -> bool:
        return self.access.allows(Permission.VIEW_ANALYTICS)

    # --- Loading ---

    async def load_selected(self, client: HttpClient) -> Optional[Organization]:
        """Fetch the selected organization's detail record."""
        if self._selected_id is None:
            self.organization = None
            return None

        selected = self._selected_id
        query = organization_detail_query(client, selected)
        organization = await query.load()
        if selected != self._selected_id:
            # Selection moved on while the request was in flight
            return self.organization

        self.organization = organization
        self.error = query.error
        return organization
