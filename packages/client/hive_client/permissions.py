"""
Role-based permission resolution.

A user's effective permissions inside an organization come from two places:
the global ``super_admin`` role, which grants everything everywhere, and the
user's active membership role in that organization. Global roles other than
``super_admin`` grant nothing inside an organization on their own.

Everything here is a pure function of its arguments.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from hive_shared.schemas.common import GlobalRole, MembershipRole, Permission
from hive_shared.schemas.organizations import Membership, RoleDefinition
from hive_shared.schemas.users import User

ALL_PERMISSIONS: frozenset[Permission] = frozenset(Permission)

# Permissions implied by a membership role inside one organization
ORG_ROLE_PERMISSIONS: dict[MembershipRole, frozenset[Permission]] = {
    MembershipRole.ADMIN: ALL_PERMISSIONS,
    MembershipRole.MODERATOR: frozenset({
        Permission.CREATE_EVENTS,
        Permission.EDIT_EVENTS,
        Permission.VIEW_ANALYTICS,
        Permission.CREATE_ANNOUNCEMENTS,
        Permission.MANAGE_RESOURCES,
        Permission.VIEW_VOLUNTEER_HOURS,
    }),
    MembershipRole.MEMBER: frozenset(),
}

ROLE_DISPLAY_NAMES: dict[str, str] = {
    GlobalRole.SUPER_ADMIN.value: "Super Admin",
    GlobalRole.ADMIN.value: "Admin",
    GlobalRole.VOLUNTEER.value: "Volunteer",
    GlobalRole.USER.value: "User",
    MembershipRole.MODERATOR.value: "Moderator",
    MembershipRole.MEMBER.value: "Member",
}


@dataclass(frozen=True)
class ResolvedAccess:
    """A user's effective role and permission set for one organization."""

    role: Optional[str] = None
    permissions: frozenset[Permission] = field(default_factory=frozenset)

    def allows(self, permission: Permission | str) -> bool:
        """Unknown permission names are never granted."""
        try:
            return Permission(permission) in self.permissions
        except ValueError:
            return False


NO_ACCESS = ResolvedAccess()


def _active_role(membership: Optional[Membership]) -> Optional[MembershipRole]:
    if membership is None or not membership.is_active:
        return None
    return membership.role


def resolve(user: Optional[User], membership: Optional[Membership] = None) -> ResolvedAccess:
    """Derive ``user``'s role and permissions from their membership.

    ``membership`` should belong to ``user`` and to the organization in
    question; an inactive membership counts as none.
    """
    if user is None:
        return NO_ACCESS

    if user.role == GlobalRole.SUPER_ADMIN:
        return ResolvedAccess(role=GlobalRole.SUPER_ADMIN.value, permissions=ALL_PERMISSIONS)

    role = _active_role(membership)
    if role is None:
        return ResolvedAccess(role=user.role.value, permissions=frozenset())

    return ResolvedAccess(role=role.value, permissions=ORG_ROLE_PERMISSIONS[role])


def effective_role(user: Optional[User], membership: Optional[Membership] = None) -> Optional[str]:
    return resolve(user, membership).role


def has_permission(
    user: Optional[User],
    permission: Permission | str,
    membership: Optional[Membership] = None,
) -> bool:
    return resolve(user, membership).allows(permission)


# ---------------------------------------------------------------------------
# Shorthands used to gate actions
# ---------------------------------------------------------------------------

def is_org_admin(membership: Optional[Membership]) -> bool:
    return _active_role(membership) == MembershipRole.ADMIN


def can_manage_organization(user: Optional[User], membership: Optional[Membership] = None) -> bool:
    return is_super_admin(user) or (user is not None and is_org_admin(membership))


def can_create_events(user: Optional[User], membership: Optional[Membership] = None) -> bool:
    return has_permission(user, Permission.CREATE_EVENTS, membership)


def can_manage_members(user: Optional[User], membership: Optional[Membership] = None) -> bool:
    return has_permission(user, Permission.MANAGE_MEMBERS, membership)


def can_view_analytics(user: Optional[User], membership: Optional[Membership] = None) -> bool:
    return has_permission(user, Permission.VIEW_ANALYTICS, membership)


# ---------------------------------------------------------------------------
# Global role checks
# ---------------------------------------------------------------------------

def is_super_admin(user: Optional[User]) -> bool:
    return user is not None and user.role == GlobalRole.SUPER_ADMIN


def is_admin(user: Optional[User]) -> bool:
    """Global admin or super admin."""
    return user is not None and user.role in (GlobalRole.ADMIN, GlobalRole.SUPER_ADMIN)


def is_volunteer(user: Optional[User]) -> bool:
    return user is not None and (user.role == GlobalRole.VOLUNTEER or is_admin(user))


def role_display_name(role: Optional[str]) -> str:
    if role is None:
        return "Unknown"
    return ROLE_DISPLAY_NAMES.get(str(getattr(role, "value", role)), "Unknown")


FEATURE_CHECKS = {
    "super_admin_panel": is_super_admin,
    "admin_panel": is_admin,
    "create_events": is_admin,
    "manage_organizations": is_admin,
    "view_analytics": is_admin,
    "volunteer_hours": is_volunteer,
}


def can_access_feature(user: Optional[User], feature: str) -> bool:
    """Site-wide feature gate based on the global role only."""
    check = FEATURE_CHECKS.get(feature)
    return bool(check and check(user))


def assignable_roles(definitions: Iterable[RoleDefinition]) -> list[RoleDefinition]:
    """Role definitions members may pick for themselves (public ones only)."""
    return [d for d in definitions if d.is_public]
