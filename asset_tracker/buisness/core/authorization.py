"""
Authorization Policy

Pure decision functions over (role, capability). Roles are hierarchical:
SUPER_ADMIN holds every MANAGER privilege and MANAGER holds every USER privilege.
Every permission check in the application goes through CAPABILITY_MIN_ROLE.
"""

import enum
from typing import Optional

from asset_tracker.buisness.core.errors import ForbiddenError, ValidationFailedError


class Role(str, enum.Enum):
    USER = 'USER'
    MANAGER = 'MANAGER'
    SUPER_ADMIN = 'SUPER_ADMIN'

    @property
    def rank(self) -> int:
        return ROLE_RANK[self]

    @property
    def display_name(self) -> str:
        return self.value.replace('_', ' ').title()

    @classmethod
    def parse(cls, value) -> 'Role':
        """
        Parse a role string.

        Raises:
            ValidationFailedError: If value is not one of the known roles
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (ValueError, TypeError):
            raise ValidationFailedError("Invalid role provided")

    @classmethod
    def parse_or_default(cls, value, default: Optional['Role'] = None) -> 'Role':
        """Parse a proposed role, falling back to USER (or default) when absent or invalid"""
        try:
            return cls.parse(value)
        except ValidationFailedError:
            return default or cls.USER


ROLE_RANK = {
    Role.USER: 1,
    Role.MANAGER: 2,
    Role.SUPER_ADMIN: 3,
}


def rank(role) -> int:
    return ROLE_RANK[Role.parse(role)]


def has_role(actual, required) -> bool:
    """True when actual ranks at or above required"""
    return rank(actual) >= rank(required)


class Capability(str, enum.Enum):
    APPROVE_REQUESTS = 'approve_requests'
    VIEW_ALL_REQUESTS = 'view_all_requests'
    VIEW_USER_ASSETS = 'view_user_assets'
    MANAGE_ASSETS = 'manage_assets'
    MANAGE_ASSET_TYPES = 'manage_asset_types'
    UPDATE_REQUEST_STATUS = 'update_request_status'
    CHANGE_USER_ROLE = 'change_user_role'
    LIST_USERS = 'list_users'


CAPABILITY_MIN_ROLE = {
    Capability.APPROVE_REQUESTS: Role.MANAGER,
    Capability.VIEW_ALL_REQUESTS: Role.MANAGER,
    Capability.VIEW_USER_ASSETS: Role.MANAGER,
    Capability.MANAGE_ASSETS: Role.SUPER_ADMIN,
    Capability.MANAGE_ASSET_TYPES: Role.SUPER_ADMIN,
    Capability.UPDATE_REQUEST_STATUS: Role.SUPER_ADMIN,
    Capability.CHANGE_USER_ROLE: Role.SUPER_ADMIN,
    Capability.LIST_USERS: Role.SUPER_ADMIN,
}


def can(role, capability: Capability) -> bool:
    """Decide whether role may exercise capability"""
    return has_role(role, CAPABILITY_MIN_ROLE[capability])


def require(user, capability: Capability) -> None:
    """
    Raise unless user may exercise capability.

    Args:
        user: Object with a ``role`` attribute (the stored user row)
        capability: Capability being exercised

    Raises:
        ForbiddenError: If the user's role ranks below the capability's minimum
    """
    if user is None or not can(user.role, capability):
        raise ForbiddenError()


def ensure_can_change_role(actor, target_user_id: int) -> None:
    """
    Role changes need CHANGE_USER_ROLE and never apply to the actor's own account.

    Raises:
        ForbiddenError: If the actor lacks CHANGE_USER_ROLE
        ValidationFailedError: If the actor targets their own account
    """
    require(actor, Capability.CHANGE_USER_ROLE)
    if actor.id == target_user_id:
        raise ValidationFailedError("You cannot change your own role.")
