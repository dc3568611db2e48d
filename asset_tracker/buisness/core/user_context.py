"""
User Context (Core)
Provides a clean interface for account and role operations.

Handles:
- Self-service signup and credential checks
- Role changes by a super administrator
- Per-user asset overview (current and past assignments, authored history)
"""

from typing import Any, Dict, List, Optional

from asset_tracker import db
from asset_tracker.buisness.core.authorization import (
    Capability,
    Role,
    can,
    ensure_can_change_role,
    require,
)
from asset_tracker.buisness.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthenticatedError,
    ValidationFailedError,
)
from asset_tracker.data.core.asset_info.asset_assignment import AssetAssignment
from asset_tracker.data.core.history.asset_history import AssetHistory
from asset_tracker.data.core.user_info.user import User
from asset_tracker.data.transaction import atomic
from asset_tracker.utils.logger import get_logger

logger = get_logger("asset_tracker.buisness.core.user_context")

MIN_PASSWORD_LENGTH = 6
DUPLICATE_EMAIL_MESSAGE = "An account with this email already exists"


class UserContext:
    """
    Core context for user operations.

    Wraps a stored User row; the row's role is the only role ever consulted.
    """

    def __init__(self, user: User):
        self._user = user
        self._user_id = user.id

    @property
    def user(self) -> User:
        return self._user

    @property
    def user_id(self) -> int:
        return self._user_id

    @classmethod
    def load(cls, user_id: int) -> 'UserContext':
        user = db.session.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return cls(user)

    # ========== Accounts ==========

    @staticmethod
    def _normalize_email(email) -> str:
        return email.strip().lower() if isinstance(email, str) else ''

    @classmethod
    def signup(cls, email: Optional[str], password: Optional[str], name: Optional[str] = None,
               role: Optional[str] = None) -> 'UserContext':
        """
        Create an account.

        A proposed role is accepted only if it is one of the known roles;
        anything else falls back to USER.

        Raises:
            ValidationFailedError: If email or password is missing, or password is too short
            ConflictError: If the email is already registered
        """
        email = cls._normalize_email(email)
        if not email or not password:
            raise ValidationFailedError("Email and password are required")
        if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationFailedError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

        if User.query.filter_by(email=email).first() is not None:
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

        with atomic(conflict=ConflictError(DUPLICATE_EMAIL_MESSAGE)):
            user = User(
                email=email,
                name=name or None,
                role=Role.parse_or_default(role),
                is_active=True,
            )
            user.set_password(password)
            db.session.add(user)

        logger.info(f"User {user.id} signed up with role {user.role.value}")
        return cls(user)

    @classmethod
    def authenticate(cls, email: Optional[str], password: Optional[str]) -> 'UserContext':
        """
        Raises:
            ValidationFailedError: If email or password is missing
            UnauthenticatedError: If the credentials do not match an active account
        """
        email = cls._normalize_email(email)
        if not email or not password:
            raise ValidationFailedError("Email and password are required")
        if not isinstance(password, str):
            raise ValidationFailedError("Invalid text for password")

        user = User.query.filter_by(email=email).first()
        if user is None or not user.is_active or not user.check_password(password):
            logger.warning("Failed login attempt")
            raise UnauthenticatedError("Invalid email or password")

        logger.info(f"User {user.id} logged in")
        return cls(user)

    # ========== Administration ==========

    @staticmethod
    def list_users(actor) -> List[User]:
        require(actor, Capability.LIST_USERS)
        return User.query.order_by(User.created_at.desc(), User.id.desc()).all()

    @classmethod
    def change_role(cls, actor, target_user_id: int, role) -> User:
        """
        Set the role of another user.

        Raises:
            ForbiddenError: If actor may not change roles
            ValidationFailedError: If role is invalid or the actor targets themself
            NotFoundError: If the target user does not exist
        """
        require(actor, Capability.CHANGE_USER_ROLE)
        new_role = Role.parse(role)
        ensure_can_change_role(actor, target_user_id)

        target = cls.load(target_user_id).user
        old_role = target.role
        with atomic():
            target.role = new_role

        logger.info(f"User {actor.id} changed role of user {target.id}: {old_role.value} -> {new_role.value}")
        return target

    # ========== Asset overview ==========

    @staticmethod
    def ensure_can_view_assets(actor, user_id: int) -> None:
        """Self, or VIEW_USER_ASSETS; checked before the target is looked up"""
        if actor.id != user_id and not can(actor.role, Capability.VIEW_USER_ASSETS):
            raise ForbiddenError()

    def assets_overview(self, actor) -> Dict[str, Any]:
        """
        Current assignments, returned assignments and history entries authored
        by this user.

        Raises:
            ForbiddenError: If actor is someone else without VIEW_USER_ASSETS
        """
        self.ensure_can_view_assets(actor, self.user_id)

        current = (AssetAssignment.query
                   .filter(AssetAssignment.user_id == self.user_id,
                           AssetAssignment.returned_at.is_(None))
                   .order_by(AssetAssignment.assigned_at.desc())
                   .all())
        returned = (AssetAssignment.query
                    .filter(AssetAssignment.user_id == self.user_id,
                            AssetAssignment.returned_at.isnot(None))
                    .order_by(AssetAssignment.returned_at.desc())
                    .all())
        history = (AssetHistory.query
                   .filter(AssetHistory.user_id == self.user_id)
                   .order_by(AssetHistory.timestamp.desc(), AssetHistory.id.desc())
                   .all())

        return {
            'user': self.user,
            'current_assignments': current,
            'assignment_history': returned,
            'asset_history': history,
        }
