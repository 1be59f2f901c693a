from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import is_email, require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..storage.gateway import WriteResult
from .gateway import UserGateway
from .model import UserProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: str
    email: str
    display_name: str
    role: Role


class AuthService:
    """Use case: authenticate a user profile (login)."""

    def __init__(self, users: UserGateway, *, clock: Callable[[], datetime] = now_local):
        self._users = users
        self._clock = clock

    def authenticate(self, email: str, password: str) -> SessionUser:
        user = self._users.get_by_email(email)
        if not user or not user.is_active or not user.id:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except (TypeError, ValueError):
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        self._users.update(user.id, {"last_login": self._clock()})
        logger.info("User %s signed in with role %s", user.email, user.role.value)
        return SessionUser(
            user_id=user.id,
            email=user.email,
            display_name=user.display_name or user.email,
            role=user.role,
        )


class UserService:
    """Use case: manage login profiles."""

    def __init__(self, users: UserGateway):
        self._users = users

    def create_profile(self, *, email: str, display_name: str, password: str, role: Role) -> str:
        email = require_non_empty(email, "Email").lower()
        if not is_email(email):
            raise ValidationError("Email is not valid", {"email": "Invalid email"})
        display_name = require_non_empty(display_name, "Name")
        require_min_length(password, "Password", 6)

        if self._users.get_by_email(email):
            raise ValidationError("Email is already registered", {"email": "Already registered"})

        return self._users.create(
            UserProfile(
                email=email,
                display_name=display_name,
                role=Role(role),
                password_hash=generate_password_hash(password),
            )
        )

    def ensure_profile(self, *, email: str, display_name: str, password: str, role: Role) -> Optional[str]:
        """Create the profile unless one with that email exists; returns the new id or None."""
        if self._users.get_by_email(email):
            return None
        return self.create_profile(email=email, display_name=display_name, password=password, role=role)

    def list_profiles(self) -> list[UserProfile]:
        return self._users.get_all()

    def update_profile(
        self,
        user_id: str,
        *,
        role: Optional[Role] = None,
        is_active: Optional[bool] = None,
        display_name: Optional[str] = None,
        acting_user_id: Optional[str] = None,
    ) -> WriteResult:
        """Apply the given changes in one write. Admins cannot lock themselves out."""
        user = self._require(user_id)
        patch: dict = {}
        if role is not None:
            role = Role(role)
            if user_id == acting_user_id and user.role == Role.ADMIN and role != Role.ADMIN:
                raise AuthorizationError("You cannot remove your own administrator role")
            patch["role"] = role.value
        if is_active is not None:
            if user_id == acting_user_id and not is_active:
                raise AuthorizationError("You cannot deactivate your own profile")
            patch["is_active"] = bool(is_active)
        if display_name is not None:
            patch["display_name"] = require_non_empty(display_name, "Name")
        if not patch:
            raise ValidationError("Nothing to update", {"profile": "Send role, is_active or display_name"})

        logger.info("Updating user %s: %s", user.email, ", ".join(sorted(patch)))
        return self._users.update(user_id, patch)

    def update_role(self, user_id: str, role: Role, *, acting_user_id: Optional[str] = None) -> WriteResult:
        return self.update_profile(user_id, role=role, acting_user_id=acting_user_id)

    def set_active(
        self, user_id: str, is_active: Optional[bool] = None, *, acting_user_id: Optional[str] = None
    ) -> WriteResult:
        """Set the active flag; ``None`` toggles it."""
        if is_active is None:
            is_active = not self._require(user_id).is_active
        return self.update_profile(user_id, is_active=is_active, acting_user_id=acting_user_id)

    def delete_profile(self, user_id: str, *, acting_user_id: Optional[str] = None) -> WriteResult:
        user = self._require(user_id)
        if user_id == acting_user_id:
            raise AuthorizationError("You cannot delete your own profile")
        logger.info("Deleting user %s", user.email)
        return self._users.delete(user_id)

    def _require(self, user_id: str) -> UserProfile:
        user = self._users.get_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user
