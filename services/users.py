"""User service: per-user configuration and the active session."""

import copy
import json
import uuid
from typing import List, Optional

from errors import StorageError, ValidationError
from models.user import DEFAULT_ACCOUNTS, DEFAULT_CATEGORIES, User

_USERS_KEY = "dindin_users"
_SESSION_KEY = "dindin_last_user_id"


class UserService:
    """Service for managing users and their accounts/categories."""

    def __init__(self, store):
        """Initialize the user service.

        Args:
            store: Key-value store holding the users list and the session.
        """
        self.store = store

    def find_all(self) -> List[User]:
        """Get every registered user.

        Raises:
            StorageError: If the stored user list is corrupted.
        """
        raw = self.store.get(_USERS_KEY)
        if not raw:
            return []
        try:
            return [User.from_dict(item) for item in json.loads(raw)]
        except (ValueError, KeyError, TypeError) as e:
            raise StorageError(f"Stored user list is corrupted: {e}") from e

    def find(self, user_id: str) -> Optional[User]:
        """Get a single user by ID."""
        for user in self.find_all():
            if user.id == user_id:
                return user
        return None

    def find_by_username(self, username: str) -> Optional[User]:
        """Get a single user by username (case-insensitive)."""
        username = username.strip().lower()
        for user in self.find_all():
            if user.username.lower() == username:
                return user
        return None

    def create(
        self,
        name: str,
        username: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> User:
        """Create a user seeded with the default categories and accounts.

        Raises:
            ValidationError: If name/username are empty or the username is taken.
        """
        name = (name or "").strip()
        username = (username or "").strip()
        if not name or not username:
            raise ValidationError("Name and username are required")
        if self.find_by_username(username):
            raise ValidationError(f"Username '{username}' is already taken")

        user = User(
            id=uuid.uuid4().hex,
            name=name,
            username=username,
            categories=copy.deepcopy(DEFAULT_CATEGORIES),
            accounts=copy.deepcopy(DEFAULT_ACCOUNTS),
            email=email,
            phone=phone,
        )
        users = self.find_all()
        users.append(user)
        self._write(users)
        return user

    def save(self, user: User) -> User:
        """Replace a stored user with the given version.

        Raises:
            ValidationError: If the user does not exist.
        """
        users = self.find_all()
        for i, existing in enumerate(users):
            if existing.id == user.id:
                users[i] = user
                self._write(users)
                return user
        raise ValidationError(f"User {user.id} not found")

    def get_session(self) -> Optional[User]:
        """Get the user of the last session, if it still exists."""
        user_id = self.store.get(_SESSION_KEY)
        return self.find(user_id) if user_id else None

    def set_session(self, user: User) -> None:
        self.store.set(_SESSION_KEY, user.id)

    def clear_session(self) -> None:
        self.store.remove(_SESSION_KEY)

    def _write(self, users: List[User]) -> None:
        self.store.set(_USERS_KEY, json.dumps([u.to_dict() for u in users]))
