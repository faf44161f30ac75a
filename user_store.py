"""Data access layer for user accounts."""

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path

from config_loader import get_users_file


class UserStore:
    """JSON-file backed user records.

    Records are plain dicts with id, name, email, password_hash, provider,
    plan and created_at. Emails are compared case-insensitively.
    """

    def __init__(self, config: dict, data_dir: Path | None = None):
        """Initialize the user store.

        Args:
            config: Configuration dictionary with storage settings.
            data_dir: Directory holding the users file. Defaults to ./data.
        """
        self.config = config
        self.data_dir = Path(data_dir) if data_dir else Path(__file__).parent / "data"
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.users_file = self.data_dir / get_users_file(config)

    # =========================================================================
    # Reads
    # =========================================================================

    def get_users(self) -> list[dict]:
        if not self.users_file.exists():
            return []

        with open(self.users_file) as f:
            data = json.load(f)
        return data.get("users", [])

    def get_user(self, user_id: str) -> dict | None:
        """Get a user by ID.

        Returns:
            User dictionary or None if not found.
        """
        for user in self.get_users():
            if user.get("id") == user_id:
                return user
        return None

    def find_by_email(self, email: str) -> dict | None:
        """Get a user by email address (case-insensitive)."""
        wanted = (email or "").strip().lower()
        if not wanted:
            return None
        for user in self.get_users():
            if (user.get("email") or "").lower() == wanted:
                return user
        return None

    # =========================================================================
    # Writes
    # =========================================================================

    def create_user(
        self,
        name: str,
        email: str,
        password_hash: str | None = None,
        provider: str = "local",
    ) -> dict:
        """Create and persist a new user.

        Raises:
            ValueError: If a user with this email already exists.
        """
        if self.find_by_email(email):
            raise ValueError(f"User with email {email} already exists")

        user = {
            "id": uuid.uuid4().hex,
            "name": name,
            "email": email.strip().lower(),
            "password_hash": password_hash,
            "provider": provider,
            "plan": "free",
            "created_at": datetime.now(timezone.utc).isoformat(),
        }

        users = self.get_users()
        users.append(user)
        self._save(users)
        return user

    def _save(self, users: list[dict]) -> None:
        with open(self.users_file, "w") as f:
            json.dump(
                {
                    "users": users,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                },
                f,
                indent=2,
            )
