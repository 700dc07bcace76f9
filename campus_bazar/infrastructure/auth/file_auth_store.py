"""
Signed-in user storage.

The browser app kept the current user as JSON under a single localStorage
key; FileAuthStore does the same with a JSON file so a sign-in survives a
restart. Login and registration are mock operations: whatever user record is
handed in becomes the current user.
"""
import json
from dataclasses import asdict
from pathlib import Path

import structlog

from campus_bazar.application.interfaces.auth_collaborator import AuthCollaborator
from campus_bazar.config import settings
from campus_bazar.domain.entities.user import CurrentUser

logger = structlog.get_logger(__name__)


class InMemoryAuthStore(AuthCollaborator):
    def __init__(self, user: CurrentUser | None = None) -> None:
        self._user = user

    def current_user(self) -> CurrentUser | None:
        return self._user

    def login(self, user: CurrentUser) -> None:
        self._user = user

    def register(self, user: CurrentUser) -> None:
        self._user = user

    def logout(self) -> None:
        self._user = None


class FileAuthStore(AuthCollaborator):
    """Persists the signed-in user as a small JSON document."""

    def __init__(self, path: str | Path = settings.auth_store_path) -> None:
        self._path = Path(path)

    def current_user(self) -> CurrentUser | None:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return CurrentUser(
                id=str(data["id"]),
                name=data["name"],
                university=data.get("university", ""),
                email=data.get("email"),
            )
        except (ValueError, KeyError, TypeError):
            logger.warning("auth_store_unreadable", path=str(self._path))
            return None

    def login(self, user: CurrentUser) -> None:
        self._write(user)
        logger.info("user_logged_in", user_id=user.id)

    def register(self, user: CurrentUser) -> None:
        self._write(user)
        logger.info("user_registered", user_id=user.id)

    def logout(self) -> None:
        self._path.unlink(missing_ok=True)
        logger.info("user_logged_out")

    def _write(self, user: CurrentUser) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(asdict(user)), encoding="utf-8")
