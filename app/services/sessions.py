"""Process-local login sessions.

Sessions are held in memory only: they do not expire and are lost on
restart, so every service instance that must share logins has to be
handed the same ``SessionStore``.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime

from app.core.security import generate_session_token
from app.models import Role, User
from app.models.base import utcnow


@dataclass(frozen=True)
class UserSession:
    """A login, with the user's roles frozen at issuance."""
    token: str
    user_id: uuid.UUID
    issued_at: datetime
    roles: tuple[Role, ...] = ()


class SessionStore:
    def __init__(self) -> None:
        self._sessions: dict[str, UserSession] = {}

    def issue(self, user: User) -> UserSession:
        session = UserSession(
            token=generate_session_token(),
            user_id=user.id,
            issued_at=utcnow(),
            roles=tuple(user.roles),
        )
        self._sessions[session.token] = session
        return session

    def get(self, token: str) -> UserSession | None:
        return self._sessions.get(token)

    def revoke(self, token: str) -> bool:
        return self._sessions.pop(token, None) is not None

    def __len__(self) -> int:
        return len(self._sessions)
