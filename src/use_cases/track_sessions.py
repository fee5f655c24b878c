"""Use case for registering identities and tracking their logins."""
from __future__ import annotations

from typing import Optional, Protocol

from src.core.entities import ClassificationTier, LoginResult, UserSession
from src.utils.logger import logger


class SessionBookkeeper(Protocol):
    def register(self, user_id: str, email: str, full_name: Optional[str] = None) -> UserSession:
        ...

    def record_login(self, user_id: str) -> LoginResult:
        ...

    def get_user_data(self, user_id: str) -> Optional[UserSession]:
        ...

    def active_user(self) -> Optional[str]:
        ...

    def logout(self) -> Optional[str]:
        ...


class TrackSessionsUseCase:
    """Orchestrate register, login and logout against the session registry."""

    def __init__(self, registry: SessionBookkeeper) -> None:
        self._registry = registry

    def register(self, user_id: str, email: str, full_name: Optional[str] = None) -> UserSession:
        if not user_id.strip():
            raise ValueError("A user identifier is required to register.")
        return self._registry.register(user_id.strip(), email.strip(), full_name)

    def login(self, user_id: str) -> LoginResult:
        if not user_id.strip():
            raise ValueError("A user identifier is required to log in.")
        result = self._registry.record_login(user_id.strip())
        logger.info("Login classification for {}: {}", user_id, result.classification.value)
        return result

    def logout(self) -> Optional[str]:
        return self._registry.logout()

    def current_session(self) -> Optional[UserSession]:
        user_id = self._registry.active_user()
        if user_id is None:
            return None
        return self._registry.get_user_data(user_id)

    def current_classification(self, user_id: str) -> ClassificationTier:
        session = self._registry.get_user_data(user_id)
        if session is None:
            return ClassificationTier.NUEVO
        return session.classification


__all__ = ["TrackSessionsUseCase"]
