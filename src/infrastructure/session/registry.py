"""Login history and active-session bookkeeping on top of a key-value store."""
from __future__ import annotations

import json
from datetime import datetime
from typing import Callable, Optional

from src.core.entities import ClassificationTier, LoginResult, UserSession
from src.infrastructure.classification.recency import RecencyClassifier
from src.infrastructure.session.store import KeyValueStore
from src.utils.logger import logger
from src.utils.timestamps import InvalidTimestamp, format_timestamp, parse_timestamp, utc_now

ACTIVE_SESSION_KEY = "session_active_user"


def user_key(user_id: str) -> str:
    return f"user_{user_id}"


def _lenient_timestamp(value: object) -> Optional[datetime]:
    if not isinstance(value, (str, datetime)):
        return None
    try:
        return parse_timestamp(value)
    except InvalidTimestamp:
        return None


class SessionRegistry:
    """Record logins per identity and classify them by recency.

    Per-user entries (``user_<id>``) survive logouts so the next login can be
    compared with the previous one. The active-session entry is written at login
    and removed at logout.
    """

    def __init__(
        self,
        store: KeyValueStore,
        classifier: RecencyClassifier | None = None,
        now_provider: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._now_provider = now_provider or utc_now
        self._classifier = classifier or RecencyClassifier(now_provider=self._now_provider)

    def _get(self, key: str) -> Optional[str]:
        try:
            return self._store.get(key)
        except (OSError, ValueError) as exc:
            logger.error("Could not read '{}' from the session store: {}", key, exc)
            return None

    def _read(self, user_id: str) -> dict[str, object]:
        raw = self._get(user_key(user_id))
        if raw is None:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.error("Corrupt session data for user {}: {}", user_id, exc)
            return {}
        if not isinstance(data, dict):
            logger.error("Session data for user {} is not an object; ignoring it", user_id)
            return {}
        return data

    def _write(self, user_id: str, data: dict[str, object]) -> None:
        self._store.set(user_key(user_id), json.dumps(data, ensure_ascii=False))

    def register(self, user_id: str, email: str, full_name: Optional[str] = None) -> UserSession:
        now = format_timestamp(self._now_provider())
        data: dict[str, object] = {
            "email": email,
            "fullName": full_name or None,
            "createdAt": now,
            "lastLogin": now,
            "classification": ClassificationTier.NUEVO.value,
            "updatedAt": now,
        }
        self._write(user_id, data)
        logger.info("Registered user {}", user_id)
        return self._to_session(user_id, data)

    def record_login(self, user_id: str) -> LoginResult:
        """Store a new login and return the tier earned by the previous one."""

        now = self._now_provider()
        try:
            existing = self._read(user_id)
            previous = existing.get("lastLogin")
            previous_text = previous if isinstance(previous, str) and previous else None
            classification = self._classifier.classify(previous_text, reference_time=now)

            stamp = format_timestamp(now)
            data = {key: existing[key] for key in ("email", "fullName", "createdAt") if key in existing}
            data.update(
                {
                    "lastLogin": stamp,
                    "previousLogin": previous_text or stamp,
                    "classification": classification.value,
                    "updatedAt": stamp,
                }
            )
            self._write(user_id, data)
            self._store.set(ACTIVE_SESSION_KEY, user_id)
        except (OSError, ValueError) as exc:
            logger.error("Error updating last login for user {}: {}", user_id, exc)
            return LoginResult(classification=ClassificationTier.NUEVO, last_login=now)

        logger.info("User {} logged in as {}", user_id, classification.value)
        return LoginResult(classification=classification, last_login=now)

    def get_user_data(self, user_id: str) -> Optional[UserSession]:
        data = self._read(user_id)
        if not data:
            return None
        return self._to_session(user_id, data)

    def active_user(self) -> Optional[str]:
        return self._get(ACTIVE_SESSION_KEY)

    def logout(self) -> Optional[str]:
        user_id = self.active_user()
        if user_id is None:
            logger.debug("Logout requested without an active session")
            return None
        self._store.delete(ACTIVE_SESSION_KEY)
        logger.info("User {} logged out", user_id)
        return user_id

    @staticmethod
    def _to_session(user_id: str, data: dict[str, object]) -> UserSession:
        try:
            classification = ClassificationTier(data.get("classification"))
        except ValueError:
            classification = ClassificationTier.NUEVO

        email = data.get("email")
        full_name = data.get("fullName")
        return UserSession(
            user_id=user_id,
            last_login=_lenient_timestamp(data.get("lastLogin")),
            classification=classification,
            previous_login=_lenient_timestamp(data.get("previousLogin")),
            updated_at=_lenient_timestamp(data.get("updatedAt")),
            created_at=_lenient_timestamp(data.get("createdAt")),
            email=email if isinstance(email, str) else None,
            full_name=full_name if isinstance(full_name, str) else None,
        )


__all__ = ["ACTIVE_SESSION_KEY", "SessionRegistry", "user_key"]
