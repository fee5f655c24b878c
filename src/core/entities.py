"""Core entities for the user classification domain."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Mapping, Optional


class ClassificationTier(str, Enum):
    """Engagement badge shown to a user."""

    HECHICERO = "Hechicero"
    LUCHADOR = "Luchador"
    EXPLORADOR = "Explorador"
    OLVIDADO = "Olvidado"
    NUEVO = "Nuevo"

    def __str__(self) -> str:
        return self.value


TIER_DESCRIPTIONS: Mapping[ClassificationTier, str] = {
    ClassificationTier.HECHICERO: "Último acceso en las últimas 12 horas",
    ClassificationTier.LUCHADOR: "Último acceso entre 12 y 48 horas",
    ClassificationTier.EXPLORADOR: "Último acceso entre 2 y 7 días",
    ClassificationTier.OLVIDADO: "Último acceso hace más de 7 días",
    ClassificationTier.NUEVO: "Primera vez en la aplicación",
}

EngagementScore = int


def _as_text(value: object) -> str:
    if value is None:
        return ""
    return str(value)


@dataclass(frozen=True)
class UserRecord:
    """Profile fields of a user listed by the external users API."""

    given_name: str
    family_name: str
    email: str
    user_id: Optional[str] = None
    national_id: Optional[str] = None
    last_access: Optional[str] = None

    def __post_init__(self) -> None:
        for field_name in ("given_name", "family_name", "email"):
            object.__setattr__(self, field_name, _as_text(getattr(self, field_name)))

    @classmethod
    def from_mapping(cls, payload: Mapping[str, object]) -> "UserRecord":
        """Build a record from a row using the API field names.

        Missing or null scoring fields become empty strings so that scoring
        never fails on partial rows.
        """

        user_id = payload.get("id")
        national_id = payload.get("cedula")
        last_access = payload.get("fechaUltimoAcceso")
        return cls(
            given_name=_as_text(payload.get("nombre")),
            family_name=_as_text(payload.get("apellidos")),
            email=_as_text(payload.get("correoElectronico")),
            user_id=str(user_id) if user_id is not None else None,
            national_id=str(national_id) if national_id is not None else None,
            last_access=str(last_access) if last_access is not None else None,
        )

    def to_payload(self) -> dict[str, str]:
        payload = {
            "nombre": self.given_name,
            "apellidos": self.family_name,
            "cedula": self.national_id or "",
            "correoElectronico": self.email,
        }
        if self.last_access is not None:
            payload["fechaUltimoAcceso"] = self.last_access
        return payload

    @property
    def full_name(self) -> str:
        return f"{self.given_name} {self.family_name}".strip()


@dataclass(frozen=True)
class ScoredUser:
    """A user record together with its engagement evaluation."""

    record: UserRecord
    score: EngagementScore
    tier: ClassificationTier
    band: str


@dataclass(frozen=True)
class UserSession:
    """Login bookkeeping stored for a single identity."""

    user_id: str
    last_login: Optional[datetime]
    classification: ClassificationTier
    previous_login: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    email: Optional[str] = None
    full_name: Optional[str] = None


@dataclass(frozen=True)
class LoginResult:
    """Outcome of recording a login."""

    classification: ClassificationTier
    last_login: datetime


__all__ = [
    "ClassificationTier",
    "EngagementScore",
    "LoginResult",
    "ScoredUser",
    "TIER_DESCRIPTIONS",
    "UserRecord",
    "UserSession",
]
