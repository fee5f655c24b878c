"""Sources of user records: CSV exports and the users REST API."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import pandas as pd
import requests

from src.core.entities import UserRecord
from src.utils.logger import logger
from src.utils.timestamps import format_timestamp, utc_now

USER_FIELDS: tuple[str, ...] = (
    "id",
    "nombre",
    "apellidos",
    "cedula",
    "correoElectronico",
    "fechaUltimoAcceso",
)


class UserSourceError(RuntimeError):
    """Raised when user records cannot be retrieved or modified."""


class CsvUserRecordSource:
    """Read user records from a CSV file whose headers match the API fields."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    def list_users(self) -> list[UserRecord]:
        if not self._path.exists():
            raise FileNotFoundError(f"Users file not found: {self._path}")

        logger.info("Loading users from {}", self._path)
        df = pd.read_csv(self._path, dtype=str, keep_default_na=False)
        for column in USER_FIELDS:
            if column not in df.columns:
                df[column] = ""

        records: list[UserRecord] = []
        for row in df[list(USER_FIELDS)].to_dict(orient="records"):
            payload: dict[str, object] = dict(row)
            for optional in ("id", "cedula", "fechaUltimoAcceso"):
                if not payload.get(optional):
                    payload[optional] = None
            records.append(UserRecord.from_mapping(payload))
        return records


class HttpUserRecordSource:
    """Thin client for the ``/api/User`` REST resource."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not base_url.strip():
            raise ValueError("'base_url' must be a non-empty string")
        self.base_url = base_url.strip().rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        headers = {"Accept": "application/json"}
        headers.update(kwargs.pop("headers", {}))
        try:
            response = self._session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.Timeout as exc:
            raise UserSourceError(
                "API request timed out. Please check your connection and try again."
            ) from exc
        except requests.RequestException as exc:
            raise UserSourceError(f"API request failed: {exc}") from exc

        logger.debug("{} {} -> {}", method, url, response.status_code)
        if response.status_code >= 400:
            raise UserSourceError(f"API error: {response.status_code} {response.reason}")
        return response

    def list_users(self) -> list[UserRecord]:
        logger.info("Fetching users from {}", self.base_url)
        response = self._request("GET", self.base_url, headers={"Cache-Control": "no-cache"})

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            logger.error("API returned non-JSON response: {}...", response.text[:200])
            raise UserSourceError(f"API did not return JSON. Received: {content_type or 'unknown'}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise UserSourceError("API returned an invalid JSON body.") from exc
        if not isinstance(payload, list):
            raise UserSourceError("API response must be a JSON list of users.")

        return [UserRecord.from_mapping(item) for item in payload if isinstance(item, dict)]

    def create_user(self, record: UserRecord) -> None:
        body = record.to_payload()
        body["fechaUltimoAcceso"] = format_timestamp(utc_now())
        self._request("POST", self.base_url, json=body, headers={"Content-Type": "application/json"})
        logger.info("Created user {} {}", record.given_name, record.family_name)

    def update_user(self, record: UserRecord) -> None:
        if not record.user_id:
            raise ValueError("Updating a user requires 'user_id'.")
        self._request(
            "PUT",
            f"{self.base_url}/{record.user_id}",
            json=record.to_payload(),
            headers={"Content-Type": "application/json"},
        )
        logger.info("Updated user {}", record.user_id)

    def delete_user(self, user_id: str) -> None:
        if not user_id:
            raise ValueError("Deleting a user requires 'user_id'.")
        self._request("DELETE", f"{self.base_url}/{user_id}")
        logger.info("Deleted user {}", user_id)


__all__ = ["CsvUserRecordSource", "HttpUserRecordSource", "USER_FIELDS", "UserSourceError"]
