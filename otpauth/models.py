"""Stored records and request bodies."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping


def _as_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass
class OTPRequest:
    """A one-time code issued to a phone number."""

    phone: str
    otp: str
    expires_at: datetime
    verified: bool = False
    created_at: datetime | None = None
    id: Any = None

    def to_document(self) -> dict[str, Any]:
        document: dict[str, Any] = {
            "phone": self.phone,
            "otp": self.otp,
            "expires_at": self.expires_at,
            "verified": self.verified,
            "created_at": self.created_at,
        }
        if self.id is not None:
            document["_id"] = self.id
        return document

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "OTPRequest":
        return cls(
            phone=document.get("phone", ""),
            otp=document.get("otp", ""),
            expires_at=_as_utc(document.get("expires_at")),
            verified=bool(document.get("verified", False)),
            created_at=_as_utc(document.get("created_at")),
            id=document.get("_id"),
        )


@dataclass
class User:
    """A registered user, identified by phone number."""

    phone: str
    created_at: datetime | None = None
    id: Any = None

    def to_document(self) -> dict[str, Any]:
        document: dict[str, Any] = {"phone": self.phone, "created_at": self.created_at}
        if self.id is not None:
            document["_id"] = self.id
        return document

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "User":
        return cls(
            phone=document.get("phone", ""),
            created_at=_as_utc(document.get("created_at")),
            id=document.get("_id"),
        )


def _string_field(data: Mapping[str, Any], name: str) -> str:
    value = data.get(name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {name!r} must be a string")
    return value


def _require_object(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError("request body must be a JSON object")
    return data


@dataclass(frozen=True)
class SendOTPRequest:
    """Body of a request for a new code."""

    phone: str

    @classmethod
    def from_json(cls, data: Any) -> "SendOTPRequest":
        body = _require_object(data)
        return cls(phone=_string_field(body, "phone"))


@dataclass(frozen=True)
class VerifyOTPRequest:
    """Body of a request to check a code."""

    phone: str
    otp: str

    @classmethod
    def from_json(cls, data: Any) -> "VerifyOTPRequest":
        body = _require_object(data)
        return cls(phone=_string_field(body, "phone"), otp=_string_field(body, "otp"))