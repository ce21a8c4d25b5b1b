"""MongoDB-backed storage of codes and users."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from pymongo import DESCENDING

from .models import OTPRequest, User

DATABASE_NAME = "otp_auth"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class OTPRepository:
    """Issued codes, kept in the ``otp_requests`` collection."""

    collection: Any

    @classmethod
    def from_client(cls, client: Any) -> "OTPRepository":
        return cls(client[DATABASE_NAME]["otp_requests"])

    def save_otp(self, otp: OTPRequest) -> None:
        """Stamp the creation time and store the code."""
        otp.created_at = _now()
        result = self.collection.insert_one(otp.to_document())
        otp.id = result.inserted_id

    def get_latest_by_phone(self, phone: str) -> OTPRequest | None:
        document = self.collection.find_one(
            {"phone": phone}, sort=[("created_at", DESCENDING)]
        )
        return None if document is None else OTPRequest.from_document(document)

    def mark_verified(self, otp_id: Any) -> None:
        self.collection.update_one({"_id": otp_id}, {"$set": {"verified": True}})

    def count_recent_requests(self, phone: str, since: timedelta) -> int:
        """Count codes issued to ``phone`` within the last ``since``."""
        return self.collection.count_documents(
            {"phone": phone, "created_at": {"$gte": _now() - since}}
        )


@dataclass
class UserRepository:
    """Registered users, kept in the ``users`` collection."""

    collection: Any

    @classmethod
    def from_client(cls, client: Any) -> "UserRepository":
        return cls(client[DATABASE_NAME]["users"])

    def find_by_phone(self, phone: str) -> User | None:
        document = self.collection.find_one({"phone": phone})
        return None if document is None else User.from_document(document)

    def create_user(self, user: User) -> None:
        user.created_at = _now()
        result = self.collection.insert_one(user.to_document())
        user.id = result.inserted_id