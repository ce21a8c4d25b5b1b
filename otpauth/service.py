"""Issuing and checking one-time codes."""

from __future__ import annotations

import contextlib
import os
import re
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from pymongo.errors import PyMongoError

from .models import OTPRequest, User
from .repository import OTPRepository, UserRepository

REQUEST_WINDOW = timedelta(hours=1)
TOKEN_LIFETIME = timedelta(hours=24)

_INTEGER = re.compile(r"[+-]?[0-9]+")


class AuthError(Exception):
    """A code could not be issued or accepted."""


def _env_int(name: str) -> int:
    value = os.environ.get(name, "")
    return int(value) if _INTEGER.fullmatch(value) else 0


@dataclass
class AuthService:
    """Issues codes to phone numbers and exchanges valid codes for tokens."""

    user_repo: UserRepository
    otp_repo: OTPRepository

    def send_otp(self, phone: str) -> str:
        """Create, store and announce a new code; return it."""
        code = generate_otp()
        expiration_minutes = _env_int("OTP_EXPIRATION_MINUTES")
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=expiration_minutes)
        request_limit = _env_int("OTP_REQUEST_LIMIT")

        count = self.otp_repo.count_recent_requests(phone, REQUEST_WINDOW)
        if count >= request_limit:
            raise AuthError("Too many OTP requests in short time. Please try again later")

        self.otp_repo.save_otp(
            OTPRequest(phone=phone, otp=code, expires_at=expires_at, verified=False)
        )
        print(f"OTP for {phone} is: {code} (expires in {expiration_minutes} minutes)")
        return code

    def verify_otp(self, phone: str, code: str) -> str:
        """Accept the latest code for ``phone`` and return a signed token."""
        try:
            otp = self.otp_repo.get_latest_by_phone(phone)
        except PyMongoError:
            otp = None
        if otp is None:
            raise AuthError("OTP not found")
        if otp.verified:
            raise AuthError("OTP already used")
        if otp.expires_at < datetime.now(timezone.utc):
            raise AuthError("OTP expired")
        if otp.otp != code:
            raise AuthError("invalid OTP")

        with contextlib.suppress(PyMongoError):
            self.otp_repo.mark_verified(otp.id)

        try:
            existing = self.user_repo.find_by_phone(phone)
        except PyMongoError:
            existing = None
        if existing is None:
            try:
                self.user_repo.create_user(User(phone=phone))
            except PyMongoError as exc:
                raise AuthError("failed to create user") from exc

        try:
            return generate_jwt(phone)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            raise AuthError("failed to generate token") from exc


def generate_otp() -> str:
    """Return a random five-digit code."""
    return f"{secrets.randbelow(100000):05d}"


def generate_jwt(phone: str) -> str:
    """Sign an HS256 token for ``phone`` with ``JWT_SECRET``, valid for a day."""
    secret = os.environ.get("JWT_SECRET", "")
    now = datetime.now(timezone.utc)
    claims = {
        "phone": phone,
        "exp": int((now + TOKEN_LIFETIME).timestamp()),
        "iat": int(now.timestamp()),
    }
    return jwt.encode(claims, secret, algorithm="HS256")