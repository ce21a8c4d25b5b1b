"""HTTP handlers and route registration."""

from __future__ import annotations

from typing import Any

from flask import Flask, jsonify, request
from pymongo.errors import PyMongoError

from .models import SendOTPRequest, VerifyOTPRequest
from .repository import OTPRepository, UserRepository
from .service import AuthError, AuthService


class AuthHandler:
    """Serves the code request and code check endpoints."""

    def __init__(self, auth_service: AuthService) -> None:
        self.auth_service = auth_service

    def send_otp(self):
        """POST /send-otp"""
        try:
            body = SendOTPRequest.from_json(request.get_json(force=True, silent=True))
        except ValueError:
            body = None
        if body is None or not body.phone:
            return jsonify({"error": "Phone number is required"}), 400
        try:
            self.auth_service.send_otp(body.phone)
        except (AuthError, PyMongoError):
            return jsonify({"error": "Failed to send OTP"}), 500
        return jsonify({"message": "OTP has been sent"}), 200

    def verify_otp(self):
        """POST /verify-otp"""
        try:
            body = VerifyOTPRequest.from_json(request.get_json(force=True, silent=True))
        except ValueError:
            body = None
        if body is None or not body.phone or not body.otp:
            return jsonify({"error": "Phone number and OTP code are required"}), 400
        try:
            token = self.auth_service.verify_otp(body.phone, body.otp)
        except AuthError as exc:
            return jsonify({"error": str(exc)}), 401
        return jsonify({"token": token}), 200


def register_routes(app: Flask, auth_service: AuthService) -> AuthHandler:
    """Attach the authentication endpoints to ``app``."""
    handler = AuthHandler(auth_service)
    app.add_url_rule("/send-otp", "send_otp", handler.send_otp, methods=["POST"])
    app.add_url_rule("/verify-otp", "verify_otp", handler.verify_otp, methods=["POST"])
    return handler


def setup_routes(app: Flask, client: Any) -> AuthHandler:
    """Build the repositories and service on ``client`` and register the routes."""
    service = AuthService(UserRepository.from_client(client), OTPRepository.from_client(client))
    return register_routes(app, service)


def create_app(auth_service: AuthService) -> Flask:
    """Return a Flask application serving ``auth_service``."""
    app = Flask("otpauth")
    register_routes(app, auth_service)
    return app