"""Environment loading and MongoDB connection set-up."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pymongo import MongoClient
from pymongo.errors import PyMongoError

log = logging.getLogger(__name__)

CONNECT_TIMEOUT_MS = 10_000


class ConfigError(RuntimeError):
    """Raised when a required setting is missing."""


class MongoConnectionError(RuntimeError):
    """Raised when MongoDB cannot be reached."""


def load_env() -> bool:
    """Load ``.env`` from the working directory without overriding set variables."""
    path = Path(".env")
    if not path.is_file() or not load_dotenv(path):
        log.info(".env file not found or failed to load")
        return False
    return True


def get_env(key: str, fallback: str) -> str:
    """Return the variable's value, or ``fallback`` when it is unset or empty."""
    return os.environ.get(key) or fallback


def connect_mongodb() -> MongoClient:
    """Connect to the server named by ``MONGO_URI`` and check it answers."""
    mongo_uri = os.environ.get("MONGO_URI", "")
    if not mongo_uri:
        raise ConfigError("MONGO_URI not set in .env")
    try:
        client = MongoClient(mongo_uri, serverSelectionTimeoutMS=CONNECT_TIMEOUT_MS)
    except PyMongoError as exc:
        raise MongoConnectionError(f"Failed to connect to MongoDB: {exc}") from exc
    try:
        client.admin.command("ping")
    except PyMongoError as exc:
        client.close()
        raise MongoConnectionError(f"Failed to ping MongoDB: {exc}") from exc
    log.info("Connected to MongoDB")
    return client