"""Command that starts the HTTP server."""

from __future__ import annotations

import argparse
import logging
from typing import Any, Sequence

from flask import Flask

from . import config
from .handler import setup_routes

log = logging.getLogger(__name__)


def build_app(client: Any) -> Flask:
    """Return the application with its routes bound to ``client``."""
    app = Flask("otpauth")
    setup_routes(app, client)
    return app


def main(argv: Sequence[str] | None = None) -> int:
    """Load settings, connect to MongoDB and serve until stopped."""
    parser = argparse.ArgumentParser(
        prog="otpauth", description="Serve the phone OTP authentication API."
    )
    parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    config.load_env()
    try:
        client = config.connect_mongodb()
    except (config.ConfigError, config.MongoConnectionError) as exc:
        log.error("%s", exc)
        return 1

    try:
        app = build_app(client)
        port = config.get_env("PORT", "8080")
        log.info("Server running on port %s", port)
        try:
            app.run(host="0.0.0.0", port=int(port))
        except (OSError, ValueError) as exc:
            log.error("Failed to start server: %s", exc)
            return 1
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())