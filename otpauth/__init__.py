"""HTTP API for phone-number sign-in with one-time codes, MongoDB storage and JWTs."""

__version__ = "1.0.0"