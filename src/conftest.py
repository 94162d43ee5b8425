"""Test environment: token secrets must exist before api.security is imported."""

import os

os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret")
os.environ.setdefault("ACCESS_TOKEN_EXPIRY", "15m")
os.environ.setdefault("REFRESH_TOKEN_EXPIRY", "7d")
os.environ.setdefault("REFRESHED_ACCESS_TOKEN_EXPIRY", "2d")
