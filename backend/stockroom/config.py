# backend/stockroom/config.py
from __future__ import annotations
import os


def _csv(value: str) -> set[str]:
    return {part.strip() for part in value.split(",") if part.strip()}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/stockroom.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///stockroom.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Identity is established upstream (auth gateway); these headers carry it in.
    AUTH_USER_HEADER = os.environ.get("AUTH_USER_HEADER", "X-User-Id")
    AUTH_ROLE_HEADER = os.environ.get("AUTH_ROLE_HEADER", "X-User-Role")
    AUTH_CHEF_HEADER = os.environ.get("AUTH_CHEF_HEADER", "X-Chef-Id")

    MOVEMENT_LIST_LIMIT = int(os.environ.get("MOVEMENT_LIST_LIMIT", "200"))
    AUDIT_LIST_LIMIT = int(os.environ.get("AUDIT_LIST_LIMIT", "200"))

    CORS_ALLOWED_ORIGINS = _csv(
        os.environ.get(
            "CORS_ALLOWED_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173,http://localhost:4173,http://127.0.0.1:4173",
        )
    )
