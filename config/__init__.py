import os
from typing import Any


def _read_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _is_secret_weak(secret: str) -> bool:
    normalized = secret.strip().lower()
    return normalized in {"", "dev", "super-secret-key", "changeme"} or len(secret) < 32


def _runtime_environment_name() -> str:
    for env_name in ("MONEYFLOW_ENV", "APP_ENV", "FLASK_ENV"):
        raw = os.getenv(env_name)
        if raw is not None and raw.strip():
            return raw.strip().lower()
    return ""


def _jwt_secret_key() -> str:
    # Tokens are issued by the hosted auth provider and signed with its JWT secret.
    return (
        os.getenv("JWT_SECRET_KEY")
        or os.getenv("SUPABASE_JWT_SECRET")
        or "super-secret-key"
    )


def resolve_database_uri() -> str:
    database_url = os.getenv("DATABASE_URL")
    if database_url:
        return database_url
    return (
        f"postgresql://{os.getenv('DB_USER')}:{os.getenv('DB_PASS')}@"
        f"{os.getenv('DB_HOST')}:{os.getenv('DB_PORT')}/{os.getenv('DB_NAME')}"
    )


def validate_security_configuration() -> None:
    enforce = _read_bool_env("SECURITY_ENFORCE_STRONG_SECRETS", True)

    is_debug = _read_bool_env("FLASK_DEBUG", False)
    is_testing = _read_bool_env("FLASK_TESTING", False)
    runtime_environment = _runtime_environment_name()
    secure_runtime = not is_debug and not is_testing

    if not enforce:
        if secure_runtime:
            raise RuntimeError(
                "Invalid runtime configuration: SECURITY_ENFORCE_STRONG_SECRETS "
                "must be true when FLASK_DEBUG=false and FLASK_TESTING=false."
            )
        return

    if runtime_environment in {"prod", "production"} and is_debug:
        raise RuntimeError(
            "Invalid runtime configuration: FLASK_DEBUG must be false in production."
        )

    if is_testing or is_debug:
        return

    weak = []
    if _is_secret_weak(os.getenv("SECRET_KEY", "dev")):
        weak.append("SECRET_KEY")
    if _is_secret_weak(_jwt_secret_key()):
        weak.append("JWT_SECRET_KEY")

    if weak:
        raise RuntimeError(
            "Weak/invalid secrets for production runtime: "
            + ", ".join(weak)
            + ". Configure strong values in environment variables."
        )


def load_runtime_config() -> dict[str, Any]:
    """Settings read from the environment each time an app is created."""
    return {
        "SECRET_KEY": os.getenv("SECRET_KEY", "dev"),
        "JWT_SECRET_KEY": _jwt_secret_key(),
        "JWT_DECODE_AUDIENCE": os.getenv("JWT_DECODE_AUDIENCE") or None,
        "DEBUG": _read_bool_env("FLASK_DEBUG", False),
        "SQLALCHEMY_DATABASE_URI": resolve_database_uri(),
        "AUTO_CREATE_DB": _read_bool_env("AUTO_CREATE_DB", False),
        "GOAL_SYNC_REOPEN_COMPLETED": _read_bool_env(
            "GOAL_SYNC_REOPEN_COMPLETED", False
        ),
    }


class Config:
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_HEADER_TYPE = "Bearer"
    JWT_ALGORITHM = "HS256"

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    DEBUG = False
    AUTO_CREATE_DB = False
    GOAL_SYNC_REOPEN_COMPLETED = False
