"""Environment-driven application settings.

Storage is configured by protean from ``[tool.protean]`` in ``pyproject.toml``;
the settings here cover everything else. ``PROTEAN_ENV`` selects the
environment for both (``development``, ``test``, ``production``), and each
setting can be overridden by its own environment variable.
"""

import os
from dataclasses import dataclass
from functools import lru_cache


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def get_environment() -> str:
    return os.getenv("PROTEAN_ENV", "development").lower()


@dataclass(frozen=True)
class Settings:
    environment: str
    app_name: str
    currency_symbol: str
    session_cookie: str
    session_backend: str
    mail_host: str
    mail_port: int
    mail_from: str
    mail_from_name: str
    strict_order_transitions: bool

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            environment=get_environment(),
            app_name=os.getenv("APP_NAME", "Mini E-Commerce"),
            currency_symbol=os.getenv("CURRENCY_SYMBOL", "€"),
            session_cookie=os.getenv("SESSION_COOKIE", "storefront_session"),
            session_backend=os.getenv("SESSION_BACKEND", "memory").lower(),
            mail_host=os.getenv("MAIL_HOST", "127.0.0.1"),
            mail_port=int(os.getenv("MAIL_PORT", "1025")),
            mail_from=os.getenv("MAIL_FROM", "noreply@ecommerce.local"),
            mail_from_name=os.getenv("MAIL_FROM_NAME", "E-Commerce Shop"),
            strict_order_transitions=_as_bool(os.getenv("STRICT_ORDER_TRANSITIONS")),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
