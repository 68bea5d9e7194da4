import os
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


class Settings:
    app_id: str = os.getenv("APP_ID", "lightwave-erp-v8")
    database_url: str = os.getenv(
        "DATABASE_URL",
        "sqlite+aiosqlite:///./lightwave.db"
    )
    database_echo: bool = _as_bool(os.getenv("DATABASE_ECHO", "False"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Bypass login, maps to the Owner role
    admin_username: str = os.getenv("ADMIN_USERNAME", "admin")
    admin_password: str = os.getenv("ADMIN_PASSWORD", "123")

    cors_origins: list[str] = [
        o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
    ]

    # When true, bundle merges are capped at inventory stock like increments
    bundle_respects_stock: bool = _as_bool(os.getenv("BUNDLE_RESPECTS_STOCK", "False"))

    # Open drafts untouched for this long are dropped
    draft_idle_minutes: float = float(os.getenv("DRAFT_IDLE_MINUTES", "240"))


settings = Settings()
