from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Notary Intake API"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3005

    database_url: str = "sqlite+aiosqlite:///./notary_intake.db"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    # Submission lookup by session id scans this many recent pending rows
    pending_lookup_limit: int = 20
    default_currency: str = "EUR"
    delivery_postal_price_eur: float = 29.95

    # Client-side draft store
    storage_warning_bytes: int = 4 * 1024 * 1024
    cross_tab_protection_seconds: float = 2.0

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
