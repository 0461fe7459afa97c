import os
from dotenv import load_dotenv

# 1. This line finds the local .env file and loads it into memory
load_dotenv()


def _csv(value: str) -> list:
    return [item.strip() for item in value.split(",") if item.strip()]


def _flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Budget Planner API")
    PROJECT_VERSION: str = "0.1.0"

    # 2. Infrastructure Config (Loaded from .env with defaults)
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "budget_user")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "budget_password")
    POSTGRES_SERVER: str = os.getenv("POSTGRES_SERVER", "db")
    POSTGRES_PORT: str = os.getenv("POSTGRES_PORT", "5432")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "budget_db")

    # "development", "test" or "production"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "production").lower()
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    CORS_ORIGINS: list = _csv(os.getenv("CORS_ORIGINS", "*"))

    # 3. Identity Provider Config
    FIREBASE_CREDENTIALS: str = os.getenv("FIREBASE_CREDENTIALS", "")
    FIREBASE_PROJECT_ID: str = os.getenv("FIREBASE_PROJECT_ID", "")
    # Accept unverified tokens when verification fails. Refused outside development.
    AUTH_DEV_FALLBACK: bool = _flag(os.getenv("AUTH_DEV_FALLBACK", "false"))

    # 4. Accounts promoted to admin when they sync
    BOOTSTRAP_ADMIN_EMAILS: list = [e.lower() for e in _csv(os.getenv("BOOTSTRAP_ADMIN_EMAILS", ""))]

    # 5. Construct the Database URL dynamically, unless given in full
    @property
    def DATABASE_URL(self) -> str:
        override = os.getenv("DATABASE_URL")
        if override:
            return override
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"


settings = Settings()
