import os
from dotenv import load_dotenv

load_dotenv()


def _split_origins(raw: str) -> list:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class Settings():
    # Database
    MONGODB_URL: str = os.getenv("MONGODB_URL", "mongodb://localhost:27017")
    MONGODB_DB_NAME: str = os.getenv("MONGODB_DB_NAME", "vegamovies")

    # Admin identity (single hardcoded account, no user table)
    ADMIN_EMAIL: str = os.getenv("ADMIN_EMAIL", "")
    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "")

    # JWT
    SECRET_KEY: str = os.getenv("SECRET_KEY", "your-secret-key-here-change-in-production")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))  # 7 days

    # Session cookie
    ADMIN_COOKIE_NAME: str = os.getenv("ADMIN_COOKIE_NAME", "admin_token")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # CORS
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")
    ALLOWED_ORIGINS: list = _split_origins(os.getenv("ALLOWED_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"))

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3005"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def cookie_secure(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def cors_origins(self) -> list:
        origins = list(self.ALLOWED_ORIGINS)
        for origin in (self.FRONTEND_URL, "http://localhost:3000"):
            if origin and origin not in origins:
                origins.append(origin)
        return origins


settings = Settings()
