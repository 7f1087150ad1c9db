import os
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


class Settings:
    # -------------------------------------------------------
    # Project
    # -------------------------------------------------------
    PROJECT_NAME: str = "Bittle API"
    ENV: str = os.getenv("ENV", "dev")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # -------------------------------------------------------
    # Supabase (hosted auth + storage)
    # -------------------------------------------------------
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "http://127.0.0.1:54321")
    SUPABASE_ANON_KEY: str = os.getenv("SUPABASE_ANON_KEY", "")

    # -------------------------------------------------------
    # Authentication / JWT
    # -------------------------------------------------------
    SUPABASE_JWT_SECRET: str = os.getenv(
        "SUPABASE_JWT_SECRET",
        "super-secret-jwt-token-with-at-least-32-characters-long",  # local supabase default
    )
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: str = os.getenv("JWT_AUDIENCE", "authenticated")

    # Cookie set by the browser client alongside the session
    ACCESS_TOKEN_COOKIE: str = os.getenv("ACCESS_TOKEN_COOKIE", "sb-access-token")

    # -------------------------------------------------------
    # Routing
    # -------------------------------------------------------
    LOGIN_PATH: str = "/login"
    HOME_PATH: str = "/dashboard/current"

    CORS_ORIGINS: list[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]

    # -------------------------------------------------------
    # Query cache
    # -------------------------------------------------------
    CACHE_TTL_SECONDS: float = float(os.getenv("CACHE_TTL_SECONDS", 30))

    # -------------------------------------------------------
    # Server
    # -------------------------------------------------------
    HOST: str = os.getenv("HOST", "127.0.0.1")
    PORT: int = int(os.getenv("PORT", 8000))


# Single instance that is imported everywhere
settings = Settings()
