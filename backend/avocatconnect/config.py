# backend configuration
# loads env vars for mongodb, jwt, gemini, and the portal's lawyer account

import os
from pathlib import Path
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# load .env from project root
load_dotenv(Path(__file__).parent.parent.parent / ".env")


class Settings(BaseSettings):
    # mongodb
    MONGODB_URI: str = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    MONGODB_DATABASE: str = os.getenv("MONGODB_DATABASE", "avocatconnect")

    # jwt auth
    JWT_SECRET: str = os.getenv("JWT_SECRET", "avocatconnect-dev-secret-change-in-production")
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # gemini (summaries, cost estimates, chatbot)
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

    # the lawyer account conversations are held with.
    # empty means "whoever is authenticated as lawyer"
    LAWYER_ID: str = os.getenv("LAWYER_ID", "")

    # cors
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:9002")

    # messaging
    MESSAGE_MAX_LENGTH: int = 5000

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
