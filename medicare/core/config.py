# medicare/core/config.py
import os
from typing import List
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()


def _split_csv(value: str) -> List[str]:
    return [v.strip() for v in (value or "").split(",") if v.strip()]


class Settings(BaseModel):
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "MediCare EMR")
    API_V1_STR: str = os.getenv("API_V1_STR", "/api")

    # CORS (env takes priority)
    BACKEND_CORS_ORIGINS: List[str] = _split_csv(
        os.getenv(
            "CORS_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173",
        ))

    # ---------- Document store ----------
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./medicare.db")

    # ---------- Security ----------
    # tokens are issued by the identity provider; we only verify them
    JWT_SECRET: str = os.getenv("JWT_SECRET", "change-this")
    JWT_ALG: str = os.getenv("JWT_ALG", "HS256")

    # ---------- Logging ----------
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # ---------- Reports ----------
    REPORT_TIMEZONE: str = os.getenv("REPORT_TIMEZONE", "UTC")

    ORG_NAME: str = os.getenv("ORG_NAME", "MediCare Health System")
    ORG_ADDRESS_LINE1: str = os.getenv("ORG_ADDRESS_LINE1",
                                       "123 Healthcare Avenue, Suite 100")
    ORG_ADDRESS_LINE2: str = os.getenv("ORG_ADDRESS_LINE2",
                                       "Metropolis, NY 10001")
    ORG_PHONE: str = os.getenv("ORG_PHONE", "(123) 456-7890")
    ORG_EMAIL: str = os.getenv("ORG_EMAIL", "contact@medicare.health")
    ORG_WEBSITE: str = os.getenv("ORG_WEBSITE", "www.medicare.health")


settings = Settings()
