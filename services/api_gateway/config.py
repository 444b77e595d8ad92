import os

from dotenv import load_dotenv

load_dotenv()


class Settings:
    PROJECT_NAME = "Incident Desk"
    VERSION = "0.1.0"

    # Store settings: "sql" or "memory"
    STORE_BACKEND = os.getenv("INCIDENT_DESK_STORE", "sql")
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./incidents.db")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # HTTP server settings
    HOST = os.getenv("HOST", "127.0.0.1")
    PORT = int(os.getenv("PORT", 8000))

    # Dashboard client settings
    API_BASE = os.getenv("API_BASE", "http://127.0.0.1:8000")
    CLOCK_INTERVAL_SEC = float(os.getenv("CLOCK_INTERVAL_SEC", 1.0))
    REQUEST_TIMEOUT_SEC = float(os.getenv("REQUEST_TIMEOUT_SEC", 10.0))


settings = Settings()
