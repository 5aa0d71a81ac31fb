import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # API settings
    api_host: str = os.getenv("API_HOST", "127.0.0.1")
    api_port: int = int(os.getenv("API_PORT", "4567"))
    # Base URL the CLI talks to
    api_base_url: str = os.getenv("API_BASE_URL", f"http://{api_host}:{api_port}")
    http_timeout: float = float(os.getenv("HTTP_TIMEOUT", "10"))

    # Identifier settings
    id_upper_bound: int = int(os.getenv("ID_UPPER_BOUND", str(2**31 - 1)))
    max_id_attempts: int = int(os.getenv("MAX_ID_ATTEMPTS", "100"))

    # Application settings
    app_name: str = os.getenv("APP_NAME", "Bookshelf")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")
    log_level: str = os.getenv("LOG_LEVEL", "DEBUG" if debug else "INFO")


settings = Settings()
