from dotenv import load_dotenv
from pydantic import AnyHttpUrl, BaseModel, Field, TypeAdapter, ValidationError
from typing import Optional
import os

# Load environment variables from a .env file
load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    return value if value not in (None, "") else default


# Retrieve parts of the database URL from environment variables
DB_USER = _env("DB_USERNAME", "root")
DB_PASSWORD = _env("DB_PASSWORD", "")
DB_HOST = _env("DB_HOST", "127.0.0.1")
DB_PORT = _env("DB_PORT", "3306")
DB_NAME = _env("DB_NAME", "submissions")

# External processing service
EXTERNAL_SERVICE_URL = _env("EXTERNAL_SERVICE_URL")
EXTERNAL_SERVICE_TIMEOUT_MS = int(_env("EXTERNAL_SERVICE_TIMEOUT_MS", "30000"))

LOG_LEVEL = _env("LOG_LEVEL", "INFO")

# Build the database URL, a full DATABASE_URL wins over the parts
DATABASE_URL = _env(
    "DATABASE_URL",
    f"mysql+pymysql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)


class ExternalServiceConfig(BaseModel):
    endpoint_url: Optional[AnyHttpUrl] = None
    timeout_ms: int = Field(default=30000, gt=0)

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


def get_external_service_config() -> ExternalServiceConfig:
    try:
        endpoint_url = TypeAdapter(Optional[AnyHttpUrl]).validate_python(EXTERNAL_SERVICE_URL)
    except ValidationError:
        from .utils.logger import get_logger

        # A bad URL disables delivery instead of failing every submission
        get_logger("config").error(
            "EXTERNAL_SERVICE_URL %r is not a valid http(s) URL", EXTERNAL_SERVICE_URL
        )
        endpoint_url = None
    return ExternalServiceConfig(
        endpoint_url=endpoint_url,
        timeout_ms=EXTERNAL_SERVICE_TIMEOUT_MS,
    )
