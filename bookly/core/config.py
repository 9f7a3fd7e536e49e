from decimal import Decimal
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Bookly Experiences API"
    API_V1_STR: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "bookly_db"
    POSTGRES_PORT: int = 5432
    DATABASE_URL: str = ""

    # Pricing
    TAX_RATE: Decimal = Decimal("0.059")
    # Off keeps flat promos verbatim even when they exceed the booking amount
    CLAMP_FLAT_DISCOUNT: bool = False

    # Booking references
    BOOKING_REFERENCE_PREFIX: str = "BK"
    BOOKING_REFERENCE_ATTEMPTS: int = 3

    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    def assemble_db_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def is_postgres(self) -> bool:
        return self.DATABASE_URL.startswith("postgresql")


settings = Settings()
settings.DATABASE_URL = settings.assemble_db_url()
