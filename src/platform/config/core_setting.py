from decimal import Decimal
from pathlib import Path
from typing import List

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Trip Booking Core'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Security (tokens are issued by the external auth service)
    SECRET_KEY: SecretStr = SecretStr('test_secret_key_change_in_production')
    ALGORITHM: str = 'HS256'

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',')]
        elif isinstance(v, list):
            return v
        return []

    # PostgreSQL
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'trip_booking'

    # Connection pool
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30  # seconds to wait for a connection
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_PRE_PING: bool = True

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        return (
            f'postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD.get_secret_value()}'
            f'@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'
        )

    # Pricing
    CURRENCY: str = 'INR'
    PLATFORM_FEE_PERCENTAGE: Decimal = Decimal('5')
    PLATFORM_FEE_MIN: Decimal = Decimal('10')
    PLATFORM_FEE_MAX: Decimal = Decimal('100')
    GST_PERCENTAGE: Decimal = Decimal('18')
    DISPLAY_TIMEZONE: str = 'Asia/Kolkata'  # dates rendered in notifications

    # Booking rules
    BOOKING_DEADLINE_HOURS: float = 2
    DEPARTURE_WARNING_HOURS: float = 4

    # Refund tiers (platform-wide)
    FULL_REFUND_LEAD_HOURS: float = 24
    PARTIAL_REFUND_PERCENTAGE: Decimal = Decimal('50')
    CANCELLATION_SERVICE_FEE: Decimal = Decimal('25')

    # Trip chat
    CHAT_STREAM_BUFFER_SIZE: int = 10
    CHAT_MESSAGE_MAX_LENGTH: int = 1000


settings = Settings()  # type: ignore
