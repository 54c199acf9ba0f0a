from typing import List, Union, Optional, Literal
from pydantic import AnyHttpUrl, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    PROJECT_NAME: str = "LunchBay Inventory API"
    API_PREFIX: str = "/api"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    BACKEND_CORS_ORIGINS: List[AnyHttpUrl] = []

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # Storage
    INVENTORY_BACKEND: Literal["sql", "memory"] = "sql"

    # Database
    POSTGRES_SERVER: Optional[str] = None
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_DB: Optional[str] = None
    POSTGRES_PORT: str = "5432"
    DATABASE_URL: Optional[str] = None
    DATABASE_POOL_SIZE: int = 5
    DATABASE_MAX_OVERFLOW: int = 10

    @model_validator(mode='after')
    def assemble_db_connection(self) -> 'Settings':
        if not self.DATABASE_URL:
            if all([self.POSTGRES_USER, self.POSTGRES_PASSWORD, self.POSTGRES_SERVER, self.POSTGRES_DB]):
                self.DATABASE_URL = str(
                    f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@"
                    f"{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
                )
            else:
                self.DATABASE_URL = "sqlite+aiosqlite:///./lunchbay.db"

        if self.DATABASE_URL.startswith("postgresql://"):
            self.DATABASE_URL = self.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://", 1)
        elif self.DATABASE_URL.startswith("sqlite:///"):
            self.DATABASE_URL = self.DATABASE_URL.replace("sqlite:///", "sqlite+aiosqlite:///", 1)

        # asyncpg takes ssl, not sslmode
        self.DATABASE_URL = self.DATABASE_URL.replace("sslmode=require", "ssl=require")

        return self

    # Freshness policy
    EXPIRING_THRESHOLD_DAYS: int = 3

    @field_validator("EXPIRING_THRESHOLD_DAYS")
    @classmethod
    def check_threshold(cls, v: int) -> int:
        if v < 0:
            raise ValueError("EXPIRING_THRESHOLD_DAYS must be >= 0")
        return v

    # Dashboard alerts
    LOW_STOCK_QUANTITY: int = 5
    LOW_STOCK_ALERT_MIN_ITEMS: int = 3

    # Waste impact estimates
    AVERAGE_ITEM_COST: float = 5.0
    WASTE_REDUCTION_RATE: float = 0.7
    MEAL_UNIT: str = "servings"

    # Seed data
    SEED_DEFAULT_CATEGORIES: bool = True
    SEED_SAMPLE_ITEMS: bool = False

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env", extra='ignore')

settings = Settings()
