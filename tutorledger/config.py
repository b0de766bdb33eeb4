from functools import lru_cache
import os
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class Settings(BaseModel):
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    database_url: str = Field(default="", alias="DATABASE_URL")
    postgres_db: str = Field(default="tutor", alias="POSTGRES_DB")
    postgres_user: str = Field(default="tutor", alias="POSTGRES_USER")
    postgres_password: str = Field(default="tutor", alias="POSTGRES_PASSWORD")
    postgres_host: str = Field(default="localhost", alias="POSTGRES_HOST")
    postgres_port: int = Field(default=5432, alias="POSTGRES_PORT")

    dashboard_trend_months: int = Field(default=6, alias="DASHBOARD_TREND_MONTHS")
    insights_trend_months: int = Field(default=12, alias="INSIGHTS_TREND_MONTHS")
    currency: str = Field(default="USD", alias="CURRENCY")

    class Config:
        populate_by_name = True

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_dotenv(override=False)
    return Settings(**os.environ)
