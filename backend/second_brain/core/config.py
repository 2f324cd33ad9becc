from pydantic_settings import BaseSettings
from typing import List, Union, Optional
from pydantic import field_validator
from functools import lru_cache


class Settings(BaseSettings):
    # Database
    DATABASE_URL: Optional[str] = None  # Overrides the POSTGRES_* components
    POSTGRES_USER: str = "brain"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "brain"
    DB_STATEMENT_TIMEOUT_MS: int = 5000  # Upper bound for a single store call

    @property
    def database_url(self) -> str:
        """Connection address, assembled from components unless given whole."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # Authentication
    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: Optional[int] = None  # None: tokens never expire
    BCRYPT_ROUNDS: int = 12

    # Sharing
    SHARE_HASH_LENGTH: int = 10

    # Application
    API_PREFIX: str = "/api/v1"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: Union[List[str], str] = ["http://localhost:3000"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("SECRET_KEY")
    @classmethod
    def secret_key_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("SECRET_KEY must not be empty")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process; the result is passed on explicitly."""
    return Settings()
