from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str
    JWT_SECRET: str
    JWT_ALGO: str = "HS256"
    LOG_LEVEL: str = "INFO"
    BALANCE_CACHE_ENABLED: bool = True
    SQL_ECHO: bool = False

    class Config:
        env_file = ".env"

settings = Settings()
