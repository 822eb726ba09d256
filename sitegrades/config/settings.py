from pydantic_settings import BaseSettings
from dotenv import load_dotenv, find_dotenv
from os import getenv
from typing import Optional

_env_path = find_dotenv(usecwd=True)  # locate a .env file in the cwd or parent folders
if _env_path:
    load_dotenv(_env_path)


class Settings(BaseSettings):
    # Database related
    # DATABASE_URL wins over the DB_* parts when set (e.g. sqlite for local runs)
    DATABASE_URL: Optional[str] = getenv('DATABASE_URL')
    DB_HOST_IP: str = getenv('DB_HOST_IP', 'localhost')
    DB_PORT: int = int(getenv('DB_PORT', '5432'))
    DB_USER: str = getenv('DB_USER', 'postgres')
    DB_PASSWORD: str = getenv('DB_PASSWORD', '')
    DB_NAME: str = getenv('DB_NAME', 'sitegrades')

    # Connection pool
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30

    # create missing tables on startup
    DB_CREATE_SCHEMA: bool = True

    # Notification webhooks (optional)
    # These may be unset in environments where notifications aren't configured.
    SLACK_WEBHOOK_URL: Optional[str] = getenv('SLACK_WEBHOOK_URL')
    DISCORD_WEBHOOK_URL: Optional[str] = getenv('DISCORD_WEBHOOK_URL')
    SLACK_MENTION: str = ''
    DISCORD_MENTION: str = ''

    # Process
    LOG_LEVEL: str = 'INFO'
    HOST: str = '0.0.0.0'
    PORT: int = 8000

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg2://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST_IP}:{self.DB_PORT}/{self.DB_NAME}"
        )


settings = Settings()
