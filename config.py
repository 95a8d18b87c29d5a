from enum import Enum
import logging

from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.logging import RichHandler


class Env(Enum):
    local = "local"
    dev = "dev"
    prod = "prod"


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: Env = Env.local
    db_url: str = "sqlite+aiosqlite:///recipes.db"
    core_model: str = "gpt-4o-mini"
    tips_model: str | None = None
    max_tokens: int = 3000
    timeout: float = 60 * 2
    log_level: str = "INFO"


def configure_logging(level: str | int = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
        force=True,
    )
