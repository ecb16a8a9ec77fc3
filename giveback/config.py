from pathlib import Path
from typing import Literal

from dotenv import dotenv_values
from pydantic_settings import BaseSettings

_ENV_FILE = Path.home() / "env" / ".env.dev"
_env_vars = dotenv_values(str(_ENV_FILE)) if _ENV_FILE.exists() else {}


class Settings(BaseSettings):
    app_name: str = "Giveback"
    debug: bool = False
    log_level: str = "INFO"
    database_url: str = "sqlite+aiosqlite:///data/giveback.db"
    data_dir: Path = Path("data")

    # listing store: local database or a hosted PostgREST backend
    store_backend: Literal["sql", "rest"] = "sql"
    store_url: str = ""
    store_api_key: str = ""

    # search page
    page_size: int = 12
    suggestion_limit: int = 5
    suggestion_min_length: int = 2
    debounce_seconds: float = 0.3
    search_timeout: float = 10.0
    default_price_max: int = 1000

    model_config = {
        "env_prefix": "GIVEBACK_",
        "env_file": ".env",
        "extra": "ignore",
    }

    def model_post_init(self, __context):
        if not self.store_api_key:
            self.store_api_key = _env_vars.get("STORE_API_KEY", "")


settings = Settings()
