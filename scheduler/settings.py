import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent
ENV_PATH = BASE_DIR.parent / ".env"
load_dotenv(ENV_PATH)


@dataclass(frozen=True)
class Settings:
    database_url: str = f"sqlite:///{Path.cwd() / 'scheduler.db'}"
    port: int = 7540
    web_dir: str = "./web"
    log_level: str = "INFO"


def get_settings() -> Settings:
    port_raw = os.getenv("SCHEDULER_PORT")
    try:
        port = int(port_raw) if port_raw else Settings.port
    except ValueError:
        raise RuntimeError(f"SCHEDULER_PORT must be an integer, got {port_raw!r}") from None
    return Settings(
        database_url=os.getenv("SCHEDULER_DATABASE_URL") or Settings.database_url,
        port=port,
        web_dir=os.getenv("SCHEDULER_WEB_DIR") or Settings.web_dir,
        log_level=(os.getenv("SCHEDULER_LOG_LEVEL") or Settings.log_level).upper(),
    )
