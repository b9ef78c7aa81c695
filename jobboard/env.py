import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite:///data/jobboard.db"
DEFAULT_LOG_LEVEL = "INFO"


def load_env() -> None:
    """Load .env from the working directory if present.
    Variables already set in the environment win.
    """
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path)


def database_url() -> str:
    return os.environ.get("JOBBOARD_DATABASE_URL", DEFAULT_DATABASE_URL)


def log_level() -> str:
    return os.environ.get("JOBBOARD_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()


def log_dir() -> Optional[Path]:
    """Directory for log files; None disables file logging."""
    value = os.environ.get("JOBBOARD_LOG_DIR", "").strip()
    return Path(value) if value else None
