"""
Runtime configuration for Podium.

Values come from the environment; a project-level .env file is loaded first
so local overrides don't need to be exported by hand.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_DATA_DIR = Path.home() / ".podium"
DEFAULT_DB_PATH = DEFAULT_DATA_DIR / "outlines.db"
DEFAULT_STORE_TIMEOUT = 5.0  # seconds
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TEMPERATURE = 0.4


class Settings(BaseModel):
    db_path: Path = DEFAULT_DB_PATH
    store_timeout: float = Field(default=DEFAULT_STORE_TIMEOUT, gt=0)
    model: str = DEFAULT_MODEL
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    gemini_api_key: Optional[str] = None


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Build settings from environment variables.

    Args:
        env_file: Optional .env path (default: <project root>/.env)

    Returns:
        Settings populated from PODIUM_* variables and GEMINI_API_KEY
    """
    load_dotenv(env_file or PROJECT_ROOT / ".env")

    values = {}
    if os.environ.get("PODIUM_DB_PATH"):
        values["db_path"] = Path(os.environ["PODIUM_DB_PATH"]).expanduser()
    if os.environ.get("PODIUM_STORE_TIMEOUT"):
        values["store_timeout"] = os.environ["PODIUM_STORE_TIMEOUT"]
    if os.environ.get("PODIUM_MODEL"):
        values["model"] = os.environ["PODIUM_MODEL"]
    if os.environ.get("PODIUM_TEMPERATURE"):
        values["temperature"] = os.environ["PODIUM_TEMPERATURE"]
    values["gemini_api_key"] = os.environ.get("GEMINI_API_KEY") or None

    return Settings(**values)
