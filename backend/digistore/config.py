import os
from functools import lru_cache
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field, HttpUrl, ValidationError

# backend/.. holds the .env next to pyproject.toml
PROJECT_ROOT = Path(__file__).resolve().parents[2]


class Settings(BaseModel):
    supabase_url: HttpUrl = Field(alias="SUPABASE_URL")
    # Row-level security on the table decides what this key may read and write.
    supabase_key: str = Field(alias="SUPABASE_KEY")
    # Signs the session cookie that carries flash messages.
    session_secret: str = Field(alias="SESSION_SECRET", min_length=16)
    env: str = Field(default="local", alias="APP_ENV")
    products_table: str = Field(default="products", alias="PRODUCTS_TABLE")
    whatsapp_contact: str = Field(default="15550100000", alias="WHATSAPP_CONTACT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


def _load_env_file() -> None:
    env_file = PROJECT_ROOT / ".env"
    load_dotenv(env_file if env_file.exists() else None)


def _describe(exc: ValidationError) -> str:
    missing: List[str] = []
    invalid: List[str] = []
    for error in exc.errors():
        name = str(error["loc"][0])
        if error["type"] == "missing":
            missing.append(name)
        else:
            invalid.append(f"{name} ({error['msg']})")
    parts = []
    if missing:
        parts.append(f"set {', '.join(missing)}")
    if invalid:
        parts.append(f"fix {', '.join(invalid)}")
    return "Digistore is not configured: " + "; ".join(parts) + " (see .env.example)"


@lru_cache()
def get_settings() -> Settings:
    _load_env_file()
    try:
        return Settings(**os.environ)
    except ValidationError as exc:
        raise RuntimeError(_describe(exc)) from exc
