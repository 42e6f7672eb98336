"""Settings from the environment (and a .env file, if there is one)."""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from indico_pipeline.extractors.fetch import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT

# Load environment variables (override=True to beat shell env vars)
load_dotenv(override=True)

TRUE_VALUES = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Credentials and transport knobs for talking to Indico."""

    api_key: Optional[str] = None
    secret_key: Optional[str] = None
    use_timestamp: bool = True
    http_timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    model_config = ConfigDict(extra="ignore")


def _flag(value: Optional[str], default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in TRUE_VALUES


def get_settings() -> Settings:
    """Read INDICO_* variables. Unset or empty variables keep the defaults."""
    timeout = os.environ.get("INDICO_HTTP_TIMEOUT")
    return Settings(
        api_key=os.environ.get("INDICO_API_KEY") or None,
        secret_key=os.environ.get("INDICO_SECRET_KEY") or None,
        use_timestamp=_flag(os.environ.get("INDICO_USE_TIMESTAMP"), True),
        http_timeout=float(timeout) if timeout else DEFAULT_TIMEOUT,
        user_agent=os.environ.get("INDICO_USER_AGENT") or DEFAULT_USER_AGENT,
    )
