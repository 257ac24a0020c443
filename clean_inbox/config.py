"""
Settings loaded from the environment (and .env when present)
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


# Load environment variables
load_dotenv()


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value not in (None, ""):
        return value
    return default


@dataclass
class Settings:
    """Runtime configuration"""
    log_level: str = "INFO"

    # LLM provider (any OpenAI-compatible chat completions API)
    llm_api_base: str = "https://openrouter.ai/api/v1"
    llm_api_key: Optional[str] = None
    llm_timeout: int = 60
    default_llm_provider: str = "openrouter"
    default_llm_model: str = "openai/gpt-4o-mini"
    economy_llm_provider: Optional[str] = None
    economy_llm_model: Optional[str] = None

    # Gmail OAuth
    gmail_credentials_path: str = "data/credentials.json"
    gmail_token_path: str = "data/token.json"
    oauth_redirect_uri: str = "http://localhost:8000/oauth/callback"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            log_level=_env("LOG_LEVEL", "INFO").upper(),
            llm_api_base=_env("LLM_API_BASE", cls.llm_api_base),
            llm_api_key=_env("LLM_API_KEY"),
            llm_timeout=int(_env("LLM_TIMEOUT", str(cls.llm_timeout))),
            default_llm_provider=_env("DEFAULT_LLM_PROVIDER", cls.default_llm_provider),
            default_llm_model=_env("DEFAULT_LLM_MODEL", cls.default_llm_model),
            economy_llm_provider=_env("ECONOMY_LLM_PROVIDER"),
            economy_llm_model=_env("ECONOMY_LLM_MODEL"),
            gmail_credentials_path=_env("GMAIL_CREDENTIALS_PATH", cls.gmail_credentials_path),
            gmail_token_path=_env("GMAIL_TOKEN_PATH", cls.gmail_token_path),
            oauth_redirect_uri=_env("OAUTH_REDIRECT_URI", cls.oauth_redirect_uri),
        )


settings = Settings.from_env()
