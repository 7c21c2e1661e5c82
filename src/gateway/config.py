# Author: Bradley R. Kinnard — env vars or bust

"""
Settings via pydantic-settings. Reads from env, falls back to .env file.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    log_level: str = "INFO"
    app_version: str = "1.0.0"
    api_prefix: str = ""  # e.g. "/api/v1", routes live at the root by default

    # upstream provider, anything speaking the OpenAI chat completions dialect
    provider_api_key: str = ""  # required unless stub_mode
    provider_base_url: str = "https://api.deepseek.com"
    provider_model: str = "deepseek-chat"
    provider_timeout: float = 30.0  # seconds, hard bound per provider call
    provider_max_tokens: int = 2000
    provider_temperature: float = 0.2

    # stub mode - canned results without hitting the provider
    stub_mode: bool = False

    # extra attempts on timeout/unavailable. 0 = one request, one upstream call
    dispatch_retries: int = 0

    rate_limit: int = 100  # requests per window
    rate_window: int = 900  # seconds
    rate_limit_max_keys: int = 10_000  # sweep expired identities past this
    trust_forwarded_for: bool = False  # only behind a proxy you control

    max_body_bytes: int = 10 * 1024 * 1024  # 10MB, bigger bodies get a 413 before parsing

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # ignore unknown env vars


settings = Settings()
