"""Configuration using pydantic-settings."""

from pathlib import Path

from pydantic_settings import BaseSettings

DEFAULT_START_URL = "gemini://geminiprotocol.net/"


class ClientSettings(BaseSettings):
    """Client configuration."""

    start_url: str = DEFAULT_START_URL
    timeout: float = 30.0
    max_redirects: int = 5
    scroll_language: str = "en"
    identity_db: Path = Path.home() / ".smolnet" / "identities.db"

    model_config = {"env_prefix": "SMOLNET_"}


settings = ClientSettings()
