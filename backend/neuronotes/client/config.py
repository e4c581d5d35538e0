"""
Client-side settings, read from NEURONOTES_* environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Where the client finds the NeuroNotes API and the auth service."""

    api_url: str = Field(default="http://localhost:8000")
    auth_url: str = Field(default="http://localhost:54321")
    auth_anon_key: str = Field(default="")
    # Applied to every call; a hung request fails instead of pending forever
    request_timeout: float = Field(default=15.0, gt=0, le=300)

    model_config = SettingsConfigDict(
        env_prefix="NEURONOTES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
