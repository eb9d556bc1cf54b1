"""Runtime settings shared by every tool.

- Centralizes the `MKT_CLIS_*` environment variables (pydantic-settings).
- Tool credentials are NOT settings: each tool reads its own fixed variable
  names through the credential gate.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Ambient configuration (timeouts, user agent, logging)."""

    model_config = SettingsConfigDict(
        env_prefix="MKT_CLIS_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Per-request timeout in seconds. Unset means wait for the transport.",
    )
    user_agent: str = Field(
        default="mkt-clis/0.1",
        min_length=1,
        description="User-Agent sent with every request.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Level for the stderr JSON logger (DEBUG, INFO, WARNING, ...).",
    )
    log_json: bool = Field(
        default=True,
        description="Emit log lines as JSON; plain text otherwise.",
    )
