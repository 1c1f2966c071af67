"""Application configuration."""

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_GATEWAYS = [
    "https://ipfs.io/ipfs/",
    "https://cloudflare-ipfs.com/ipfs/",
]


class Settings(BaseSettings):
    """
    Application settings.

    Environment variables will be loaded and validated using Pydantic.
    """

    # Registry Settings
    REGISTRY_URL: str = "https://api.thegraph.com/subgraphs/name/ensdomains/ens"
    REGISTRY_API_KEY: str | None = None
    REGISTRY_PAGE_SIZE: int = Field(default=1000, ge=1)
    REGISTRY_PAGE_DELAY: float = Field(default=1.5, ge=0)  # seconds between pages
    REGISTRY_RETRY_BASE_DELAY: float = Field(default=1.5, ge=0)
    REGISTRY_TIMEOUT: float = Field(default=60.0, gt=0)
    RETRY_REPORT_INTERVAL: int = Field(default=10, ge=1)

    # Gateway Settings
    GATEWAYS: list[str] = Field(
        default_factory=lambda: list(DEFAULT_GATEWAYS),
        description="Gateway base URLs in probe order",
    )
    GATEWAY_TIMEOUT: float = Field(default=15.0, gt=0)

    # Snapshot Settings
    INDEX_PATH: Path = Path("data") / "ens-ipfs-index.json"
    RESOLVED_PATH: Path = Path("data") / "resolved-status.json"

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",  # Allow extra fields in environment
    )

    @model_validator(mode="after")
    def validate_gateways(self) -> "Settings":
        """Require at least one gateway."""
        if not self.GATEWAYS:
            raise ValueError("GATEWAYS must contain at least one base URL")
        return self


# Create settings instance
settings = Settings()
