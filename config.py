"""Application configuration."""
import os
from dataclasses import dataclass
from typing import Optional


DEFAULT_GRIST_API_URL = "https://docs.getgrist.com"


def _env_flag(name: str, default: bool) -> bool:
    """Read a boolean flag from the environment."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() not in ("0", "false", "no", "off")


@dataclass
class GristConfig:
    """Grist destination configuration."""

    doc_id: str
    table_id: str
    api_token: Optional[str] = None
    api_base_url: str = DEFAULT_GRIST_API_URL
    auto_create_columns: bool = True
    timeout: Optional[float] = None  # None keeps the transport default

    @classmethod
    def from_env(cls) -> "GristConfig":
        """Load config from environment variables."""
        return cls(
            doc_id=os.getenv("GRIST_DOC_ID", ""),
            table_id=os.getenv("GRIST_TABLE_ID", ""),
            api_token=os.getenv("GRIST_API_KEY") or None,
            api_base_url=os.getenv("GRIST_API_URL", DEFAULT_GRIST_API_URL),
            auto_create_columns=_env_flag("GRIST_AUTO_CREATE_COLUMNS", True),
        )

    def to_dict(self, include_token: bool = False) -> dict:
        """Convert to dictionary."""
        data = {
            "doc_id": self.doc_id,
            "table_id": self.table_id,
            "api_base_url": self.api_base_url,
            "auto_create_columns": self.auto_create_columns,
        }
        if include_token:
            data["api_token"] = self.api_token
        return data


@dataclass
class SourceApiConfig:
    """Source API configuration."""

    url: str
    auth_header: str = "Authorization"
    auth_token: Optional[str] = None
    timeout: Optional[float] = None

    @classmethod
    def from_env(cls) -> "SourceApiConfig":
        """Load config from environment variables."""
        return cls(
            url=os.getenv("SOURCE_API_URL", ""),
            auth_header=os.getenv("SOURCE_API_HEADER", "Authorization"),
            auth_token=os.getenv("SOURCE_API_TOKEN") or None,
        )
