"""Configuration management for formsmith."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _parse_cors_origins() -> list[str]:
    """Parse CORS origins from environment variable."""
    cors_env = os.getenv("CORS_ALLOW_ORIGINS")
    if cors_env:
        return cors_env.split(",")
    return ["*"]


def _parse_registry_path() -> Optional[Path]:
    """Parse the optional JSON registry path from environment variable."""
    registry_env = os.getenv("REGISTRY_PATH")
    if registry_env:
        return Path(registry_env)
    return None


class Settings(BaseModel):
    """Application settings."""

    # Directory holding the DOCX templates named by the registry
    templates_dir: Path = Path(os.getenv("TEMPLATES_DIR", "templates"))

    # Optional JSON file replacing the built-in document types
    registry_path: Optional[Path] = _parse_registry_path()

    # Server settings
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "8000"))
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # CORS settings (comma-separated list of allowed origins, or * for all)
    cors_allow_origins: list[str] = _parse_cors_origins()

    # Value formatting ('indian' groups 12,34,567.00, 'western' groups 1,234,567.00)
    currency_grouping: str = os.getenv("CURRENCY_GROUPING", "indian")

    # Refuse to return documents that still contain unresolved placeholders
    strict_placeholders: bool = os.getenv("STRICT_PLACEHOLDERS", "false").lower() == "true"

    # Templates larger than this are rejected before unpacking
    max_template_bytes: int = int(os.getenv("MAX_TEMPLATE_BYTES", str(20 * 1024 * 1024)))


settings = Settings()
