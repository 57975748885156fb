"""
Malarkey Service Configuration
"""

from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # ===== Service =====
    SERVICE_NAME: str = Field(default="malarkey")
    SERVICE_VERSION: str = Field(default="1.0.0")
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)
    LOG_LEVEL: str = Field(default="info")
    DEBUG: bool = Field(default=False)

    # ===== CORS =====
    CORS_ORIGINS: List[str] = Field(default=["http://localhost:3000", "http://localhost:8080"])

    # ===== Chain Building =====
    DEFAULT_COHERENCE: int = Field(default=2, ge=1)
    MAX_CORPUS_CHARS: Optional[int] = Field(default=5_000_000)

    # ===== Generation Defaults =====
    DEFAULT_WORD_SEPARATOR: str = Field(default=" ")
    DEFAULT_PARAGRAPH_SEPARATOR: str = Field(default="\n\n")
    # 0 disables the cap
    MAX_GENERATION_ITERATIONS: int = Field(default=1_000_000, ge=0)

    # ===== Model Cache =====
    MAX_CACHED_CHAINS: int = Field(default=32, ge=1)

    # >>> pydantic v2 settings config <<<
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def generation_iteration_cap(self) -> Optional[int]:
        """MAX_GENERATION_ITERATIONS as the generator expects it (None = no cap)."""
        return self.MAX_GENERATION_ITERATIONS or None


settings = Settings()
