# vidinspect/common/settings.py
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from vidinspect.domain.enums.image_format import ImageFormats


class APIConfig(BaseModel):
    prefix: str = "/api"

    cors_allow_origins: List[str] = Field(default_factory=lambda: ["http://localhost:1420", "tauri://localhost"])
    cors_allow_methods: List[str] = Field(default_factory=lambda: ["GET", "POST", "OPTIONS"])
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])


class ToolsConfig(BaseModel):
    # Bundled sidecar directory; binaries are named <tool>-<target-triple>[.exe]
    bin_dir: Path = Path("binaries")
    ffprobe_bin: Optional[Path] = None
    ffmpeg_bin: Optional[Path] = None


class TimeoutsConfig(BaseModel):
    probe_sec: float = Field(30.0, gt=0)
    thumbnail_sec: float = Field(30.0, gt=0, description="Per-frame ffmpeg bound")
    hash_sec: float = Field(300.0, gt=0)
    poll_interval_sec: float = Field(0.1, gt=0, le=5)


class ThumbsConfig(BaseModel):
    count: int = Field(4, ge=1, le=32)
    format: ImageFormats = ImageFormats.PNG
    width: int = Field(320, ge=16, le=4096, description="Max width; frames are never upscaled")
    quality: int = Field(90, ge=1, le=100)
    retry_backoff_sec: float = Field(0.25, gt=0)

    @field_validator("format", mode="before")
    @classmethod
    def _lower(cls, v):
        return str(v).strip().lower() if v is not None else v


class HashingConfig(BaseModel):
    chunk_size: int = Field(1024 * 1024, ge=4096)


class ConcurrencyConfig(BaseModel):
    max_workers: int = Field(4, ge=1, le=64)


class Settings(BaseSettings):
    # -------- App / Env --------
    app_name: str = "vidinspect"
    app_env: str = "development"  # development|test|production
    log_level: str = "INFO"

    # -------- Sub-configs --------
    api: APIConfig = APIConfig()
    tools: ToolsConfig = ToolsConfig()
    timeouts: TimeoutsConfig = TimeoutsConfig()
    thumbs: ThumbsConfig = ThumbsConfig()
    hashing: HashingConfig = HashingConfig()
    concurrency: ConcurrencyConfig = ConcurrencyConfig()

    model_config = SettingsConfigDict(
        env_prefix="VIDINSPECT_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Global settings accessor (cached). Use this everywhere you need config:
        from vidinspect.common.settings import get_settings
        cfg = get_settings()
    """
    return Settings()
