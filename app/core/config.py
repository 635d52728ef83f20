"""
Application Configuration
"""
import os
from dataclasses import dataclass, field
from typing import Literal, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "Gemini Image Relay"
    VERSION: str = "1.0.0"
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    AWS_REGION: str = "us-east-1"
    ALLOWED_ORIGINS: str = "http://localhost:3000"
    DEBUG: bool = False

    # Upstream (Gemini generateContent)
    GEMINI_API_BASE: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MODEL_NAME: str = "gemini-2.5-flash-image-preview"
    GEMINI_API_KEY_ENV: str = "GEMINI_API_KEY"
    GEMINI_SECRET_NAME: Optional[str] = None
    UPSTREAM_CONTRACT: Literal["candidates", "image_base64"] = "candidates"
    IMAGE_ASPECT_RATIO: Optional[str] = None

    # Backoff
    MAX_RETRIES: int = 5
    BASE_DELAY_MS: int = 1000
    JITTER_MS: int = 500
    REQUEST_TIMEOUT_SECONDS: float = 60.0

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def allowed_origins(self) -> list:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]


settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency용 설정 객체"""
    return settings


@dataclass
class TracingConfig:
    """OpenTelemetry 트레이싱 설정"""
    otlp_endpoint: str = field(default_factory=lambda: os.getenv("OTLP_ENDPOINT", "http://localhost:4317"))
    service_name: str = field(default_factory=lambda: os.getenv("OTEL_SERVICE_NAME", "gemini-image-relay"))
    enabled: bool = field(default_factory=lambda: os.getenv("TRACING_ENABLED", "false").lower() == "true")
    sample_rate: float = field(default_factory=lambda: float(os.getenv("TRACE_SAMPLE_RATE", "1.0")))
    insecure: bool = True

    @classmethod
    def from_environment(cls) -> "TracingConfig":
        """환경변수에서 TracingConfig 생성"""
        return cls()
